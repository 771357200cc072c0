# tests/topictree/core/test_middleware.py
from __future__ import annotations

from topictree.core.middleware import MiddlewareLink, composeMiddleware, collectInheritedWares, recompute


def _counting(calls: list, tag):
    def ware(payload, meta, next):
        calls.append(tag)
        return next(payload, meta)
    return ware


def _starring(calls: list):
    def ware(payload, meta, next):
        payload += "*"
        calls.append(payload)
        return next(payload, meta)
    return ware


# ----------------------------------------
# Composition
# ----------------------------------------

def test_compose_runs_wares_in_order_then_terminal() -> None:
    calls: list = []

    def terminal(payload, meta):
        calls.append(("terminal", payload))

    composed = composeMiddleware([_counting(calls, 1), _counting(calls, 2)], terminal)
    composed("x", None)

    assert isinstance(composed, MiddlewareLink)
    assert calls == [1, 2, ("terminal", "x")]


def test_compose_without_wares_is_the_terminal() -> None:
    def terminal(payload, meta):
        return payload

    assert composeMiddleware([], terminal) is terminal


# ----------------------------------------
# Ordering, inheritance and scoping
# ----------------------------------------

def test_middleware_applies_to_topic_and_subtopics(topic) -> None:
    calls: list = []

    topic.use(_counting(calls, 1), _counting(calls, 2)).publishSync("x").subtopic("foo").publishSync("y")

    assert calls == [1, 2, 1, 2]


def test_ancestor_middleware_runs_before_local(topic) -> None:
    calls: list = []

    topic.use(_counting(calls, 1))
    topic("foo").use(_counting(calls, 2))

    topic("foo").publishSync("x")
    assert calls == [1, 2]

    calls.clear()
    topic.publishSync("y")
    assert calls == [1]


def test_subtopic_middleware_is_not_applied_to_parent(topic) -> None:
    calls: list = []

    topic.use(_counting(calls, 1)).subtopic("foo").use(_counting(calls, 2)).publishSync("y").pop().publishSync("x")

    assert calls == [1, 2, 1]


def test_middleware_does_not_run_for_unrelated_subtopics(topic, accumulator) -> None:
    calls: list = []
    accu = accumulator()

    topic("foo").use(_counting(calls, "foo"))
    topic("bar").subscribe(accu)

    topic("bar").publishSync(1)
    topic.publishSync(2)
    topic("foo.deep").publishSync(3)

    assert calls == ["foo"]
    assert accu.payloads == [1]


def test_topics_created_after_use_inherit_middleware(topic) -> None:
    calls: list = []

    topic("foo").use(_counting(calls, 1))
    topic("foo.created.later").publishSync("x")

    assert calls == [1]


def test_middleware_can_transform_payload(topic, accumulator) -> None:
    accu = accumulator()

    topic.use(lambda payload, meta, next: next(payload * 10, meta))
    topic("foo").subscribe(accu).publishSync(4)

    assert accu.payloads == [40]


def test_middleware_can_veto_delivery(topic, accumulator) -> None:
    accu = accumulator()

    def onlyEven(payload, meta, next):
        if payload % 2 == 0:
            next(payload, meta)

    topic("nums").use(onlyEven).subscribe(accu)
    for n in range(5):
        topic("nums").publishSync(n)

    assert accu.payloads == [0, 2, 4]


def test_middleware_sees_async_meta(topic, scheduler) -> None:
    modes: list[str] = []

    def recordMode(payload, meta, next):
        modes.append(meta.mode)
        next(payload, meta)

    topic.use(recordMode)
    topic("foo").publishSync(1).publishAsync(2)
    scheduler.runPending()

    assert modes == ["sync", "async"]


def test_async_flush_uses_middleware_current_at_flush_time(topic, scheduler) -> None:
    calls: list = []

    topic("foo").publishAsync("x")
    topic.use(_counting(calls, "late"))
    scheduler.runPending()

    assert calls == ["late"]


# ----------------------------------------
# Removal
# ----------------------------------------

def test_unuse_removes_middleware_and_keeps_subtopic_middleware(topic) -> None:
    calls: list = []
    ware1 = _starring(calls)
    ware2 = _starring(calls)

    topic.use(ware1).subtopic("foo").use(ware2).publishSync("x").pop().unuse(ware1).subtopic("foo").publishSync("y")

    assert calls == ["x*", "x**", "y*"]


def test_unuse_removes_only_the_given_middleware(topic) -> None:
    calls: list = []
    ware1 = _starring(calls)
    ware2 = _starring(calls)

    topic.use(ware1).use(ware2).unuse(ware1).subtopic("foo").publishSync("x")

    assert calls == ["x*"]
    assert topic.middleware == (ware2,)


def test_unuse_removes_every_registration_and_ignores_unknown(topic) -> None:
    calls: list = []
    ware = _counting(calls, 1)

    topic.use(ware, ware).unuse(ware, _counting(calls, "unknown"))
    topic.publishSync("x")

    assert calls == []
    assert topic.middleware == ()


# ----------------------------------------
# Explicit recompute
# ----------------------------------------

def test_collect_inherited_wares_is_root_first(topic) -> None:
    calls: list = []
    rootWare = _counting(calls, "root")
    fooWare = _counting(calls, "foo")
    barWare = _counting(calls, "bar")

    topic.use(rootWare)
    topic("foo").use(fooWare)
    topic("foo.bar").use(barWare)

    context = topic("foo.bar.baz")._context
    assert collectInheritedWares(context) == [rootWare, fooWare, barWare]


def test_recompute_rebuilds_whole_subtree(topic) -> None:
    calls: list = []
    topic("a.b.c")
    topic("a.x")

    # Bypass use() and rebuild by hand
    topic("a")._context.localMiddleware.append(_counting(calls, "a"))
    recompute(topic("a")._context)

    topic("a.b.c").publishSync(1)
    topic("a.x").publishSync(2)
    topic.publishSync(3)

    assert calls == ["a", "a"]


def test_recompute_with_explicit_inherited_wares(topic) -> None:
    calls: list = []
    injected = _counting(calls, "injected")
    topic("a.b")

    recompute(topic("a")._context, [injected])
    topic("a.b").publishSync(1)

    assert calls == ["injected"]


def test_recompute_handles_deep_trees(topic) -> None:
    calls: list = []
    deepPath = ".".join(f"n{i}" for i in range(1500))
    leaf = topic(deepPath)

    topic.use(_counting(calls, "root"))
    leaf.publishSync("x")

    assert calls == ["root"]
