# topictree/core/middleware.py
from __future__ import annotations
from collections.abc import Callable, Iterable, Sequence
from typing import Any, TYPE_CHECKING

from topictree.core.meta import PublishMeta
from topictree.core.registry import withoutCallbacks

if TYPE_CHECKING:
    from topictree.core.context import TopicContext

import logging
logger = logging.getLogger(__name__)

__all__ = [
    "Deliver", "Middleware", "MiddlewareLink",
    "composeMiddleware", "collectInheritedWares", "recompute",
    "use", "unuse",
]

Deliver = Callable[[Any, PublishMeta], Any]
Middleware = Callable[[Any, PublishMeta, Deliver], Any]



class MiddlewareLink:
    """
    One step of a composed delivery chain.

    Calling the link invokes `ware(payload, meta, next)`; `next` is the rest of
    the chain, ending in the terminal delivery step. A ware that never calls
    `next` stops the payload there.
    """
    __slots__ = ("ware", "next")

    def __init__(self, ware: Middleware, next: Deliver):
        self.ware = ware
        self.next = next

    def __call__(self, payload: Any, meta: PublishMeta) -> Any:
        return self.ware(payload, meta, self.next)

    def __repr__(self) -> str:
        return f"MiddlewareLink({getattr(self.ware, '__qualname__', self.ware)!r})"



def composeMiddleware(wares: Sequence[Middleware], terminal: Deliver) -> Deliver:
    """Wraps `terminal` so that wares run first-to-last before it."""
    composed: Deliver = terminal
    for ware in reversed(wares):
        composed = MiddlewareLink(ware, composed)
    return composed



def collectInheritedWares(context: TopicContext) -> list[Middleware]:
    """Returns the middleware of every ancestor of `context`, root first."""
    chain: list[TopicContext] = []
    ancestor = context.parent
    while ancestor is not None:
        chain.append(ancestor)
        ancestor = ancestor.parent
    wares: list[Middleware] = []
    for ancestor in reversed(chain):
        wares.extend(ancestor.localMiddleware)
    return wares



def recompute(context: TopicContext, inheritedWares: Sequence[Middleware] | None = None) -> TopicContext:
    """
    Rebuilds the composed delivery of `context` and of its whole subtree.

    `inheritedWares` are the ancestor wares in root-first order; when omitted
    they are collected by walking up from `context`.
    """
    if inheritedWares is None:
        inheritedWares = collectInheritedWares(context)

    # Iterative walk so deep trees never hit the recursion limit
    stack: list[tuple[TopicContext, list[Middleware]]] = [(context, list(inheritedWares))]
    rebuilt = 0
    while stack:
        node, inherited = stack.pop()
        effective = inherited + node.localMiddleware
        node.composedDelivery = composeMiddleware(effective, node.deliver)
        rebuilt += 1
        for child in node.children.values():
            stack.append((child, effective))

    logger.debug("Recomputed middleware for %d topic(s) under '%s'.", rebuilt, context.path)
    return context



def _checkCallable(wares: Iterable[Any]) -> list[Middleware]:
    out = list(wares)
    for ware in out:
        if not callable(ware):
            raise TypeError(f"Middleware must be callable, got {type(ware).__name__}")
    return out



def use(context: TopicContext, wares: Iterable[Middleware]) -> None:
    added = _checkCallable(wares)
    if not added:
        return
    context.localMiddleware.extend(added)
    recompute(context)



def unuse(context: TopicContext, wares: Iterable[Middleware]) -> None:
    context.localMiddleware = withoutCallbacks(context.localMiddleware, wares)
    recompute(context)
