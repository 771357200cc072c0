# topictree/core/handle.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

from topictree.core import delivery, middleware, registry
from topictree.core.middleware import Middleware
from topictree.core.paths import splitPath
from topictree.core.registry import Subscriber

if TYPE_CHECKING:
    from topictree.core.context import TopicContext

__all__ = ["TopicHandle"]



@dataclass(frozen=True, eq=False, repr=False)
class TopicHandle:
    """
    Public face of one topic.

    Call it with a dotted path to get (and lazily create) a subtopic:

        topic = Topic()
        topic("chat.room1").subscribe(onMessage).publishSync({"text": "hi"})

    Mutating methods return the handle itself so calls can be chained. The
    handle is frozen and always stays bound to the same topic.
    """
    _context: TopicContext

    def __repr__(self) -> str:
        return f"TopicHandle(path={self._context.path!r})"

    # ----- Navigation -----

    def __call__(self, path: str | None = None) -> TopicHandle:
        if path is None or path == "":
            return self
        node = self._context
        for segment in splitPath(path):
            node = node.child(segment)
        return node.handle

    def subtopic(self, path: str | None = None) -> TopicHandle:
        return self(path)

    def pop(self) -> TopicHandle:
        """Returns the parent topic, or this topic when it is the root."""
        parent = self._context.parent
        return parent.handle if parent is not None else self

    def parent(self) -> TopicHandle:
        return self.pop()

    # ----- Read-only views -----

    @property
    def path(self) -> str:
        return self._context.path

    @property
    def name(self) -> str:
        return self._context.name

    @property
    def isRoot(self) -> bool:
        return self._context.isRoot

    @property
    def subscribers(self) -> tuple[Subscriber, ...]:
        return tuple(self._context.persistentSubscribers)

    @property
    def onceSubscribers(self) -> tuple[Subscriber, ...]:
        return tuple(self._context.onceSubscribers)

    @property
    def middleware(self) -> tuple[Middleware, ...]:
        return tuple(self._context.localMiddleware)

    @property
    def childNames(self) -> tuple[str, ...]:
        return tuple(self._context.children)

    @property
    def pendingCount(self) -> int:
        return len(self._context.pendingAsyncBatch)

    # ----- Subscriptions -----

    def subscribe(self, *callbacks: Subscriber) -> TopicHandle:
        """Registers callbacks `(payload, meta)` for every future publish."""
        registry.subscribe(self._context, callbacks)
        return self

    def once(self, *callbacks: Subscriber) -> TopicHandle:
        """Registers callbacks that fire for the next publish only."""
        registry.subscribeOnce(self._context, callbacks)
        return self

    def unsubscribe(self, *callbacks: Subscriber) -> TopicHandle:
        """Removes the given callbacks, or every callback of this topic when none are given."""
        registry.unsubscribe(self._context, callbacks)
        return self

    def clear(self) -> TopicHandle:
        """Removes every callback from this topic and all of its subtopics."""
        registry.clear(self._context)
        return self

    # ----- Middleware -----

    def use(self, *wares: Middleware) -> TopicHandle:
        """Adds middleware `(payload, meta, next)` for this topic and its subtopics."""
        middleware.use(self._context, wares)
        return self

    def unuse(self, *wares: Middleware) -> TopicHandle:
        middleware.unuse(self._context, wares)
        return self

    # ----- Publishing -----

    def publish(self, payload: Any = None, isAsync: bool | None = None) -> TopicHandle:
        delivery.publish(self._context, payload, isAsync)
        return self

    def publishSync(self, payload: Any = None) -> TopicHandle:
        delivery.publishSync(self._context, payload)
        return self

    def publishAsync(self, payload: Any = None) -> TopicHandle:
        delivery.publishAsync(self._context, payload)
        return self
