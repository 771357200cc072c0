# topictree/core/context.py
from __future__ import annotations
import weakref
from collections.abc import Iterator
from typing import Any, TYPE_CHECKING

from topictree.core.delivery import post
from topictree.core.handle import TopicHandle
from topictree.core.meta import PublishMeta
from topictree.core.middleware import Deliver, Middleware, composeMiddleware, collectInheritedWares
from topictree.core.paths import ROOT_PATH, joinPath
from topictree.core.registry import Subscriber

if TYPE_CHECKING:
    from topictree.core.tree import TopicTree

__all__ = ["TopicContext"]



class TopicContext:
    """
    One node of the topic tree. Private: callers only ever see its handle.

    A context owns its children and its own lists (subscribers, middleware,
    pending async batch). It refers to its parent weakly; the tree keeps the
    root alive and every context keeps its tree alive.
    """
    def __init__(self, tree: TopicTree, name: str = ROOT_PATH, parent: TopicContext | None = None) -> None:
        self.tree = tree
        self.name = name
        self.path = joinPath(parent.path, name) if parent is not None else ROOT_PATH
        self._parentRef: weakref.ref[TopicContext] | None = weakref.ref(parent) if parent is not None else None
        self.children: dict[str, TopicContext] = {}

        self.persistentSubscribers: list[Subscriber] = []
        self.onceSubscribers: list[Subscriber] = []
        self.localMiddleware: list[Middleware] = []
        self.pendingAsyncBatch: list[tuple[Any, PublishMeta]] = []
        self.sequenceCounter = 1
        self.pendingFlush: Any = None  # scheduler token of the flush draining pendingAsyncBatch

        # New nodes start with whatever their ancestors already use
        self.composedDelivery: Deliver = composeMiddleware(collectInheritedWares(self), self.deliver)
        self.handle = TopicHandle(self)

    def __repr__(self) -> str:
        return f"TopicContext(path={self.path!r})"

    @property
    def parent(self) -> TopicContext | None:
        return self._parentRef() if self._parentRef is not None else None

    @property
    def isRoot(self) -> bool:
        return self._parentRef is None

    def child(self, name: str) -> TopicContext:
        """Returns the child called `name`, creating it on first use."""
        node = self.children.get(name)
        if node is None:
            node = self.children[name] = TopicContext(self.tree, name, self)
        return node

    def iterSubtree(self) -> Iterator[TopicContext]:
        """Yields this context then every descendant (depth-first, pre-order)."""
        stack: list[TopicContext] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(list(node.children.values())))

    def nextSequence(self) -> int:
        seq = self.sequenceCounter
        self.sequenceCounter += 1
        return seq

    def makeMeta(self, *, isAsync: bool) -> PublishMeta:
        return PublishMeta(
            contextId=self.nextSequence(),
            originalPath=self.path,
            path=self.path,
            isAsync=isAsync,
        )

    def deliver(self, payload: Any, meta: PublishMeta) -> None:
        post(self, payload, meta)
