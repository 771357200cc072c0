# topictree/core/tree.py
from __future__ import annotations

from topictree.core.context import TopicContext
from topictree.core.handle import TopicHandle
from topictree.core.scheduler import LoopScheduler, Scheduler
from topictree.core.settings import TopicTreeSettings, loadSettings

__all__ = ["TopicTree", "Topic"]



class TopicTree:
    """
    Owner of one topic hierarchy: the root context, the scheduler used for
    deferred flushes, and the settings every context of the tree reads.
    """
    def __init__(self, *, scheduler: Scheduler | None = None, settings: TopicTreeSettings | None = None) -> None:
        self.scheduler: Scheduler = scheduler if scheduler is not None else LoopScheduler()
        self.settings: TopicTreeSettings = settings if settings is not None else loadSettings()
        self.root = TopicContext(self)

    @property
    def handle(self) -> TopicHandle:
        return self.root.handle



def Topic(*, scheduler: Scheduler | None = None, settings: TopicTreeSettings | None = None) -> TopicHandle:
    """Creates a new, empty topic tree and returns its root topic (path "")."""
    return TopicTree(scheduler=scheduler, settings=settings).handle
