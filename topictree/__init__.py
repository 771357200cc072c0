# topictree/__init__.py
from __future__ import annotations

from topictree.core.errors import (
    TopicTreeError,
    InvalidTopicPathError,
    NoEventLoopError,
    SettingsError,
)
from topictree.core.handle import TopicHandle
from topictree.core.meta import PublishMeta
from topictree.core.scheduler import LoopScheduler, ManualScheduler, Scheduler
from topictree.core.settings import TopicTreeSettings, loadSettings
from topictree.core.tree import Topic, TopicTree

__all__ = [
    "Topic",
    "TopicTree",
    "TopicHandle",
    "PublishMeta",
    "Scheduler",
    "LoopScheduler",
    "ManualScheduler",
    "TopicTreeSettings",
    "loadSettings",
    "TopicTreeError",
    "InvalidTopicPathError",
    "NoEventLoopError",
    "SettingsError",
]
