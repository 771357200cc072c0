# topictree/core/errors.py
from __future__ import annotations

__all__ = ["TopicTreeError", "InvalidTopicPathError", "NoEventLoopError", "SettingsError"]



class TopicTreeError(Exception):
    """Base class for every error raised by topictree itself."""
    pass



class InvalidTopicPathError(TopicTreeError, ValueError):
    """Raised when a dotted topic path cannot be split into valid segments."""
    def __init__(self, path: str, reason: str):
        super().__init__(f"Invalid topic path '{path}': {reason}")
        self.path = path
        self.reason = reason



class NoEventLoopError(TopicTreeError, RuntimeError):
    """Raised when an async publish needs an event loop and none is running."""
    pass



class SettingsError(TopicTreeError):
    """Raised when merged settings fail validation."""
    pass
