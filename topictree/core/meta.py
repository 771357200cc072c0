# topictree/core/meta.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Literal

__all__ = ["PublishMeta"]



@dataclass(slots=True)
class PublishMeta:
    """
    Per-publish record handed to every middleware and subscriber.

    - contextId: sequence number of this publish on the originating topic
    - originalPath: path of the topic `publish` was called on
    - path: path of the topic currently delivering (rewritten per hop)
    - isAsync: True when published through the deferred, coalesced path
    """
    contextId: int
    originalPath: str
    path: str
    isAsync: bool

    @property
    def mode(self) -> Literal["sync", "async"]:
        return "async" if self.isAsync else "sync"
