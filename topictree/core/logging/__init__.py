# topictree/core/logging/__init__.py
from __future__ import annotations

from .context import setLogContext, clearLogContext, getLogContext, boundLogContext
from .setup import configureLogging
from .util import getLogger

__all__ = [
    "configureLogging",
    "getLogger",
    "setLogContext",
    "clearLogContext",
    "getLogContext",
    "boundLogContext",
]
