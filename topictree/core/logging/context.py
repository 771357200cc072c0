# topictree/core/logging/context.py
from __future__ import annotations
import contextvars
from collections.abc import Iterator
from contextlib import contextmanager

# Per-delivery log context (topicPath, publishId, mode). Filled by the delivery engine when tracing.
_logContextVar: contextvars.ContextVar[dict[str, object] | None] = contextvars.ContextVar("topictree.logctx", default=None)

def setLogContext(**kvs):
    """Set or update per-log context values (topicPath, publishId, etc.)."""
    current = dict(_logContextVar.get() or {}) # use copy
    for key, value in kvs.items():
        if value is not None:
            current[key] = value
    _logContextVar.set(current)

def clearLogContext():
    _logContextVar.set(None)

def getLogContext():
    """Return current content dict or None."""
    return _logContextVar.get()

@contextmanager
def boundLogContext(**kvs) -> Iterator[dict[str, object]]:
    """
    Layers `kvs` over the current context for the duration of the block and
    restores the previous context afterwards, so nested publishes keep the
    outer publish's context once they return.
    """
    current = dict(_logContextVar.get() or {})
    current.update({key: value for key, value in kvs.items() if value is not None})
    token = _logContextVar.set(current)
    try:
        yield current
    finally:
        _logContextVar.reset(token)
