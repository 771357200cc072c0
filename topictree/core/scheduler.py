# topictree/core/scheduler.py
from __future__ import annotations
import asyncio
from asyncio import AbstractEventLoop
from collections import deque
from collections.abc import Callable
from typing import Any, Protocol, TYPE_CHECKING

from topictree.core.errors import NoEventLoopError

if TYPE_CHECKING:
    from topictree.core.context import TopicContext

import logging
logger = logging.getLogger(__name__)

__all__ = ["Scheduler", "LoopScheduler", "ManualScheduler"]



class Scheduler(Protocol):
    """Where deferred flushes run and where their failures are reported."""

    def schedule(self, callback: Callable[..., Any], *args: Any) -> Any:
        """Queues `callback(*args)` and returns a token for `isPending`."""
        ...

    def isPending(self, token: Any) -> bool:
        """False once the work behind `token` can no longer run."""
        ...

    def reportError(self, context: TopicContext, error: BaseException) -> None: ...



class LoopScheduler:
    """
    Runs deferred work on an asyncio event loop via `call_soon`.

    Without an explicit loop, the running loop of the caller is used. Failures
    of deferred work go to the loop's exception handler, since no publish
    caller is waiting for them.
    """
    def __init__(self, loop: AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def _resolveLoop(self) -> AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError as err:
            raise NoEventLoopError(
                "publishAsync() needs a running asyncio event loop; "
                "publish from a coroutine, pass LoopScheduler(loop=...) or use ManualScheduler"
            ) from err

    def schedule(self, callback: Callable[..., Any], *args: Any) -> tuple[AbstractEventLoop, asyncio.Handle]:
        loop = self._resolveLoop()
        return loop, loop.call_soon(callback, *args)

    def isPending(self, token: tuple[AbstractEventLoop, asyncio.Handle]) -> bool:
        """
        A callback handed to a loop is lost when that loop is closed, when the
        handle was cancelled, or (for the caller's loop) when that loop stopped
        and another loop is now running in its place.
        """
        loop, handle = token
        if loop.is_closed() or handle.cancelled():
            return False
        if loop.is_running() or self._loop is not None:
            return True
        try:
            current = asyncio.get_running_loop()
        except RuntimeError:
            return True
        return current is loop

    def reportError(self, context: TopicContext, error: BaseException) -> None:
        self._resolveLoop().call_exception_handler({
            "message": f"Deferred delivery on topic '{context.path}' failed",
            "exception": error,
            "topic": context.path,
        })



class ManualScheduler:
    """
    Queues deferred work until `runPending()` is called.

    Meant for synchronous hosts and tests that want to step the deferred
    queue explicitly. Reported errors are logged and kept in `errors`.
    """
    def __init__(self) -> None:
        self._queue: deque[tuple[Callable[..., Any], tuple[Any, ...]]] = deque()
        self.errors: list[tuple[str, BaseException]] = []

    @property
    def pending(self) -> int:
        return len(self._queue)

    def schedule(self, callback: Callable[..., Any], *args: Any) -> tuple[Callable[..., Any], tuple[Any, ...]]:
        entry = (callback, args)
        self._queue.append(entry)
        return entry

    def isPending(self, token: tuple[Callable[..., Any], tuple[Any, ...]]) -> bool:
        return any(entry is token for entry in self._queue)

    def runPending(self) -> int:
        """Runs queued callbacks, including ones queued meanwhile. Returns how many ran."""
        ran = 0
        while self._queue:
            callback, args = self._queue.popleft()
            callback(*args)
            ran += 1
        return ran

    def reportError(self, context: TopicContext, error: BaseException) -> None:
        logger.error(
            "Deferred delivery on topic '%s' failed.",
            context.path,
            exc_info=(type(error), error, error.__traceback__),
        )
        self.errors.append((context.path, error))
