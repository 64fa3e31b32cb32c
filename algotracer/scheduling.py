"""One-shot cancellable timers for cooperative, single-threaded playback."""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from abc import ABC, abstractmethod
from typing import Callable

logger = logging.getLogger(__name__)


class ScheduledCall(ABC):
    """Handle for a pending callback."""

    @abstractmethod
    def cancel(self) -> None:
        """Prevent the callback from running. Safe to call repeatedly."""
        ...

    @property
    @abstractmethod
    def cancelled(self) -> bool: ...


class Scheduler(ABC):
    """Runs a callback once after a delay on the control thread."""

    @abstractmethod
    def schedule(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        ...


class _AsyncioCall(ScheduledCall):
    def __init__(self, handle: asyncio.TimerHandle):
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._handle.cancelled()


class AsyncioScheduler(Scheduler):
    """Wraps ``loop.call_later``; uses the running loop unless one is given."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def schedule(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        loop = self._loop or asyncio.get_running_loop()
        return _AsyncioCall(loop.call_later(delay, callback))


class _ManualCall(ScheduledCall):
    def __init__(self, due: float, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler(Scheduler):
    """Virtual clock: callbacks run only when the test or caller advances time."""

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[tuple[float, int, _ManualCall]] = []
        self._seq = itertools.count()

    def schedule(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        call = _ManualCall(self.now + delay, callback)
        heapq.heappush(self._queue, (call.due, next(self._seq), call))
        return call

    @property
    def pending(self) -> int:
        return sum(1 for _, _, call in self._queue if not call.cancelled)

    def _pop_live(self, until: float | None) -> _ManualCall | None:
        while self._queue:
            due, _, call = self._queue[0]
            if call.cancelled:
                heapq.heappop(self._queue)
                continue
            if until is not None and due > until:
                return None
            heapq.heappop(self._queue)
            return call
        return None

    def run_next(self) -> bool:
        """Jump to and run the earliest pending callback. False if none."""
        call = self._pop_live(until=None)
        if call is None:
            return False
        self.now = max(self.now, call.due)
        call.callback()
        return True

    def advance(self, seconds: float) -> int:
        """Move the clock forward, running every callback that comes due."""
        target = self.now + seconds
        fired = 0
        while True:
            call = self._pop_live(until=target)
            if call is None:
                break
            self.now = max(self.now, call.due)
            call.callback()
            fired += 1
        self.now = target
        logger.debug("ManualScheduler advanced to %.3f (%d fired)", self.now, fired)
        return fired
