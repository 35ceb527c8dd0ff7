"""Cancellable scheduled tasks used by timed study sessions.

Sessions never talk to an event loop directly.  They receive a
:class:`Scheduler` and keep the returned :class:`TaskHandle` objects so
that disposing a session cancels everything it scheduled.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from typing import Callable, List, Optional, Tuple

Callback = Callable[[], None]


class TaskHandle:
    """Reference to a pending one-shot or repeating task."""

    def __init__(self) -> None:
        self.cancelled = False
        self._on_cancel: Optional[Callback] = None

    def cancel(self) -> None:
        if self.cancelled:
            return
        self.cancelled = True
        if self._on_cancel is not None:
            self._on_cancel()
            self._on_cancel = None


class Scheduler:
    """Interface shared by the concrete schedulers."""

    def now(self) -> float:
        raise NotImplementedError

    def call_later(self, delay: float, callback: Callback) -> TaskHandle:
        raise NotImplementedError

    def call_every(self, interval: float, callback: Callback) -> TaskHandle:
        """Run *callback* every *interval* seconds until the handle is cancelled."""

        if interval <= 0:
            raise ValueError("interval must be positive")
        handle = TaskHandle()

        def fire() -> None:
            if handle.cancelled:
                return
            callback()
            if not handle.cancelled:
                rearm()

        def rearm() -> None:
            inner = self.call_later(interval, fire)
            handle._on_cancel = inner.cancel

        rearm()
        return handle


class AsyncioScheduler(Scheduler):
    """Schedule callbacks on an asyncio event loop.

    All callbacks run on the loop thread, so sessions driven by this
    scheduler must also receive their input events on that thread.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self.loop = loop or asyncio.get_running_loop()

    def now(self) -> float:
        return self.loop.time()

    def call_later(self, delay: float, callback: Callback) -> TaskHandle:
        handle = TaskHandle()
        timer = self.loop.call_later(max(delay, 0.0), callback)
        handle._on_cancel = timer.cancel
        return handle


class ManualScheduler(Scheduler):
    """Virtual clock that only moves when :meth:`advance` is called."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._queue: List[Tuple[float, int, TaskHandle, Callback]] = []
        self._counter = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callback) -> TaskHandle:
        handle = TaskHandle()
        due = self._now + max(delay, 0.0)
        heapq.heappush(self._queue, (due, next(self._counter), handle, callback))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for _, _, handle, _ in self._queue if not handle.cancelled)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing every callback that falls due."""

        target = self._now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, handle, callback = heapq.heappop(self._queue)
            self._now = max(self._now, due)
            if not handle.cancelled:
                handle.cancelled = True
                callback()
        self._now = target


__all__ = [
    "AsyncioScheduler",
    "ManualScheduler",
    "Scheduler",
    "TaskHandle",
]
