"""Timer abstraction used for debouncing.

Controllers never talk to a toolkit timer directly.  Headless code and tests
drive a :class:`ManualScheduler`; Qt hosts plug in
:class:`iEdit.gui.qt_scheduler.QtScheduler`.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

_LOGGER = logging.getLogger(__name__)


class TimerHandle(ABC):
    @abstractmethod
    def cancel(self) -> None:
        pass

    @property
    @abstractmethod
    def active(self) -> bool:
        pass


class Scheduler(ABC):
    """Run a callback once after a delay in milliseconds."""

    @abstractmethod
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        pass


class _ManualHandle(TimerHandle):
    def __init__(self, due: int, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self._active = True

    def cancel(self) -> None:
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def fire(self) -> None:
        self._active = False
        self.callback()


class ManualScheduler(Scheduler):
    """Scheduler whose clock only moves when :meth:`advance` is called."""

    def __init__(self) -> None:
        self._now = 0
        self._counter = itertools.count()
        self._queue: list[tuple[int, int, _ManualHandle]] = []

    @property
    def now(self) -> int:
        return self._now

    @property
    def pending(self) -> int:
        return sum(1 for _, _, handle in self._queue if handle.active)

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        handle = _ManualHandle(self._now + max(0, int(delay_ms)), callback)
        heapq.heappush(self._queue, (handle.due, next(self._counter), handle))
        return handle

    def advance(self, delay_ms: int) -> int:
        """Move the clock forward and run every callback that became due.

        Callbacks scheduled while advancing run too if they fall inside the
        window.  Returns the number of callbacks executed.
        """

        target = self._now + max(0, int(delay_ms))
        executed = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            if not handle.active:
                continue
            self._now = due
            handle.fire()
            executed += 1
        self._now = target
        return executed

    def flush(self) -> int:
        """Run everything that is still pending, regardless of its delay."""

        executed = 0
        while self._queue:
            due, _, handle = heapq.heappop(self._queue)
            if not handle.active:
                continue
            self._now = max(self._now, due)
            handle.fire()
            executed += 1
        return executed


class Debouncer:
    """Collapse bursts of :meth:`trigger` calls into one callback.

    Every trigger restarts the quiet window; the callback runs once the
    window elapses without another trigger.
    """

    def __init__(self, scheduler: Scheduler, delay_ms: int, callback: Callable[..., Any]) -> None:
        self._scheduler = scheduler
        self._delay_ms = delay_ms
        self._callback = callback
        self._handle: Optional[TimerHandle] = None
        self._args: tuple[Any, ...] = ()

    @property
    def delay_ms(self) -> int:
        return self._delay_ms

    @property
    def pending(self) -> bool:
        return self._handle is not None and self._handle.active

    def trigger(self, *args: Any) -> None:
        self._args = args
        if self._handle is not None:
            self._handle.cancel()
        self._handle = self._scheduler.call_later(self._delay_ms, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        args, self._args = self._args, ()
        self._callback(*args)


__all__ = ["Debouncer", "ManualScheduler", "Scheduler", "TimerHandle"]
