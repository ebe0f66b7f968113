"""Qt timer backed :class:`~iEdit.gui.scheduling.Scheduler`."""

from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer

from .scheduling import Scheduler, TimerHandle


class _QtTimerHandle(TimerHandle):
    def __init__(self, timer: QTimer, release: Callable[[QTimer], None]) -> None:
        self._timer = timer
        self._release = release

    def cancel(self) -> None:
        if self._timer.isActive():
            self._timer.stop()
        self._release(self._timer)

    @property
    def active(self) -> bool:
        return self._timer.isActive()


class QtScheduler(Scheduler):
    """Schedule callbacks on single-shot ``QTimer`` instances.

    Timers are parented to *parent* when given so their lifetime follows the
    host's object tree; the scheduler also keeps a reference until they fire.
    """

    def __init__(self, parent: Optional[QObject] = None) -> None:
        self._parent = parent
        self._timers: set[QTimer] = set()

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        timer.setInterval(max(0, int(delay_ms)))

        def _on_timeout() -> None:
            self._release(timer)
            callback()

        timer.timeout.connect(_on_timeout)
        self._timers.add(timer)
        timer.start()
        return _QtTimerHandle(timer, self._release)

    @property
    def active_timers(self) -> int:
        return len(self._timers)

    def _release(self, timer: QTimer) -> None:
        self._timers.discard(timer)


__all__ = ["QtScheduler"]
