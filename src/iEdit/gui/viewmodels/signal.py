"""Toolkit-free notifications for the editing core.

The transformation store and the settings manager announce changes through
:class:`Signal`; a Qt or web front end mirrors them into its own widgets.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

_logger = logging.getLogger(__name__)


class Signal:
    """Callbacks run in connection order on each :meth:`emit`.

    Connecting the same callable twice has no effect.  When a callback
    raises, the traceback is logged and the rest still run.
    """

    def __init__(self) -> None:
        self._handlers: list[Callable] = []

    def connect(self, handler: Callable) -> None:
        if handler not in self._handlers:
            self._handlers.append(handler)

    def disconnect(self, handler: Callable) -> None:
        # ValueError for a callable that was never connected.
        self._handlers.remove(handler)

    def emit(self, *args: Any, **kwargs: Any) -> None:
        for handler in tuple(self._handlers):
            try:
                handler(*args, **kwargs)
            except Exception:
                _logger.exception("Handler %r raised while emitting %r", handler, args)

    @property
    def handler_count(self) -> int:
        return len(self._handlers)
