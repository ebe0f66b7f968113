"""Logging helpers shared by every iEdit module."""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "iEdit"
CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"


class _ConsoleHandler(logging.StreamHandler):
    """Write to whatever ``sys.stderr`` is when a record is emitted."""

    def __init__(self) -> None:
        super().__init__(sys.stderr)

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, value) -> None:
        pass


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the package logger, or a child logger when *name* is given."""

    if not name or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def ensure_console_logger(
    logger: logging.Logger,
    handler_name: str,
    *,
    level: int = logging.INFO,
) -> logging.Handler:
    """Attach a console handler named *handler_name* to *logger* once.

    Calling again with the same name only adjusts the level, so the CLI can
    switch verbosity between invocations in one process.
    """

    handler = next((h for h in logger.handlers if h.get_name() == handler_name), None)
    if handler is None:
        handler = _ConsoleHandler()
        handler.set_name(handler_name)
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        logger.addHandler(handler)
    handler.setLevel(level)
    logger.setLevel(level)
    return handler


__all__ = ["CONSOLE_FORMAT", "LOGGER_NAME", "ensure_console_logger", "get_logger"]
