import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from iEdit.errors import ApplicationError, DomainError, InfrastructureError
from iEdit.events.bus import Event, EventBus


class ErrorSeverity(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


def error_layer(error: Exception) -> str:
    """Name the layer of the hierarchy *error* belongs to."""
    if isinstance(error, DomainError):
        return "domain"
    if isinstance(error, ApplicationError):
        return "application"
    if isinstance(error, InfrastructureError):
        return "infrastructure"
    return "unclassified"


# Invalid data read back from a document is recoverable; everything else
# means a requested operation did not happen.
_DEFAULT_SEVERITY = {
    "domain": ErrorSeverity.WARNING,
    "application": ErrorSeverity.ERROR,
    "infrastructure": ErrorSeverity.ERROR,
    "unclassified": ErrorSeverity.ERROR,
}


@dataclass(kw_only=True)
class ErrorOccurredEvent(Event):
    error: Exception
    severity: ErrorSeverity
    layer: str = "unclassified"
    context: dict = field(default_factory=dict)


class ErrorHandler:
    """Log an error, publish it on the editor's bus and forward serious ones to the UI."""

    def __init__(self, logger: logging.Logger, event_bus: EventBus):
        self._logger = logger
        self._events = event_bus
        self._ui_callback: Optional[Callable[[str, ErrorSeverity], None]] = None
        self._last: Optional[ErrorOccurredEvent] = None

    @property
    def last_error(self) -> Optional[ErrorOccurredEvent]:
        return self._last

    def register_ui_callback(self, callback: Callable[[str, ErrorSeverity], None]):
        self._ui_callback = callback

    def handle(
        self,
        error: Exception,
        severity: Optional[ErrorSeverity] = None,
        context: Optional[dict] = None,
    ) -> ErrorOccurredEvent:
        layer = error_layer(error)
        severity = severity or _DEFAULT_SEVERITY[layer]
        context = dict(context or {})

        log_method = getattr(self._logger, severity.value, self._logger.error)
        log_method(
            "%s (%s): %s",
            error.__class__.__name__,
            layer,
            error,
            extra={"context": context},
        )

        event = ErrorOccurredEvent(error=error, severity=severity, layer=layer, context=context)
        self._last = event
        self._events.publish(event)

        if self._ui_callback and severity in (ErrorSeverity.ERROR, ErrorSeverity.CRITICAL):
            self._ui_callback(str(error), severity)
        return event
