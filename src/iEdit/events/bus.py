import logging
import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, Iterator, List, Type


@dataclass(kw_only=True)
class Event:
    """Base class for everything published on an :class:`EventBus`."""
    timestamp: datetime = field(default_factory=datetime.now)
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))


@dataclass(eq=False)
class Subscription:
    """Handle returned by :meth:`EventBus.subscribe`."""
    event_type: Type[Event]
    handler: Callable[[Event], None]
    active: bool = True

    def cancel(self):
        self.active = False


class EventBus:
    """Synchronous, single-threaded event registry.

    Each editor owns its own bus, so handlers registered on one editor never
    see events from another.  Subscribing to a base class receives every
    subclass too; ``subscribe(Event, ...)`` observes the whole editor.
    Handlers for the concrete type run first, then those for its bases, each
    group in subscription order.  A handler that raises is logged and the
    remaining handlers still run.
    """

    def __init__(self, logger: logging.Logger = None):
        self._logger = logger or logging.getLogger(__name__)
        self._handlers: Dict[Type[Event], List[Subscription]] = defaultdict(list)

    def subscribe(self, event_type: Type[Event], handler: Callable) -> Subscription:
        if not (isinstance(event_type, type) and issubclass(event_type, Event)):
            raise TypeError(f"{event_type!r} is not an Event type")
        sub = Subscription(event_type, handler)
        self._handlers[event_type].append(sub)
        return sub

    def unsubscribe(self, subscription: Subscription):
        subscription.cancel()
        subs = self._handlers.get(subscription.event_type, [])
        if subscription in subs:
            subs.remove(subscription)

    def _matching(self, event_type: Type[Event]) -> Iterator[Subscription]:
        for cls in event_type.__mro__:
            if cls in self._handlers:
                yield from list(self._handlers[cls])
            if cls is Event:
                break

    def publish(self, event: Event):
        for sub in self._matching(type(event)):
            if not sub.active:
                continue
            try:
                sub.handler(event)
            except Exception:
                self._logger.exception("Handler %r failed for %s", sub.handler, type(event).__name__)

    def handler_count(self, event_type: Type[Event]) -> int:
        """Count the live handlers that would receive an *event_type* event."""
        return sum(1 for sub in self._matching(event_type) if sub.active)

    def clear(self):
        for subs in self._handlers.values():
            for sub in subs:
                sub.cancel()
        self._handlers.clear()
