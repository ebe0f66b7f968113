from dataclasses import dataclass

import pytest

from iEdit.events.bus import Event, EventBus


@dataclass(kw_only=True)
class SimpleEvent(Event):
    payload: str = ""


@dataclass(kw_only=True)
class OtherEvent(Event):
    pass


def test_sync_subscribe_publish():
    bus = EventBus()
    received = []

    bus.subscribe(SimpleEvent, lambda event: received.append(event.payload))
    bus.publish(SimpleEvent(payload="hello"))

    assert received == ["hello"]


def test_handlers_only_receive_their_type():
    bus = EventBus()
    received = []
    bus.subscribe(SimpleEvent, received.append)

    bus.publish(OtherEvent())

    assert received == []


def test_unsubscribe_and_cancel():
    bus = EventBus()
    received = []
    first = bus.subscribe(SimpleEvent, lambda event: received.append("first"))
    second = bus.subscribe(SimpleEvent, lambda event: received.append("second"))

    bus.unsubscribe(first)
    second.cancel()
    bus.publish(SimpleEvent())

    assert received == []
    assert bus.handler_count(SimpleEvent) == 0


def test_failing_handler_is_isolated():
    bus = EventBus()
    received = []

    def broken(event):
        raise RuntimeError("boom")

    bus.subscribe(SimpleEvent, broken)
    bus.subscribe(SimpleEvent, lambda event: received.append(event.payload))
    bus.publish(SimpleEvent(payload="still delivered"))

    assert received == ["still delivered"]


def test_clear_removes_everything():
    bus = EventBus()
    sub = bus.subscribe(SimpleEvent, lambda event: None)

    bus.clear()

    assert sub.active is False
    assert bus.handler_count(SimpleEvent) == 0


def test_events_get_unique_ids():
    assert SimpleEvent().event_id != SimpleEvent().event_id


def test_base_class_subscribers_see_subclasses_after_exact_handlers():
    bus = EventBus()
    order = []
    bus.subscribe(Event, lambda event: order.append(("any", type(event).__name__)))
    bus.subscribe(SimpleEvent, lambda event: order.append(("simple", event.payload)))

    bus.publish(SimpleEvent(payload="x"))
    bus.publish(OtherEvent())

    assert order == [("simple", "x"), ("any", "SimpleEvent"), ("any", "OtherEvent")]
    assert bus.handler_count(SimpleEvent) == 2
    assert bus.handler_count(OtherEvent) == 1


def test_subscribe_rejects_non_event_types():
    bus = EventBus()

    with pytest.raises(TypeError):
        bus.subscribe(str, lambda event: None)
