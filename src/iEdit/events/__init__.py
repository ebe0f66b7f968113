from .bus import Event, EventBus, Subscription
from .editor_events import (
    EditorHiddenEvent,
    EditorShownEvent,
    ElementCommittedEvent,
    ImageBoxResizedEvent,
    ImageDeselectedEvent,
    ImageSelectedEvent,
    MetadataLoadedEvent,
    MetadataSavedEvent,
    ParametersChangedExternallyEvent,
    PreviewRequestedEvent,
    TransformationsResetEvent,
)

__all__ = [
    "EditorHiddenEvent",
    "EditorShownEvent",
    "ElementCommittedEvent",
    "Event",
    "EventBus",
    "ImageBoxResizedEvent",
    "ImageDeselectedEvent",
    "ImageSelectedEvent",
    "MetadataLoadedEvent",
    "MetadataSavedEvent",
    "ParametersChangedExternallyEvent",
    "PreviewRequestedEvent",
    "Subscription",
    "TransformationsResetEvent",
]
