"""Events published by the image and metadata editors."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .bus import Event


@dataclass(kw_only=True)
class EditorShownEvent(Event):
    editor: str = "image"


@dataclass(kw_only=True)
class EditorHiddenEvent(Event):
    editor: str = "image"


@dataclass(kw_only=True)
class ParametersChangedExternallyEvent(Event):
    """A descriptor changed an operation's parameters; sliders should follow."""

    operation: str
    params: Dict[str, Any] = field(default_factory=dict)


@dataclass(kw_only=True)
class TransformationsResetEvent(Event):
    pass


@dataclass(kw_only=True)
class PreviewRequestedEvent(Event):
    url: str
    sequence: int


@dataclass(kw_only=True)
class ImageSelectedEvent(Event):
    """An embedded image was selected in the document for in-place editing."""

    element_id: str
    image_identifier: Optional[str] = None
    transformations: list = field(default_factory=list)
    crop_params: Optional[Dict[str, Any]] = None
    crop_aspect_ratio: Optional[float] = None


@dataclass(kw_only=True)
class ImageDeselectedEvent(Event):
    pass


@dataclass(kw_only=True)
class ElementCommittedEvent(Event):
    """A committed reference was written into the document.

    ``replaced_element_id`` is set when an existing element was replaced,
    otherwise the reference was inserted as a new element.
    """

    markup: str
    url: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    replaced_element_id: Optional[str] = None


@dataclass(kw_only=True)
class MetadataLoadedEvent(Event):
    image_identifier: str
    values: Dict[str, str] = field(default_factory=dict)


@dataclass(kw_only=True)
class MetadataSavedEvent(Event):
    image_identifier: str
    values: Dict[str, str] = field(default_factory=dict)


@dataclass(kw_only=True)
class ImageBoxResizedEvent(Event):
    height: int
