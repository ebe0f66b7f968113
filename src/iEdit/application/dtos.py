from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

from iEdit.core.crop import CropRegion

CropInput = Union[CropRegion, Dict[str, Any], Sequence[float]]


@dataclass
class ImageDescriptor:
    identifier: str
    original_width: int
    original_height: int
    last_displayed_width: int = 0
    last_displayed_height: int = 0

    @property
    def original_size(self) -> Optional[tuple[int, int]]:
        if self.original_width <= 0 or self.original_height <= 0:
            return None
        return (self.original_width, self.original_height)


@dataclass
class EditedElementBinding:
    element_id: str
    original_markup: Optional[str] = None


@dataclass
class OpenOptions:
    width: int = 0
    height: int = 0
    crop: Optional[CropInput] = None
    aspect_ratio: Optional[float] = None
    transformations: List[str] = field(default_factory=list)


@dataclass
class PlacementMetadata:
    """Structured metadata attached to a committed image reference."""

    image_identifier: str
    crop_parameters: Optional[Dict[str, float]] = None
    crop_aspect_ratio: Optional[float] = None
    transformations: List[Dict[str, Any]] = field(default_factory=list)
    original_width: Optional[int] = None
    original_height: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "imageIdentifier": self.image_identifier,
            "cropParameters": self.crop_parameters,
            "cropAspectRatio": self.crop_aspect_ratio,
            "transformations": [dict(item) for item in self.transformations],
        }
        if self.original_width is not None:
            payload["originalWidth"] = self.original_width
        if self.original_height is not None:
            payload["originalHeight"] = self.original_height
        return payload

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "PlacementMetadata":
        return cls(
            image_identifier=payload["imageIdentifier"],
            crop_parameters=payload.get("cropParameters"),
            crop_aspect_ratio=payload.get("cropAspectRatio"),
            transformations=list(payload.get("transformations") or []),
            original_width=payload.get("originalWidth"),
            original_height=payload.get("originalHeight"),
        )


@dataclass
class CommitResult:
    url: str
    markup: str
    metadata: PlacementMetadata
    replaced_element_id: Optional[str] = None

    @property
    def replaced(self) -> bool:
        return self.replaced_element_id is not None
