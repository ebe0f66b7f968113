"""Remote transformation pipeline and the builder that fills it.

:class:`ImageUrl` mirrors the URL object handed out by an Imbo-style image
service: an ordered list of named operations plus an output format, rendered
as ``{host}/users/{user}/images/{id}.{format}?t[]=op:k=v,...``.
:func:`build_url` serialises the editor state into such a URL.
"""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional
from urllib.parse import quote, urlencode

from ..config import (
    MAX_PREVIEW_HEIGHT,
    MAX_PREVIEW_WIDTH,
    MIN_CROP_SIZE,
    OUTPUT_FORMAT,
    OUTPUT_MAX_WIDTH,
)
from .crop import CropRegion
from .descriptor import format_transformation

# Short parameter names used by the image service for ``modulate``.
MODULATE_SHORT_KEYS: Mapping[str, str] = {"brightness": "b", "saturation": "s", "hue": "h"}

# Operations that only size the output; they are not part of the edit and are
# left out of the persisted transformation list.
SIZING_OPERATIONS = frozenset({"maxSize"})


@dataclass(frozen=True)
class Operation:
    name: str
    params: dict[str, Any] = field(default_factory=dict)

    def to_descriptor(self) -> str:
        return format_transformation(self.name, self.params)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "params": dict(self.params)}


class ImageUrl:
    """Ordered transformation pipeline for a single image."""

    def __init__(
        self,
        host: str,
        image_identifier: str,
        user: Optional[str] = None,
        *,
        private_key: Optional[str] = None,
        operations: Iterable[Operation] = (),
        image_format: Optional[str] = None,
    ) -> None:
        self._host = host.rstrip("/")
        self._image_identifier = image_identifier
        self._user = user
        self._private_key = private_key
        self._operations: list[Operation] = list(operations)
        self._format = image_format

    # ------------------------------------------------------------------
    # Accessors
    @property
    def image_identifier(self) -> str:
        return self._image_identifier

    @property
    def format(self) -> Optional[str]:
        return self._format

    @property
    def operations(self) -> tuple[Operation, ...]:
        return tuple(self._operations)

    def operation_names(self) -> list[str]:
        return [operation.name for operation in self._operations]

    def find(self, name: str) -> Optional[Operation]:
        for operation in self._operations:
            if operation.name == name:
                return operation
        return None

    def get_transformations(self) -> list[dict[str, Any]]:
        """Return the edit operations in structured form, sizing excluded."""

        return [
            operation.to_dict()
            for operation in self._operations
            if operation.name not in SIZING_OPERATIONS
        ]

    def copy(self) -> "ImageUrl":
        return ImageUrl(
            self._host,
            self._image_identifier,
            self._user,
            private_key=self._private_key,
            operations=self._operations,
            image_format=self._format,
        )

    # ------------------------------------------------------------------
    # Pipeline operations, each returning ``self`` for chaining
    def reset(self) -> "ImageUrl":
        self._operations = []
        self._format = None
        return self

    def set_format(self, image_format: str) -> "ImageUrl":
        self._format = image_format
        return self

    def jpg(self) -> "ImageUrl":
        return self.set_format("jpg")

    def png(self) -> "ImageUrl":
        return self.set_format("png")

    def max_size(self, width: Optional[int] = None, height: Optional[int] = None) -> "ImageUrl":
        params: dict[str, Any] = {}
        if width:
            params["width"] = int(width)
        if height:
            params["height"] = int(height)
        return self._append("maxSize", params)

    def modulate(self, params: Mapping[str, Any]) -> "ImageUrl":
        short = {MODULATE_SHORT_KEYS.get(key, key): value for key, value in params.items()}
        return self._append("modulate", short)

    def contrast(self, params: Mapping[str, Any]) -> "ImageUrl":
        return self._append("contrast", dict(params))

    def rotate(self, params: Mapping[str, Any]) -> "ImageUrl":
        return self._append("rotate", dict(params))

    def crop(self, x: int, y: int, width: int, height: int) -> "ImageUrl":
        return self._append("crop", {"x": x, "y": y, "width": width, "height": height})

    def apply(self, name: str, params: Mapping[str, Any]) -> "ImageUrl":
        """Append *name* through its dedicated method, or verbatim if unknown."""

        if name == "modulate":
            return self.modulate(params)
        if name == "contrast":
            return self.contrast(params)
        if name == "rotate":
            return self.rotate(params)
        if name == "maxSize":
            return self.max_size(params.get("width"), params.get("height"))
        return self._append(name, dict(params))

    def _append(self, name: str, params: dict[str, Any]) -> "ImageUrl":
        self._operations.append(Operation(name, params))
        return self

    # ------------------------------------------------------------------
    # Rendering
    def query_items(self) -> list[tuple[str, str]]:
        return [("t[]", operation.to_descriptor()) for operation in self._operations]

    def to_string(self) -> str:
        path = f"{self._host}"
        if self._user:
            path += f"/users/{quote(self._user)}"
        path += f"/images/{quote(self._image_identifier)}"
        if self._format:
            path += f".{self._format}"
        query = urlencode(self.query_items(), safe=":=,[]", quote_via=quote)
        url = f"{path}?{query}" if query else path
        if self._private_key:
            token = hmac.new(
                self._private_key.encode("utf-8"), url.encode("utf-8"), hashlib.sha256
            ).hexdigest()
            url += ("&" if query else "?") + f"accessToken={token}"
        return url

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"ImageUrl({self.to_string()!r})"


def build_url(
    base_url: ImageUrl,
    diff: Mapping[str, Mapping[str, Any]],
    crop_region: Optional[CropRegion] = None,
    *,
    preview: bool,
    max_output_width: int = OUTPUT_MAX_WIDTH,
    max_preview_width: int = MAX_PREVIEW_WIDTH,
    max_preview_height: int = MAX_PREVIEW_HEIGHT,
    min_crop_size: float = MIN_CROP_SIZE,
    image_format: str = OUTPUT_FORMAT,
) -> ImageUrl:
    """Serialise *diff* and *crop_region* into a fresh pipeline.

    *base_url* is copied, never modified.  Preview URLs are bounded on both
    axes; committed URLs are bounded by width only.  A crop region at or
    below *min_crop_size* on either axis is dropped.
    """

    url = base_url.copy().reset().set_format(image_format)

    if preview:
        url.max_size(width=max_preview_width, height=max_preview_height)
    else:
        url.max_size(width=max_output_width)

    for name, params in diff.items():
        url.apply(name, params)

    if crop_region is not None and crop_region.is_intentional(min_crop_size):
        url.crop(**crop_region.to_crop_params())

    return url


__all__ = ["ImageUrl", "MODULATE_SHORT_KEYS", "Operation", "SIZING_OPERATIONS", "build_url"]
