"""Placement markup for committed image references.

A committed reference is an ``<img>`` wrapped in a ``<div>``; its ``data-*``
attributes carry the :class:`~iEdit.application.dtos.PlacementMetadata`
needed to reopen the image for editing in place.  Host documents are HTML,
so void ``<img>`` tags and named entities must survive a round trip.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag
from jsonschema import ValidationError

from ..application.dtos import PlacementMetadata
from ..errors import MetadataInvalidError
from ..settings.schema import validate_placement_metadata
from ..utils.logging import get_logger

LOGGER = get_logger(__name__)

HTML_PARSER = "html.parser"

ATTR_IDENTIFIER = "data-image-identifier"
ATTR_CROP_PARAMETERS = "data-crop-parameters"
ATTR_CROP_ASPECT_RATIO = "data-crop-aspect-ratio"
ATTR_TRANSFORMATIONS = "data-transformations"
ATTR_ORIGINAL_WIDTH = "data-original-width"
ATTR_ORIGINAL_HEIGHT = "data-original-height"


def _dump(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"))


def build_image_element(url: str, metadata: PlacementMetadata, soup: Optional[BeautifulSoup] = None) -> Tag:
    """Create the ``<img>`` tag for *metadata*, owned by *soup* when given."""

    soup = soup if soup is not None else BeautifulSoup("", HTML_PARSER)
    attrs = {
        ATTR_IDENTIFIER: metadata.image_identifier,
        ATTR_CROP_PARAMETERS: _dump(metadata.crop_parameters),
        ATTR_CROP_ASPECT_RATIO: _dump(metadata.crop_aspect_ratio),
        ATTR_TRANSFORMATIONS: _dump(metadata.transformations),
    }
    if metadata.original_width is not None:
        attrs[ATTR_ORIGINAL_WIDTH] = str(metadata.original_width)
    if metadata.original_height is not None:
        attrs[ATTR_ORIGINAL_HEIGHT] = str(metadata.original_height)
    attrs["src"] = url
    return soup.new_tag("img", attrs=attrs)


def build_markup(url: str, metadata: PlacementMetadata) -> str:
    """Return ``<div><img .../></div>`` for a freshly inserted reference."""

    soup = BeautifulSoup("", HTML_PARSER)
    wrapper = soup.new_tag("div")
    wrapper.append(build_image_element(url, metadata, soup))
    soup.append(wrapper)
    return str(soup)


def _placed_image(soup: BeautifulSoup) -> Optional[Tag]:
    """Return the first ``<img>`` carrying an image identifier."""

    for img in soup.find_all("img"):
        if img.get(ATTR_IDENTIFIER) is not None:
            return img
    return None


def replace_image(original_markup: str, url: str, metadata: PlacementMetadata) -> str:
    """Swap the ``<img>`` inside *original_markup*, keeping everything around it.

    The placed image is preferred; otherwise the first ``<img>`` is replaced.
    Markup without any image is replaced by a fresh reference.
    """

    soup = BeautifulSoup(original_markup or "", HTML_PARSER)
    img = _placed_image(soup) or soup.find("img")
    if img is None:
        LOGGER.warning("No image in the edited element, inserting a fresh reference")
        return build_markup(url, metadata)

    img.replace_with(build_image_element(url, metadata, soup))
    return str(soup)


def _load(raw: Optional[str]) -> Any:
    if raw is None or raw in ("", "undefined"):
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _int_or_none(raw: Optional[str]) -> Any:
    if raw is None or raw == "":
        return None
    try:
        return int(float(raw))
    except ValueError:
        return raw


def read_placement(markup: str) -> Optional[PlacementMetadata]:
    """Extract the placement metadata from *markup*.

    Returns ``None`` when the markup holds no image reference.  Raises
    :class:`MetadataInvalidError` when the attributes are present but do not
    describe valid metadata.
    """

    img = _placed_image(BeautifulSoup(markup or "", HTML_PARSER))
    if img is None:
        return None

    payload: dict[str, Any] = {
        "imageIdentifier": img.get(ATTR_IDENTIFIER),
        "cropParameters": _load(img.get(ATTR_CROP_PARAMETERS)),
        "cropAspectRatio": _load(img.get(ATTR_CROP_ASPECT_RATIO)),
        "transformations": _load(img.get(ATTR_TRANSFORMATIONS)) or [],
    }
    for key, attribute in (
        ("originalWidth", ATTR_ORIGINAL_WIDTH),
        ("originalHeight", ATTR_ORIGINAL_HEIGHT),
    ):
        value = _int_or_none(img.get(attribute))
        if value is not None:
            payload[key] = value

    try:
        validate_placement_metadata(payload)
    except ValidationError as exc:
        raise MetadataInvalidError(f"Invalid placement metadata: {exc.message}") from exc
    return PlacementMetadata.from_dict(payload)


__all__ = [
    "ATTR_CROP_ASPECT_RATIO",
    "ATTR_CROP_PARAMETERS",
    "ATTR_IDENTIFIER",
    "ATTR_ORIGINAL_HEIGHT",
    "ATTR_ORIGINAL_WIDTH",
    "ATTR_TRANSFORMATIONS",
    "build_image_element",
    "build_markup",
    "read_placement",
    "replace_image",
]
