"""Schema helpers for the editor settings file and placement metadata."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from .. import config

_POSITIVE_INT = {"type": "integer", "minimum": 1}
_NON_NEGATIVE_INT = {"type": "integer", "minimum": 0}

EDITOR_SETTINGS_SCHEMA: dict[str, Any] = {
    "$id": "iEdit/settings.schema.json",
    "type": "object",
    "required": ["schema", "editor", "meta_editor", "crop_formats"],
    "properties": {
        "schema": {"const": "iEdit/settings@1"},
        "editor": {
            "type": "object",
            "properties": {
                "max_preview_width": _POSITIVE_INT,
                "max_preview_height": _POSITIVE_INT,
                "output_max_width": _POSITIVE_INT,
                "output_format": {"type": "string", "enum": ["jpg", "png", "gif"]},
                "min_crop_size": _NON_NEGATIVE_INT,
                "starter_crop_size": _POSITIVE_INT,
                "slider_debounce_ms": _NON_NEGATIVE_INT,
            },
            "additionalProperties": True,
        },
        "meta_editor": {
            "type": "object",
            "properties": {
                "preview_width": _POSITIVE_INT,
                "preview_height": _POSITIVE_INT,
                "pane_chrome_height": _NON_NEGATIVE_INT,
                "resize_debounce_ms": _NON_NEGATIVE_INT,
                "fields": {"type": "array", "items": {"type": "string"}},
            },
            "additionalProperties": True,
        },
        "crop_formats": {
            "type": "object",
            "additionalProperties": {"type": "number", "exclusiveMinimum": 0},
        },
        "image_service": {
            "type": ["object", "null"],
            "required": ["host"],
            "properties": {
                "host": {"type": "string", "minLength": 1},
                "user": {"type": ["string", "null"]},
                "private_key": {"type": ["string", "null"]},
            },
            "additionalProperties": True,
        },
    },
    "additionalProperties": True,
}

DEFAULT_SETTINGS: dict[str, Any] = {
    "schema": "iEdit/settings@1",
    "editor": {
        "max_preview_width": config.MAX_PREVIEW_WIDTH,
        "max_preview_height": config.MAX_PREVIEW_HEIGHT,
        "output_max_width": config.OUTPUT_MAX_WIDTH,
        "output_format": config.OUTPUT_FORMAT,
        "min_crop_size": config.MIN_CROP_SIZE,
        "starter_crop_size": config.STARTER_CROP_SIZE,
        "slider_debounce_ms": config.SLIDER_DEBOUNCE_MS,
    },
    "meta_editor": {
        "preview_width": config.META_PREVIEW_WIDTH,
        "preview_height": config.META_PREVIEW_HEIGHT,
        "pane_chrome_height": config.META_PANE_CHROME_HEIGHT,
        "resize_debounce_ms": config.RESIZE_DEBOUNCE_MS,
        "fields": list(config.METADATA_FIELDS),
    },
    "crop_formats": dict(config.CROP_FORMATS),
    "image_service": None,
}

PLACEMENT_METADATA_SCHEMA: dict[str, Any] = {
    "$id": "iEdit/placement.schema.json",
    "type": "object",
    "required": ["imageIdentifier"],
    "properties": {
        "imageIdentifier": {"type": "string", "minLength": 1},
        "cropParameters": {
            "type": ["object", "null"],
            "properties": {
                "x": {"type": "number"},
                "y": {"type": "number"},
                "x2": {"type": "number"},
                "y2": {"type": "number"},
                "w": {"type": "number"},
                "h": {"type": "number"},
            },
            "required": ["x", "y"],
        },
        "cropAspectRatio": {"type": ["number", "null"]},
        "transformations": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["name"],
                "properties": {
                    "name": {"type": "string"},
                    "params": {"type": "object"},
                },
            },
        },
        "originalWidth": {"type": "integer", "minimum": 0},
        "originalHeight": {"type": "integer", "minimum": 0},
    },
    "additionalProperties": True,
}

_validator = Draft202012Validator(EDITOR_SETTINGS_SCHEMA)
_placement_validator = Draft202012Validator(PLACEMENT_METADATA_SCHEMA)

_NESTED_SECTIONS = ("editor", "meta_editor")


def merge_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_SETTINGS` and validate the result."""

    merged = deepcopy(DEFAULT_SETTINGS)
    if data:
        for key, value in data.items():
            if key in _NESTED_SECTIONS and isinstance(value, dict):
                target = merged.setdefault(key, {})
                for sub_key, sub_value in value.items():
                    target[sub_key] = sub_value
                continue
            if key == "crop_formats" and isinstance(value, dict):
                merged[key] = {str(label): ratio for label, ratio in value.items()}
                continue
            merged[key] = deepcopy(value)
    _validator.validate(merged)
    return merged


def validate_settings(data: dict[str, Any]) -> None:
    """Validate *data* against the settings schema."""

    _validator.validate(data)


def validate_placement_metadata(data: dict[str, Any]) -> None:
    """Validate persisted placement metadata read back from markup."""

    _placement_validator.validate(data)


__all__ = [
    "DEFAULT_SETTINGS",
    "EDITOR_SETTINGS_SCHEMA",
    "PLACEMENT_METADATA_SCHEMA",
    "merge_with_defaults",
    "validate_placement_metadata",
    "validate_settings",
]
