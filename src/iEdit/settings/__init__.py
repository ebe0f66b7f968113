"""Editor settings: schema, defaults and the persistent manager."""

from .manager import SettingsManager, default_settings_path
from .schema import (
    DEFAULT_SETTINGS,
    EDITOR_SETTINGS_SCHEMA,
    PLACEMENT_METADATA_SCHEMA,
    merge_with_defaults,
    validate_placement_metadata,
    validate_settings,
)

__all__ = [
    "DEFAULT_SETTINGS",
    "EDITOR_SETTINGS_SCHEMA",
    "PLACEMENT_METADATA_SCHEMA",
    "SettingsManager",
    "default_settings_path",
    "merge_with_defaults",
    "validate_placement_metadata",
    "validate_settings",
]
