"""Settings file management with validation and change notifications."""

from __future__ import annotations

import os
import sys
from copy import deepcopy
from pathlib import Path
from typing import Any

from jsonschema import ValidationError

from ..errors import SettingsLoadError, SettingsValidationError
from ..gui.viewmodels.signal import Signal
from ..utils.jsonio import read_json, write_json
from .schema import DEFAULT_SETTINGS, merge_with_defaults


def default_settings_path() -> Path:
    """Return the default settings.json location for the current platform."""

    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "iEdit" / "settings.json"
        return Path.home() / "AppData" / "Roaming" / "iEdit" / "settings.json"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "iEdit" / "settings.json"
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / "iEdit" / "settings.json"
    return Path.home() / ".config" / "iEdit" / "settings.json"


class SettingsManager:
    """Load, validate and persist the editor settings.

    Without a path the manager works purely in memory until :meth:`load` is
    called, which lets hosts inject settings without touching the disk.
    """

    def __init__(self, path: Path | None = None, *, persist: bool = True) -> None:
        self.settings_changed = Signal()
        """Emitted with ``(key, value)`` after :meth:`set` or :meth:`reset`."""

        self._path = path
        self._persist = persist
        self._data: dict[str, Any] = deepcopy(DEFAULT_SETTINGS)

    @classmethod
    def from_mapping(cls, data: dict[str, Any] | None) -> "SettingsManager":
        """Build an in-memory manager from an already parsed payload."""

        manager = cls(persist=False)
        manager._data = _merge(data)
        return manager

    @property
    def path(self) -> Path | None:
        return self._path

    def as_dict(self) -> dict[str, Any]:
        return deepcopy(self._data)

    def load(self) -> None:
        """Read the settings file, writing the defaults back if it is missing."""

        path = self._resolve_path()
        payload = None
        if path.exists():
            try:
                payload = read_json(path)
            except (OSError, ValueError) as exc:
                raise SettingsLoadError(f"{path}: {exc}") from exc
        self._data = _merge(payload)
        self._write()

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return the value for a dotted *key* such as ``editor.min_crop_size``."""

        target: Any = self._data
        for part in key.split("."):
            if not isinstance(target, dict) or part not in target:
                return default
            target = target[part]
        return target

    def image_service_config(self) -> dict[str, Any] | None:
        """Return ``host``/``user``/``private_key`` for the image service, if configured."""

        service = self._data.get("image_service")
        return dict(service) if service else None

    def set(self, key: str, value: Any) -> None:
        """Validate and persist *value* under *key*.

        An invalid value leaves the previous settings untouched.
        """

        if isinstance(value, Path):
            value = str(value)
        candidate = deepcopy(self._data)
        *parents, leaf = key.split(".")
        target = candidate
        for part in parents:
            if not isinstance(target.get(part), dict):
                target[part] = {}
            target = target[part]
        target[leaf] = value
        self._data = _merge(candidate)
        self._write()
        self.settings_changed.emit(key, value)

    def reset(self, key: str) -> None:
        """Restore the default value of *key*."""

        default: Any = DEFAULT_SETTINGS
        for part in key.split("."):
            if not isinstance(default, dict) or part not in default:
                raise KeyError(key)
            default = default[part]
        self.set(key, deepcopy(default))

    def _resolve_path(self) -> Path:
        if self._path is None:
            self._path = default_settings_path()
        return self._path

    def _write(self) -> None:
        if self._persist:
            write_json(self._resolve_path(), self._data)


def _merge(payload: Any) -> dict[str, Any]:
    if payload is not None and not isinstance(payload, dict):
        raise SettingsValidationError(f"Settings must be a JSON object, got {type(payload).__name__}")
    try:
        return merge_with_defaults(payload)
    except ValidationError as exc:
        location = ".".join(str(part) for part in exc.absolute_path) or "<root>"
        raise SettingsValidationError(f"{location}: {exc.message}") from exc


__all__ = ["SettingsManager", "default_settings_path"]
