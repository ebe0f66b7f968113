"""State container for the user's transformation parameters."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterable, Mapping

from ..gui.viewmodels.signal import Signal
from .descriptor import ParamValue, TransformationDescriptor
from .rotation import normalise_angle

TransformationSet = dict[str, dict[str, ParamValue]]

DEFAULT_TRANSFORMATIONS: Mapping[str, Mapping[str, ParamValue]] = MappingProxyType(
    {
        "modulate": MappingProxyType({"brightness": 100, "saturation": 100, "hue": 100}),
        "contrast": MappingProxyType({"sharpen": 0}),
        "rotate": MappingProxyType({"angle": 0}),
    }
)

# ``modulate`` descriptors use the image service's short parameter names.
MODULATE_KEYS: Mapping[str, str] = MappingProxyType(
    {"b": "brightness", "s": "saturation", "h": "hue"}
)

# The crop rectangle is owned by the crop coordinator; a ``crop`` descriptor
# reaching the store is ignored.
CROP_OPERATION = "crop"


def copy_transformations(source: Mapping[str, Mapping[str, Any]]) -> TransformationSet:
    """Return a deep copy of *source* as plain, mutable dictionaries."""

    return {name: dict(params) for name, params in source.items()}


def _freeze(source: Mapping[str, Mapping[str, Any]]) -> Mapping[str, Mapping[str, ParamValue]]:
    return MappingProxyType(
        {name: MappingProxyType(dict(params)) for name, params in source.items()}
    )


class TransformationStore:
    """Hold the current transformation set next to its immutable defaults.

    The store knows nothing about widgets.  When a descriptor changes values
    behind the user's back, :attr:`parameter_changed` tells the presentation
    layer so it can move its sliders.
    """

    def __init__(self, defaults: Mapping[str, Mapping[str, Any]] | None = None) -> None:
        self.parameter_changed = Signal()
        """Emitted with ``(operation, params)`` after a descriptor was applied."""

        self.reset_performed = Signal()
        """Emitted when :meth:`reset` restores every parameter to its default."""

        self._defaults: Mapping[str, Mapping[str, ParamValue]] = DEFAULT_TRANSFORMATIONS
        self._values: TransformationSet = {}
        self.init(defaults if defaults is not None else DEFAULT_TRANSFORMATIONS)

    # ------------------------------------------------------------------
    # Accessors
    def init(self, defaults: Mapping[str, Mapping[str, Any]]) -> None:
        self._defaults = _freeze(defaults)
        self._values = copy_transformations(self._defaults)

    @property
    def defaults(self) -> Mapping[str, Mapping[str, ParamValue]]:
        return self._defaults

    def get(self) -> TransformationSet:
        """Return a snapshot that callers may freely mutate."""

        return copy_transformations(self._values)

    def value(self, name: str, param: str, default: Any = None) -> Any:
        return self._values.get(name, {}).get(param, default)

    # ------------------------------------------------------------------
    # Mutation helpers
    def set(self, name: str, param: str, value: ParamValue) -> bool:
        """Set one parameter; return ``True`` when the stored value changed."""

        if name == "rotate" and param == "angle":
            value = normalise_angle(value)
        params = self._values.setdefault(name, {})
        if params.get(param) == value and param in params:
            return False
        params[param] = value
        return True

    def apply_descriptor(self, descriptor: TransformationDescriptor) -> bool:
        """Merge a parsed descriptor into the current set.

        ``modulate`` replaces the whole operation: keys missing from the
        descriptor fall back to their defaults.  Unknown operations are kept
        verbatim so they survive into the pipeline.
        """

        name = descriptor.name
        if not name or name == CROP_OPERATION:
            return False

        if name == "modulate":
            params: dict[str, ParamValue] = dict(self._defaults.get("modulate", {}))
            for key, value in descriptor.params.items():
                params[MODULATE_KEYS.get(key, key)] = value
        else:
            params = dict(self._values.get(name, {}))
            params.update(descriptor.params)
            if name == "rotate" and "angle" in params:
                params["angle"] = normalise_angle(params["angle"])

        self._values[name] = params
        self.parameter_changed.emit(name, dict(params))
        return True

    def apply_descriptors(self, descriptors: Iterable[TransformationDescriptor]) -> int:
        return sum(1 for descriptor in descriptors if self.apply_descriptor(descriptor))

    def reset(self) -> None:
        self._values = copy_transformations(self._defaults)
        self.reset_performed.emit()


__all__ = [
    "CROP_OPERATION",
    "DEFAULT_TRANSFORMATIONS",
    "MODULATE_KEYS",
    "TransformationSet",
    "TransformationStore",
    "copy_transformations",
]
