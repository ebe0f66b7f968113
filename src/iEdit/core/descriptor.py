"""Boundary adapter for the ``name:key=value,...`` transformation grammar.

The grammar is only a transport format: it is parsed here once and the rest
of the core works on :class:`TransformationDescriptor` instances.  Parsing is
permissive and never raises; a parameter without ``=`` maps to ``""``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

ParamValue = int | float | str


@dataclass(frozen=True)
class TransformationDescriptor:
    """A single parsed operation such as ``modulate`` with its raw parameters."""

    name: str
    params: dict[str, ParamValue] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "params": dict(self.params)}


def coerce_value(raw: str) -> ParamValue:
    """Return *raw* as ``int`` or ``float`` when it is numeric, else unchanged."""

    text = raw.strip()
    if not text:
        return raw
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return raw
    if not math.isfinite(number):
        return raw
    return number


def parse_transformation(text: str) -> TransformationDescriptor:
    """Parse one descriptor string.

    Everything after the first ``:`` is the parameter list, so values may
    themselves contain ``:`` or ``=``.
    """

    name, _, remainder = text.partition(":")
    params: dict[str, ParamValue] = {}
    if remainder:
        for chunk in remainder.split(","):
            key, _, value = chunk.partition("=")
            key = key.strip()
            if not key:
                continue
            params[key] = coerce_value(value)
    return TransformationDescriptor(name=name.strip(), params=params)


def parse_transformations(texts: Iterable[str]) -> list[TransformationDescriptor]:
    return [parse_transformation(text) for text in texts if text]


def format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_transformation(name: str, params: Mapping[str, Any]) -> str:
    """Render *name* and *params* back into the descriptor grammar."""

    if not params:
        return name
    body = ",".join(f"{key}={format_value(value)}" for key, value in params.items())
    return f"{name}:{body}"


def descriptor_from_mapping(payload: Mapping[str, Any]) -> TransformationDescriptor:
    """Build a descriptor from the structured ``{"name", "params"}`` form."""

    params = payload.get("params") or {}
    return TransformationDescriptor(
        name=str(payload.get("name", "")),
        params={str(key): value for key, value in params.items()},
    )


__all__ = [
    "ParamValue",
    "TransformationDescriptor",
    "coerce_value",
    "descriptor_from_mapping",
    "format_transformation",
    "format_value",
    "parse_transformation",
    "parse_transformations",
]
