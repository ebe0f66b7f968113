"""Reduce a transformation set to the parameters that differ from defaults."""

from __future__ import annotations

from typing import Any, Mapping

TransformationDiff = dict[str, dict[str, Any]]


def diff(current: Mapping[str, Mapping[str, Any]], default: Mapping[str, Mapping[str, Any]]) -> TransformationDiff:
    """Return the minimal set of operations needed to reproduce *current*.

    An operation is kept only when one of its parameters is strictly unequal
    to the default, and only the differing parameters are kept.  Operations
    without a default entry are kept whole.  The result follows the iteration
    order of *current*.
    """

    result: TransformationDiff = {}
    for name, params in current.items():
        baseline = default.get(name, {})
        changed = {
            param: value
            for param, value in params.items()
            if param not in baseline or value != baseline[param]
        }
        if changed:
            result[name] = changed
    return result


def is_default(current: Mapping[str, Mapping[str, Any]], default: Mapping[str, Mapping[str, Any]]) -> bool:
    return not diff(current, default)


__all__ = ["TransformationDiff", "diff", "is_default"]
