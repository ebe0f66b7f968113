"""Headless editing core: state, diffing, rotation, crop and URL pipeline."""

from .crop import CropCoordinator, CropRegion, CropState
from .descriptor import TransformationDescriptor, format_transformation, parse_transformation
from .diff import diff
from .rotation import RotationHandler, normalise_angle, true_size_for_angle
from .transformations import DEFAULT_TRANSFORMATIONS, TransformationStore
from .url_builder import ImageUrl, Operation, build_url

__all__ = [
    "CropCoordinator",
    "CropRegion",
    "CropState",
    "DEFAULT_TRANSFORMATIONS",
    "ImageUrl",
    "Operation",
    "RotationHandler",
    "TransformationDescriptor",
    "TransformationStore",
    "build_url",
    "diff",
    "format_transformation",
    "normalise_angle",
    "parse_transformation",
    "true_size_for_angle",
]
