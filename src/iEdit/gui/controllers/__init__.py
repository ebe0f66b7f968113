"""Editor controllers."""

from .image_editor import ImageEditorController
from .meta_editor import MetadataEditorController

__all__ = ["ImageEditorController", "MetadataEditorController"]
