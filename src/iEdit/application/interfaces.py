"""Interfaces of the collaborators the editors talk to.

None of these are implemented by the core; the host application (or a test)
provides them.  Callbacks follow the ``callback(err, data)`` convention of
the image service client.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Sequence

from iEdit.core.url_builder import ImageUrl

MetadataCallback = Callable[[Optional[Exception], Optional[Dict[str, Any]]], None]


class IImageServiceClient(ABC):
    """Resolves image identifiers to URLs and reads/writes image metadata."""

    @abstractmethod
    def get_image_url(self, image_identifier: str) -> ImageUrl:
        pass

    @abstractmethod
    def get_metadata(self, image_identifier: str, callback: MetadataCallback) -> None:
        pass

    @abstractmethod
    def edit_metadata(self, image_identifier: str, data: Dict[str, Any], callback: MetadataCallback) -> None:
        pass


class ICropWidget(ABC):
    """Interactive crop-selection widget drawn over the preview image.

    The widget reports selection changes through the callback it was created
    with; it enforces the aspect ratio while the user drags.
    """

    @abstractmethod
    def set_options(
        self,
        *,
        aspect_ratio: Optional[float] = None,
        true_size: Optional[Sequence[int]] = None,
    ) -> None:
        pass

    @abstractmethod
    def set_select(self, rect: Sequence[float]) -> None:
        """Select ``[x, y, x2, y2]``."""
        pass

    @abstractmethod
    def set_image(self, url: str) -> None:
        pass


CropWidgetFactory = Callable[[Callable[[Any], None], Optional[Sequence[int]]], ICropWidget]
"""Build a widget from ``(on_change, true_size)``."""


class IHostBridge(ABC):
    """Window-level services of the host application."""

    @abstractmethod
    def show_loader(self, message: str) -> None:
        pass

    @abstractmethod
    def hide_loader(self) -> None:
        pass

    @abstractmethod
    def maximize_app_window(self, title: str, on_close: Callable[[], None]) -> None:
        pass

    @abstractmethod
    def restore_app_window(self) -> None:
        pass

    @abstractmethod
    def add_listeners(
        self,
        *,
        element_selected: Callable[[str], None],
        element_deselected: Callable[[], None],
    ) -> None:
        """Register the element selection callbacks."""
        pass


class IDocumentEditor(ABC):
    """Access to the document the committed references are embedded in."""

    @abstractmethod
    def get_html_by_id(self, element_id: str, callback: Callable[[str], None]) -> None:
        pass

    @abstractmethod
    def replace_element_by_id(self, element_id: str, markup: str) -> None:
        pass

    @abstractmethod
    def insert_element(self, markup: str, *, select: bool = True) -> None:
        pass


class IPreviewSurface(ABC):
    """Where the preview image is displayed.

    The surface calls back ``ImageEditorController.on_image_preview_loaded``
    with the natural size of the loaded image and the *sequence* it was
    given.
    """

    @abstractmethod
    def display(self, url: str, sequence: int) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass


class ITranslator(ABC):
    @abstractmethod
    def translate(self, key: str) -> str:
        pass


class IdentityTranslator(ITranslator):
    """Return translation keys unchanged."""

    def translate(self, key: str) -> str:
        return key
