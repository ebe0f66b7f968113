import sys
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Allow running the suite from a checkout without installing the package.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from iEdit.application.interfaces import (  # noqa: E402
    ICropWidget,
    IDocumentEditor,
    IHostBridge,
    IPreviewSurface,
)
from iEdit.application.services.image_service import InMemoryImageServiceClient  # noqa: E402
from iEdit.gui.scheduling import ManualScheduler  # noqa: E402


class FakeCropWidget(ICropWidget):
    def __init__(self, on_change: Callable[[Any], None], true_size: Optional[Sequence[int]] = None):
        self.on_change = on_change
        self.created_true_size = tuple(true_size) if true_size else None
        self.options: list[dict] = []
        self.selections: list[list[float]] = []
        self.images: list[str] = []

    def set_options(self, *, aspect_ratio=None, true_size=None) -> None:
        entry = {}
        if aspect_ratio is not None:
            entry["aspect_ratio"] = aspect_ratio
        if true_size is not None:
            entry["true_size"] = tuple(true_size)
        self.options.append(entry)

    def set_select(self, rect) -> None:
        self.selections.append(list(rect))

    def set_image(self, url: str) -> None:
        self.images.append(url)

    def drag(self, rect) -> None:
        """Simulate the user drawing a selection."""
        self.on_change(rect)


class FakeHost(IHostBridge):
    def __init__(self):
        self.calls: list[tuple] = []
        self.loader_visible = False
        self.on_close: Optional[Callable[[], None]] = None
        self.selected: Optional[Callable[[str], None]] = None
        self.deselected: Optional[Callable[[], None]] = None

    def show_loader(self, message: str) -> None:
        self.loader_visible = True
        self.calls.append(("show_loader", message))

    def hide_loader(self) -> None:
        self.loader_visible = False
        self.calls.append(("hide_loader",))

    def maximize_app_window(self, title: str, on_close: Callable[[], None]) -> None:
        self.on_close = on_close
        self.calls.append(("maximize", title))

    def restore_app_window(self) -> None:
        self.calls.append(("restore",))

    def add_listeners(self, *, element_selected, element_deselected) -> None:
        self.selected = element_selected
        self.deselected = element_deselected


class FakeDocument(IDocumentEditor):
    def __init__(self):
        self.elements: dict[str, str] = {}
        self.inserted: list[str] = []
        self.replaced: list[tuple[str, str]] = []

    def get_html_by_id(self, element_id: str, callback) -> None:
        callback(self.elements[element_id])

    def replace_element_by_id(self, element_id: str, markup: str) -> None:
        self.elements[element_id] = markup
        self.replaced.append((element_id, markup))

    def insert_element(self, markup: str, *, select: bool = True) -> None:
        self.inserted.append(markup)


class FakePreview(IPreviewSurface):
    def __init__(self):
        self.requests: list[tuple[str, int]] = []
        self.cleared = 0

    def display(self, url: str, sequence: int) -> None:
        self.requests.append((url, sequence))

    def clear(self) -> None:
        self.cleared += 1

    @property
    def last_sequence(self) -> int:
        return self.requests[-1][1]

    @property
    def last_url(self) -> str:
        return self.requests[-1][0]


@pytest.fixture
def image_service():
    service = InMemoryImageServiceClient("https://imbo.example.com", "editor")
    service.add_image("abc", {"drp:filename": "beach.jpg", "exif:Artist": "Kim"})
    return service


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def document():
    return FakeDocument()


@pytest.fixture
def preview():
    return FakePreview()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def widgets():
    return []


@pytest.fixture
def widget_factory(widgets):
    def factory(on_change, true_size):
        widget = FakeCropWidget(on_change, true_size)
        widgets.append(widget)
        return widget

    return factory


@pytest.fixture
def editor(image_service, host, document, preview, scheduler, widget_factory):
    from iEdit.gui.controllers.image_editor import ImageEditorController

    return ImageEditorController(
        image_service,
        host,
        document,
        preview,
        crop_widget_factory=widget_factory,
        scheduler=scheduler,
    )


@pytest.fixture
def crop_widget():
    return FakeCropWidget(lambda rect: None)
