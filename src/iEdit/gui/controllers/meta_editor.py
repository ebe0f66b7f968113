"""Controller for the metadata editor pane."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional

from ...application.interfaces import IHostBridge, IImageServiceClient, ITranslator, IdentityTranslator
from ...config import (
    META_PANE_CHROME_HEIGHT,
    META_PREVIEW_HEIGHT,
    META_PREVIEW_WIDTH,
    METADATA_FALLBACKS,
    METADATA_FIELDS,
    OUTPUT_FORMAT,
    RESIZE_DEBOUNCE_MS,
)
from ...errors import ConfigurationError
from ...errors.handler import ErrorHandler, ErrorSeverity
from ...events import (
    EditorHiddenEvent,
    EditorShownEvent,
    Event,
    EventBus,
    ImageBoxResizedEvent,
    MetadataLoadedEvent,
    MetadataSavedEvent,
    Subscription,
)
from ...settings import SettingsManager
from ..scheduling import Debouncer, ManualScheduler, Scheduler

_LOGGER = logging.getLogger(__name__)


class MetadataEditorController:
    """Load, edit and save the descriptive metadata of one image."""

    def __init__(
        self,
        image_service: IImageServiceClient,
        host: IHostBridge,
        *,
        translator: Optional[ITranslator] = None,
        scheduler: Optional[Scheduler] = None,
        settings: Optional[SettingsManager] = None,
        fields: Optional[Iterable[str]] = None,
        event_bus: Optional[EventBus] = None,
        error_handler: Optional[ErrorHandler] = None,
    ) -> None:
        self._image_service = image_service
        self._host = host
        self._translator = translator or IdentityTranslator()
        self._scheduler = scheduler or ManualScheduler()
        self._settings = settings

        self._events = event_bus or EventBus(_LOGGER)
        self._error_handler = error_handler or ErrorHandler(_LOGGER, self._events)

        configured = fields if fields is not None else self._setting("meta_editor.fields", METADATA_FIELDS)
        self._fields: tuple[str, ...] = tuple(configured)
        self._values: dict[str, str] = {}
        self._image_identifier: Optional[str] = None
        self._preview_url: Optional[str] = None
        self._image_box_height: Optional[int] = None
        self._visible = False

        self._resize_debouncer = Debouncer(
            self._scheduler,
            self._setting("meta_editor.resize_debounce_ms", RESIZE_DEBOUNCE_MS),
            self._resize_panes,
        )
        self.reset_state()

    # ------------------------------------------------------------------
    # Event registry
    # ------------------------------------------------------------------
    def on(self, event_type: type[Event], handler: Callable[[Any], None]) -> Subscription:
        return self._events.subscribe(event_type, handler)

    def off(self, subscription: Subscription) -> None:
        self._events.unsubscribe(subscription)

    def trigger(self, event: Event) -> None:
        self._events.publish(event)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def fields(self) -> tuple[str, ...]:
        return self._fields

    @property
    def image_identifier(self) -> Optional[str]:
        return self._image_identifier

    @property
    def preview_url(self) -> Optional[str]:
        return self._preview_url

    @property
    def image_box_height(self) -> Optional[int]:
        return self._image_box_height

    @property
    def visible(self) -> bool:
        return self._visible

    def values(self) -> dict[str, str]:
        return dict(self._values)

    def set_value(self, name: str, value: str) -> None:
        if name not in self._fields:
            raise KeyError(name)
        self._values[name] = value

    # ------------------------------------------------------------------
    # Visibility
    # ------------------------------------------------------------------
    def show(self) -> "MetadataEditorController":
        self._host.maximize_app_window(
            self._translator.translate("META_EDITOR_TITLE"),
            self.hide,
        )
        self._visible = True
        self.trigger(EditorShownEvent(editor="meta"))
        return self

    def hide(self, *_: Any) -> None:
        """Close the pane.

        Also used as the ``edit_metadata`` completion callback, hence the
        ignored positional arguments.
        """

        self._visible = False
        self.trigger(EditorHiddenEvent(editor="meta"))
        self._host.restore_app_window()
        self._host.hide_loader()

    def reset_state(self) -> None:
        self._values = {name: "" for name in self._fields}
        self._preview_url = None

    # ------------------------------------------------------------------
    # Loading and saving
    # ------------------------------------------------------------------
    def load_data_for_image(self, image_identifier: str) -> None:
        self.reset_state()
        self._image_identifier = image_identifier

        url = (
            self._image_service.get_image_url(image_identifier)
            .max_size(
                width=self._setting("meta_editor.preview_width", META_PREVIEW_WIDTH),
                height=self._setting("meta_editor.preview_height", META_PREVIEW_HEIGHT),
            )
            .set_format(OUTPUT_FORMAT)
        )
        self._preview_url = url.to_string()

        self._host.show_loader(self._translator.translate("META_EDITOR_LOADING_METADATA"))
        self._image_service.get_metadata(image_identifier, self.on_image_data_loaded)

    def on_image_data_loaded(self, err: Optional[Exception], data: Optional[dict[str, Any]]) -> None:
        if err is not None or data is None:
            self._host.hide_loader()
            if err is not None:
                self._error_handler.handle(
                    err,
                    ErrorSeverity.WARNING,
                    {"operation": "get_metadata", "image": self._image_identifier},
                )
            return

        for name in self._fields:
            value = data.get(name)
            if not value:
                fallback = METADATA_FALLBACKS.get(name)
                value = data.get(fallback) if fallback else None
            if value:
                self._values[name] = str(value)

        self._host.hide_loader()
        self.trigger(
            MetadataLoadedEvent(
                image_identifier=self._image_identifier or "",
                values=dict(self._values),
            )
        )

    def save_metadata(self) -> bool:
        if not self._image_identifier:
            self._error_handler.handle(
                ConfigurationError("Tried to save metadata, no image active"),
                ErrorSeverity.ERROR,
                {"operation": "save_metadata"},
            )
            return False

        self._host.show_loader(self._translator.translate("META_EDITOR_SAVING_METADATA"))
        self._image_service.edit_metadata(
            self._image_identifier,
            dict(self._values),
            self._on_metadata_saved,
        )
        return True

    def _on_metadata_saved(self, err: Optional[Exception], data: Optional[dict[str, Any]]) -> None:
        if err is not None:
            self._host.hide_loader()
            self._error_handler.handle(
                err,
                ErrorSeverity.ERROR,
                {"operation": "edit_metadata", "image": self._image_identifier},
            )
            return
        self.trigger(
            MetadataSavedEvent(
                image_identifier=self._image_identifier or "",
                values=dict(self._values),
            )
        )
        self.hide()

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------
    def on_window_resized(self, height: int) -> None:
        self._resize_debouncer.trigger(height)

    def _resize_panes(self, height: int) -> None:
        chrome = self._setting("meta_editor.pane_chrome_height", META_PANE_CHROME_HEIGHT)
        self._image_box_height = max(0, int(height) - chrome)
        self.trigger(ImageBoxResizedEvent(height=self._image_box_height))

    def _setting(self, key: str, default: Any) -> Any:
        if self._settings is None:
            return default
        value = self._settings.get(key)
        return default if value is None else value


__all__ = ["MetadataEditorController"]
