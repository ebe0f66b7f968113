"""Controller orchestrating the image editor: open, adjust, crop, commit."""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional, Sequence, Union

from ...application.dtos import (
    CommitResult,
    EditedElementBinding,
    ImageDescriptor,
    OpenOptions,
    PlacementMetadata,
)
from ...application.interfaces import (
    CropWidgetFactory,
    IDocumentEditor,
    IHostBridge,
    IImageServiceClient,
    IPreviewSurface,
    ITranslator,
    IdentityTranslator,
)
from ...config import (
    CROP_FORMATS,
    MAX_PREVIEW_HEIGHT,
    MAX_PREVIEW_WIDTH,
    MIN_CROP_SIZE,
    OUTPUT_FORMAT,
    OUTPUT_MAX_WIDTH,
    SLIDER_DEBOUNCE_MS,
    STARTER_CROP_SIZE,
)
from ...core.crop import CropCoordinator, CropRegion
from ...core.descriptor import (
    TransformationDescriptor,
    coerce_value,
    descriptor_from_mapping,
    parse_transformation,
)
from ...core.diff import TransformationDiff, diff
from ...core.rotation import RotationHandler
from ...core.transformations import TransformationSet, TransformationStore
from ...core.url_builder import ImageUrl, build_url
from ...errors import ConfigurationError, MetadataInvalidError
from ...errors.handler import ErrorHandler, ErrorSeverity
from ...events import (
    EditorHiddenEvent,
    EditorShownEvent,
    ElementCommittedEvent,
    Event,
    EventBus,
    ImageDeselectedEvent,
    ImageSelectedEvent,
    ParametersChangedExternallyEvent,
    PreviewRequestedEvent,
    Subscription,
    TransformationsResetEvent,
)
from ...io.placement import build_markup, read_placement, replace_image
from ...settings import SettingsManager
from ..scheduling import Debouncer, ManualScheduler, Scheduler

_LOGGER = logging.getLogger(__name__)

# Slider name -> (operation, parameter) in the transformation set.
SLIDER_PARAMETERS: Mapping[str, tuple[str, str]] = {
    "brightness": ("modulate", "brightness"),
    "saturation": ("modulate", "saturation"),
    "hue": ("modulate", "hue"),
    "sharpen": ("contrast", "sharpen"),
}

TransformationInput = Union[str, Mapping[str, Any], TransformationDescriptor]


def _to_descriptor(item: TransformationInput) -> TransformationDescriptor:
    if isinstance(item, TransformationDescriptor):
        return item
    if isinstance(item, Mapping):
        return descriptor_from_mapping(item)
    return parse_transformation(str(item))


class ImageEditorController:
    """Own the editing state of one image and keep the collaborators in sync.

    All mutable state lives here; the store, the rotation handler and the
    crop coordinator are only ever driven through this controller.  Events
    are published on a bus private to the instance, see :meth:`on`.
    """

    def __init__(
        self,
        image_service: IImageServiceClient,
        host: IHostBridge,
        document: IDocumentEditor,
        preview: IPreviewSurface,
        *,
        crop_widget_factory: Optional[CropWidgetFactory] = None,
        translator: Optional[ITranslator] = None,
        scheduler: Optional[Scheduler] = None,
        settings: Optional[SettingsManager] = None,
        event_bus: Optional[EventBus] = None,
        error_handler: Optional[ErrorHandler] = None,
    ) -> None:
        self._image_service = image_service
        self._host = host
        self._document = document
        self._preview = preview
        self._crop_widget_factory = crop_widget_factory
        self._translator = translator or IdentityTranslator()
        self._scheduler = scheduler or ManualScheduler()
        self._settings = settings

        self._events = event_bus or EventBus(_LOGGER)
        self._error_handler = error_handler or ErrorHandler(_LOGGER, self._events)

        self._store = TransformationStore()
        self._rotation = RotationHandler()
        self._crop = CropCoordinator(
            min_size=self._setting("editor.min_crop_size", MIN_CROP_SIZE),
            starter_size=self._setting("editor.starter_crop_size", STARTER_CROP_SIZE),
        )

        self._image: Optional[ImageDescriptor] = None
        self._base_url: Optional[ImageUrl] = None
        self._binding: Optional[EditedElementBinding] = None
        self._preview_url: Optional[str] = None
        # ``_sequence`` numbers every preview request; ``_awaited_sequence``
        # is the only one whose completion is still honoured.
        self._sequence = 0
        self._awaited_sequence: Optional[int] = None
        self._visible = False

        self._slider_debouncer = Debouncer(
            self._scheduler,
            self._setting("editor.slider_debounce_ms", SLIDER_DEBOUNCE_MS),
            self.refresh_view,
        )

        self._store.parameter_changed.connect(self._on_parameters_changed_externally)
        self._store.reset_performed.connect(self._on_store_reset)

        self._host.add_listeners(
            element_selected=self.on_editor_select_image,
            element_deselected=self.on_editor_deselect_image,
        )

    # ------------------------------------------------------------------
    # Event registry
    # ------------------------------------------------------------------
    def on(self, event_type: type[Event], handler: Callable[[Any], None]) -> Subscription:
        return self._events.subscribe(event_type, handler)

    def off(self, subscription: Subscription) -> None:
        self._events.unsubscribe(subscription)

    def trigger(self, event: Event) -> None:
        self._events.publish(event)

    @property
    def event_bus(self) -> EventBus:
        return self._events

    @property
    def error_handler(self) -> ErrorHandler:
        return self._error_handler

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------
    @property
    def image_identifier(self) -> Optional[str]:
        return self._image.identifier if self._image is not None else None

    @property
    def image(self) -> Optional[ImageDescriptor]:
        return self._image

    @property
    def binding(self) -> Optional[EditedElementBinding]:
        return self._binding

    @property
    def crop(self) -> CropCoordinator:
        return self._crop

    @property
    def visible(self) -> bool:
        return self._visible

    @property
    def preview_url(self) -> Optional[str]:
        return self._preview_url

    @property
    def sequence(self) -> int:
        return self._sequence

    @property
    def awaited_sequence(self) -> Optional[int]:
        return self._awaited_sequence

    @property
    def store(self) -> TransformationStore:
        return self._store

    def transformations(self) -> TransformationSet:
        return self._store.get()

    def diff(self) -> TransformationDiff:
        return diff(self._store.get(), self._store.defaults)

    def crop_formats(self) -> dict[str, float]:
        """Return the ratio presets in display order."""

        formats = self._setting("crop_formats", None)
        return dict(formats if formats else CROP_FORMATS)

    # ------------------------------------------------------------------
    # Visibility
    # ------------------------------------------------------------------
    def show(self) -> "ImageEditorController":
        self._host.maximize_app_window(
            self._translator.translate("IMAGE_EDITOR_TITLE"),
            self.hide,
        )
        self._visible = True
        self.trigger(EditorShownEvent(editor="image"))
        return self

    def hide(self) -> None:
        """Close the editor; in-flight preview loads become no-ops."""

        self._image = None
        self._base_url = None
        self._awaited_sequence = None
        self._slider_debouncer.cancel()
        self._reset_state()
        self._crop.clear_pending()
        self._preview_url = None
        self._preview.clear()

        self._visible = False
        self.trigger(EditorHiddenEvent(editor="image"))

        self._host.restore_app_window()
        self._host.hide_loader()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def open(
        self,
        image_identifier: str,
        options: Optional[Union[OpenOptions, Mapping[str, Any]]] = None,
    ) -> ImageUrl:
        """Start editing *image_identifier* and request the first preview.

        An edit-in-place binding set by the selection flow survives; every
        other piece of state starts over.
        """

        opts = self._coerce_options(options)

        self._slider_debouncer.cancel()
        self._store.reset()
        self._crop.clear()

        self._image = ImageDescriptor(
            identifier=image_identifier,
            original_width=int(opts.width or 0),
            original_height=int(opts.height or 0),
        )
        self._rotation.set_original_size(self._image.original_size)
        self._crop.set_true_size(self._image.original_size)
        self._base_url = self._image_service.get_image_url(image_identifier)

        if opts.crop:
            self._crop.import_region(opts.crop, force_apply=True)
        if opts.aspect_ratio:
            self._crop.lock_ratio(float(opts.aspect_ratio))

        applied = self._store.apply_descriptors(
            _to_descriptor(item) for item in opts.transformations or ()
        )
        angle = self._store.value("rotate", "angle", 0)
        if angle:
            self._crop.set_true_size(self._rotation.true_size(angle))

        _LOGGER.debug(
            "Opened %s (%sx%s) with %d transformation(s)",
            image_identifier,
            opts.width,
            opts.height,
            applied,
        )
        return self.refresh_view()

    @staticmethod
    def _coerce_options(options: Optional[Union[OpenOptions, Mapping[str, Any]]]) -> OpenOptions:
        if options is None:
            return OpenOptions()
        if isinstance(options, OpenOptions):
            return options
        return OpenOptions(
            width=options.get("width") or 0,
            height=options.get("height") or 0,
            crop=options.get("crop"),
            aspect_ratio=options.get("aspect_ratio", options.get("cropAspectRatio")),
            transformations=list(options.get("transformations") or []),
        )

    def refresh_view(self) -> Optional[ImageUrl]:
        """Rebuild the preview URL and ask the surface to display it."""

        if self._base_url is None:
            _LOGGER.debug("Skipping view refresh, no image is open")
            return None

        url = build_url(
            self._base_url,
            self.diff(),
            None,
            preview=True,
            max_preview_width=self._setting("editor.max_preview_width", MAX_PREVIEW_WIDTH),
            max_preview_height=self._setting("editor.max_preview_height", MAX_PREVIEW_HEIGHT),
            image_format=self._setting("editor.output_format", OUTPUT_FORMAT),
        )

        self._sequence += 1
        self._awaited_sequence = self._sequence
        self._host.show_loader(self._translator.translate("IMAGE_EDITOR_LOADING_IMAGE"))

        url_string = url.to_string()
        self._preview_url = url_string
        self._preview.display(url_string, self._sequence)
        self.trigger(PreviewRequestedEvent(url=url_string, sequence=self._sequence))

        widget = self._crop.widget
        if widget is not None:
            widget.set_image(url_string)
        return url

    def on_image_preview_loaded(self, width: int, height: int, sequence: Optional[int] = None) -> bool:
        """Handle a finished preview load reported by the surface.

        Returns ``True`` when the pending crop region was pushed to the widget.
        """

        if self._awaited_sequence is None or self._image is None:
            _LOGGER.debug("Ignoring preview load %s, editor is closed", sequence)
            return False
        if sequence is not None and sequence != self._awaited_sequence:
            _LOGGER.debug(
                "Ignoring stale preview load %s, waiting for %s",
                sequence,
                self._awaited_sequence,
            )
            return False

        self._ensure_crop_widget()
        self._host.hide_loader()

        applied = self._crop.on_image_preview_loaded(width, height)
        self._image.last_displayed_width = width
        self._image.last_displayed_height = height
        return applied

    def _ensure_crop_widget(self) -> None:
        if self._crop.widget is not None or self._crop_widget_factory is None:
            return
        widget = self._crop_widget_factory(self.on_crop_change, self._crop.true_size)
        self._crop.attach_widget(widget)
        if self._preview_url is not None:
            widget.set_image(self._preview_url)

    # ------------------------------------------------------------------
    # User input
    # ------------------------------------------------------------------
    def on_adjust_slider(self, name: str, value: Any) -> bool:
        """Record a slider value and schedule a debounced refresh.

        The value lands in the store immediately, so several sliders moved
        within one quiet window all reach the next preview.
        """

        target = SLIDER_PARAMETERS.get(name)
        if target is None:
            _LOGGER.warning("Ignoring unknown slider %r", name)
            return False
        if isinstance(value, str):
            value = coerce_value(value)
        operation, param = target
        self._store.set(operation, param, value)
        self._slider_debouncer.trigger()
        return True

    def rotate(self, delta: int) -> Optional[ImageUrl]:
        if self._image is None:
            _LOGGER.warning("Cannot rotate, no image is open")
            return None
        result = self._rotation.rotate(self._store.value("rotate", "angle", 0), delta)
        self._crop.on_rotated(result.true_size)
        self._store.set("rotate", "angle", result.angle)
        return self.refresh_view()

    def lock_ratio(self, ratio: float) -> None:
        self._crop.lock_ratio(ratio)

    def lock_ratio_preset(self, label: str) -> float:
        formats = self.crop_formats()
        if label not in formats:
            raise ValueError(f"Unknown crop format: {label}")
        ratio = formats[label]
        self.lock_ratio(ratio)
        return ratio

    def unlock_ratio(self) -> None:
        self._crop.unlock_ratio()

    def on_crop_change(self, coords: Union[CropRegion, Mapping[str, Any], Sequence[float]]) -> None:
        self._crop.on_external_selection_change(coords)

    # ------------------------------------------------------------------
    # Reset / commit
    # ------------------------------------------------------------------
    def _reset_state(self) -> None:
        self._store.reset()
        self._crop.clear()
        self._binding = None

    def reset(self) -> Optional[ImageUrl]:
        self._slider_debouncer.cancel()
        self._reset_state()
        if self._image is not None:
            self._crop.set_true_size(self._image.original_size)
        return self.refresh_view()

    def commit(self) -> Optional[CommitResult]:
        """Write the edited reference into the document and close the editor."""

        if self._image is None or self._base_url is None:
            self._error_handler.handle(
                ConfigurationError("Tried to insert image, no image active"),
                ErrorSeverity.ERROR,
                {"operation": "commit"},
            )
            return None

        self._slider_debouncer.cancel()
        region = self._crop.committed_region()
        url = build_url(
            self._base_url,
            self.diff(),
            region,
            preview=False,
            max_output_width=self._setting("editor.output_max_width", OUTPUT_MAX_WIDTH),
            min_crop_size=self._setting("editor.min_crop_size", MIN_CROP_SIZE),
            image_format=self._setting("editor.output_format", OUTPUT_FORMAT),
        )
        url_string = url.to_string()

        metadata = PlacementMetadata(
            image_identifier=self._image.identifier,
            crop_parameters=region.to_dict() if region is not None else None,
            crop_aspect_ratio=self._crop.aspect_lock,
            transformations=url.get_transformations(),
            original_width=self._image.original_width or None,
            original_height=self._image.original_height or None,
        )

        binding = self._binding
        if binding is not None:
            markup = replace_image(binding.original_markup or "", url_string, metadata)
            self._document.replace_element_by_id(binding.element_id, markup)
        else:
            markup = build_markup(url_string, metadata)
            self._document.insert_element(markup, select=True)

        result = CommitResult(
            url=url_string,
            markup=markup,
            metadata=metadata,
            replaced_element_id=binding.element_id if binding is not None else None,
        )
        self.trigger(
            ElementCommittedEvent(
                markup=markup,
                url=url_string,
                metadata=metadata.to_dict(),
                replaced_element_id=result.replaced_element_id,
            )
        )
        _LOGGER.info(
            "Committed %s (%s)",
            metadata.image_identifier,
            "replaced" if result.replaced else "inserted",
        )

        self.hide()
        return result

    # ------------------------------------------------------------------
    # Edit in place
    # ------------------------------------------------------------------
    def on_editor_select_image(self, element_id: str) -> None:
        self._binding = EditedElementBinding(element_id=element_id)
        self._document.get_html_by_id(
            element_id,
            lambda html, selected=element_id: self._on_selected_markup(selected, html),
        )

    def _on_selected_markup(self, element_id: str, html: str) -> None:
        binding = self._binding
        if binding is None or binding.element_id != element_id:
            _LOGGER.debug("Selection of %s was superseded", element_id)
            return
        binding.original_markup = html

        try:
            metadata = read_placement(html)
        except MetadataInvalidError as exc:
            self._error_handler.handle(exc, ErrorSeverity.WARNING, {"element_id": element_id})
            return
        if metadata is None:
            _LOGGER.debug("Element %s holds no editable image", element_id)
            return

        self.trigger(
            ImageSelectedEvent(
                element_id=element_id,
                image_identifier=metadata.image_identifier,
                transformations=list(metadata.transformations),
                crop_params=metadata.crop_parameters,
                crop_aspect_ratio=metadata.crop_aspect_ratio,
            )
        )
        self.open(
            metadata.image_identifier,
            OpenOptions(
                width=metadata.original_width or 0,
                height=metadata.original_height or 0,
                crop=metadata.crop_parameters,
                aspect_ratio=metadata.crop_aspect_ratio,
                transformations=list(metadata.transformations),
            ),
        )

    def on_editor_deselect_image(self) -> None:
        self.trigger(ImageDeselectedEvent())
        self._binding = None

    # ------------------------------------------------------------------
    # Internal utilities
    # ------------------------------------------------------------------
    def _setting(self, key: str, default: Any) -> Any:
        if self._settings is None:
            return default
        value = self._settings.get(key)
        return default if value is None else value

    def _on_parameters_changed_externally(self, operation: str, params: dict[str, Any]) -> None:
        self.trigger(ParametersChangedExternallyEvent(operation=operation, params=params))

    def _on_store_reset(self) -> None:
        self.trigger(TransformationsResetEvent())


__all__ = ["ImageEditorController", "SLIDER_PARAMETERS"]
