"""Application-wide context: configuration, services and editor factories."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union
from urllib.parse import parse_qsl

from .application.interfaces import (
    CropWidgetFactory,
    IDocumentEditor,
    IHostBridge,
    IImageServiceClient,
    IPreviewSurface,
    ITranslator,
    IdentityTranslator,
)
from .application.services.image_service import InMemoryImageServiceClient
from .errors import ConfigurationError
from .gui.scheduling import ManualScheduler, Scheduler
from .settings.manager import SettingsManager
from .utils.logging import get_logger

LOGGER = get_logger(__name__)


def parse_query_string(query_string: str) -> dict[str, str]:
    """Return the host parameters passed in the editor's query string."""

    return dict(parse_qsl(query_string.lstrip("?"), keep_blank_values=True))


@dataclass
class AppContext:
    """Container object shared by the editors of one host session."""

    settings: SettingsManager
    image_service: IImageServiceClient
    config: dict[str, Any] = field(default_factory=dict)
    translator: ITranslator = field(default_factory=IdentityTranslator)
    scheduler: Scheduler = field(default_factory=ManualScheduler)

    def create_image_editor(
        self,
        host: IHostBridge,
        document: IDocumentEditor,
        preview: IPreviewSurface,
        *,
        crop_widget_factory: Optional[CropWidgetFactory] = None,
    ):
        from .gui.controllers.image_editor import ImageEditorController

        return ImageEditorController(
            self.image_service,
            host,
            document,
            preview,
            crop_widget_factory=crop_widget_factory,
            translator=self.translator,
            scheduler=self.scheduler,
            settings=self.settings,
        )

    def create_meta_editor(self, host: IHostBridge):
        from .gui.controllers.meta_editor import MetadataEditorController

        return MetadataEditorController(
            self.image_service,
            host,
            translator=self.translator,
            scheduler=self.scheduler,
            settings=self.settings,
        )


def create_context(
    query_string: str = "",
    settings: Union[SettingsManager, Mapping[str, Any], None] = None,
    *,
    translator: Optional[ITranslator] = None,
    scheduler: Optional[Scheduler] = None,
) -> AppContext:
    """Build the context for a host session.

    Raises :class:`ConfigurationError` when no image service is configured.
    """

    if not isinstance(settings, SettingsManager):
        settings = SettingsManager.from_mapping(dict(settings) if settings else None)

    service_config = settings.image_service_config()
    if not service_config or not service_config.get("host"):
        raise ConfigurationError("Image service configuration is not defined")

    config: dict[str, Any] = parse_query_string(query_string)
    config["image_service"] = service_config

    image_service = InMemoryImageServiceClient(
        service_config["host"],
        service_config.get("user"),
        service_config.get("private_key"),
    )
    LOGGER.debug("Created context for image service %s", service_config["host"])

    return AppContext(
        settings=settings,
        image_service=image_service,
        config=config,
        translator=translator or IdentityTranslator(),
        scheduler=scheduler or ManualScheduler(),
    )


__all__ = ["AppContext", "create_context", "parse_query_string"]
