import logging
from copy import deepcopy
from typing import Any, Dict, Optional

from iEdit.application.interfaces import IImageServiceClient, MetadataCallback
from iEdit.core.url_builder import ImageUrl
from iEdit.errors import ImageServiceError


class InMemoryImageServiceClient(IImageServiceClient):
    """
    Image service client backed by a dictionary.
    Used by the CLI and by tests; metadata callbacks fire synchronously.
    """

    def __init__(
        self,
        host: str,
        user: Optional[str] = None,
        private_key: Optional[str] = None,
        metadata: Optional[Dict[str, Dict[str, Any]]] = None,
    ):
        self._host = host
        self._user = user
        self._private_key = private_key
        self._metadata: Dict[str, Dict[str, Any]] = deepcopy(metadata) if metadata else {}
        self._logger = logging.getLogger(__name__)

    @property
    def host(self) -> str:
        return self._host

    def add_image(self, image_identifier: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        self._metadata[image_identifier] = dict(metadata or {})

    def get_image_url(self, image_identifier: str) -> ImageUrl:
        return ImageUrl(
            self._host,
            image_identifier,
            self._user,
            private_key=self._private_key,
        )

    def get_metadata(self, image_identifier: str, callback: MetadataCallback) -> None:
        if image_identifier not in self._metadata:
            self._logger.warning("No metadata stored for image %s", image_identifier)
            callback(ImageServiceError(f"Unknown image: {image_identifier}"), None)
            return
        callback(None, dict(self._metadata[image_identifier]))

    def edit_metadata(self, image_identifier: str, data: Dict[str, Any], callback: MetadataCallback) -> None:
        if image_identifier not in self._metadata:
            callback(ImageServiceError(f"Unknown image: {image_identifier}"), None)
            return
        stored = self._metadata[image_identifier]
        stored.update(data)
        self._logger.info("Updated %d metadata field(s) on %s", len(data), image_identifier)
        callback(None, dict(stored))
