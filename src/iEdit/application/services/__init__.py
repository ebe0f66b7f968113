from .image_service import InMemoryImageServiceClient

__all__ = ["InMemoryImageServiceClient"]
