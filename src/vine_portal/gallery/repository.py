from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Sequence

from .model import GalleryImage


class GalleryRepository(Protocol):
    def list_ordered(self) -> Sequence[GalleryImage]:
        raise NotImplementedError

    def get_by_id(self, image_id: str) -> Optional[GalleryImage]:
        raise NotImplementedError

    def create(self, values: Dict[str, Any]) -> GalleryImage:
        raise NotImplementedError

    def update(self, image_id: str, values: Dict[str, Any]) -> Optional[GalleryImage]:
        raise NotImplementedError

    def delete(self, image_id: str) -> bool:
        raise NotImplementedError


class ImageStorage(Protocol):
    """Object storage for gallery files."""

    def upload(self, path: str, data: bytes, content_type: str) -> str:
        """Store ``data`` at ``path`` and return its public URL."""

        raise NotImplementedError

    def path_for_url(self, url: str) -> Optional[str]:
        """Object path inside the gallery bucket when ``url`` points to it, else None."""

        raise NotImplementedError

    def remove(self, path: str) -> None:
        raise NotImplementedError
