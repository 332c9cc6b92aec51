from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Orientation


@dataclass(frozen=True)
class GalleryImage:
    id: str
    image_url: str
    alt_text_pt: str
    alt_text_en: str
    orientation: Orientation = Orientation.LANDSCAPE
    display_order: int = 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "image_url": self.image_url,
            "alt_text_pt": self.alt_text_pt,
            "alt_text_en": self.alt_text_en,
            "orientation": self.orientation.value,
            "display_order": self.display_order,
        }


@dataclass(frozen=True)
class UploadedImage:
    """Result of storing an image file, before it is added to the gallery."""

    url: str
    path: str
    orientation: Orientation
    width: int
    height: int

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "path": self.path,
            "orientation": self.orientation.value,
            "width": self.width,
            "height": self.height,
        }
