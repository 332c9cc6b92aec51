from __future__ import annotations

import io
import logging
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple
from uuid import uuid4

from PIL import Image, UnidentifiedImageError

from ..common.validators import require_fields, require_non_empty
from ..core.constants import MAX_UPLOAD_BYTES
from ..core.enums import Orientation
from ..core.exceptions import NotFoundError, ValidationError
from .model import GalleryImage, UploadedImage
from .repository import GalleryRepository, ImageStorage

log = logging.getLogger(__name__)

REQUIRED_FIELDS = ("image_url", "alt_text_pt", "alt_text_en")

_EXTENSIONS = {"JPEG": ".jpg", "PNG": ".png", "WEBP": ".webp", "GIF": ".gif"}
# EXIF orientations that rotate the picture by 90 degrees
_ROTATED_EXIF = {5, 6, 7, 8}
_EXIF_ORIENTATION_TAG = 274


def inspect_image(data: bytes) -> Tuple[str, int, int]:
    """Decode ``data`` with Pillow and return (format, width, height) as displayed."""

    try:
        with Image.open(io.BytesIO(data)) as candidate:
            candidate.verify()
        with Image.open(io.BytesIO(data)) as img:
            fmt = img.format or ""
            width, height = img.size
            if img.getexif().get(_EXIF_ORIENTATION_TAG) in _ROTATED_EXIF:
                width, height = height, width
    except (UnidentifiedImageError, OSError, SyntaxError):
        raise ValidationError("File is not a valid image", code="INVALID_IMAGE") from None
    return fmt, width, height


def orientation_for(width: int, height: int) -> Orientation:
    return Orientation.PORTRAIT if height > width else Orientation.LANDSCAPE


class GalleryService:
    """Vine Kids photo gallery."""

    def __init__(self, images: GalleryRepository, storage: ImageStorage, *, max_upload_bytes: int = MAX_UPLOAD_BYTES):
        self._images = images
        self._storage = storage
        self._max_upload_bytes = max_upload_bytes

    def list_ordered(self) -> Sequence[GalleryImage]:
        return self._images.list_ordered()

    def get(self, image_id: str) -> GalleryImage:
        image = self._images.get_by_id(image_id)
        if image is None:
            raise NotFoundError("Image not found", code="IMAGE_NOT_FOUND")
        return image

    def upload(self, data: Optional[bytes], *, content_type: Optional[str]) -> UploadedImage:
        if not data:
            raise ValidationError("An image file is required", code="MISSING_FILE", details={"missing_fields": ["file"]})
        if not (content_type or "").startswith("image/"):
            raise ValidationError("Only image files are allowed", code="INVALID_FILE_TYPE", details={"content_type": content_type})
        if len(data) > self._max_upload_bytes:
            raise ValidationError(
                f"Image must be at most {self._max_upload_bytes // (1024 * 1024)} MB",
                code="FILE_TOO_LARGE",
                details={"size": len(data), "max_size": self._max_upload_bytes},
            )

        fmt, width, height = inspect_image(data)
        path = f"{uuid4().hex}{_EXTENSIONS.get(fmt, '.img')}"
        url = self._storage.upload(path, data, content_type)
        uploaded = UploadedImage(url=url, path=path, orientation=orientation_for(width, height), width=width, height=height)
        log.info("gallery image uploaded path=%s %dx%d %s", path, width, height, uploaded.orientation.value)
        return uploaded

    def create(self, payload: Mapping[str, Any]) -> GalleryImage:
        require_fields(payload, REQUIRED_FIELDS)
        values = self._clean(payload)
        values.setdefault("orientation", Orientation.LANDSCAPE)
        values.setdefault("display_order", 0)
        image = self._images.create(values)
        log.info("gallery image created id=%s", image.id)
        return image

    def update(self, image_id: str, payload: Mapping[str, Any]) -> GalleryImage:
        values = self._clean({k: v for k, v in payload.items() if k != "id"})
        if not values:
            raise ValidationError("Nothing to update", code="EMPTY_UPDATE")
        image = self._images.update(image_id, values)
        if image is None:
            raise NotFoundError("Image not found", code="IMAGE_NOT_FOUND")
        return image

    def delete(self, image_id: str) -> None:
        image = self.get(image_id)
        path = self._storage.path_for_url(image.image_url)
        if path:
            self._storage.remove(path)
        self._images.delete(image_id)
        log.info("gallery image deleted id=%s storage_path=%s", image_id, path)

    @staticmethod
    def _clean(payload: Mapping[str, Any]) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        for key in REQUIRED_FIELDS:
            if key in payload:
                values[key] = require_non_empty(payload[key], key)
        if "orientation" in payload:
            try:
                values["orientation"] = Orientation(payload["orientation"])
            except ValueError:
                raise ValidationError(
                    "orientation must be portrait or landscape",
                    code="INVALID_ORIENTATION",
                    details={"field": "orientation"},
                ) from None
        if "display_order" in payload:
            try:
                values["display_order"] = int(payload["display_order"] or 0)
            except (TypeError, ValueError):
                raise ValidationError("display_order must be an integer", details={"field": "display_order"}) from None
        return values
