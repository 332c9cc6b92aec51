from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence
from urllib.parse import unquote

from storage3.exceptions import StorageApiError

from ..common.datetime_utils import now_utc
from ..core.constants import STORAGE_PUBLIC_MARKER, TABLE_GALLERY
from ..core.enums import Orientation
from ..core.exceptions import BackendError
from ..database.connection import BackendConnection
from ..database.supabase_base import SupabaseRepository, first, run, to_row
from .model import GalleryImage
from .repository import GalleryRepository, ImageStorage

log = logging.getLogger(__name__)


def _to_image(r: Dict[str, Any]) -> GalleryImage:
    return GalleryImage(
        id=str(r["id"]),
        image_url=r["image_url"],
        alt_text_pt=r.get("alt_text_pt") or "",
        alt_text_en=r.get("alt_text_en") or "",
        orientation=Orientation(r.get("orientation") or Orientation.LANDSCAPE.value),
        display_order=int(r.get("display_order") or 0),
    )


class SupabaseGalleryRepository(SupabaseRepository, GalleryRepository):
    table_name = TABLE_GALLERY

    def list_ordered(self) -> Sequence[GalleryImage]:
        rows = run(self._table().select("*").order("display_order"), action="list gallery images")
        return [_to_image(r) for r in rows]

    def get_by_id(self, image_id: str) -> Optional[GalleryImage]:
        r = first(run(self._table().select("*").eq("id", image_id).limit(1), action="load gallery image"))
        return _to_image(r) if r else None

    def create(self, values: Dict[str, Any]) -> GalleryImage:
        return _to_image(run(self._table().insert(to_row(values)), action="create gallery image")[0])

    def update(self, image_id: str, values: Dict[str, Any]) -> Optional[GalleryImage]:
        payload = to_row({**values, "updated_at": now_utc()})
        r = first(run(self._table().update(payload).eq("id", image_id), action="update gallery image"))
        return _to_image(r) if r else None

    def delete(self, image_id: str) -> bool:
        return bool(run(self._table().delete().eq("id", image_id), action="delete gallery image"))


class SupabaseImageStorage(ImageStorage):
    def __init__(self, conn: BackendConnection, bucket: str):
        self._conn = conn
        self._bucket = bucket

    def _files(self):
        return self._conn.admin().storage.from_(self._bucket)

    def upload(self, path: str, data: bytes, content_type: str) -> str:
        log.info("[storage] upload %s/%s bytes=%d", self._bucket, path, len(data))
        try:
            self._files().upload(path, data, {"content-type": content_type})
        except StorageApiError as e:
            raise self._failed("upload image", e) from e
        return str(self._files().get_public_url(path)).rstrip("?")

    def path_for_url(self, url: str) -> Optional[str]:
        if not url or STORAGE_PUBLIC_MARKER not in url:
            return None
        if self._conn.url and not url.startswith(self._conn.url.rstrip("/")):
            return None
        bucket, _, path = url.split(STORAGE_PUBLIC_MARKER, 1)[1].partition("/")
        if bucket != self._bucket or not path:
            return None
        return unquote(path.split("?", 1)[0])

    def remove(self, path: str) -> None:
        log.info("[storage] remove %s/%s", self._bucket, path)
        try:
            self._files().remove([path])
        except StorageApiError as e:
            raise self._failed("remove image", e) from e

    def _failed(self, action: str, e: StorageApiError) -> BackendError:
        log.error("storage %s failed bucket=%s code=%s message=%s", action, self._bucket, e.code, e.message)
        return BackendError(f"Failed to {action}", db_code=str(e.code), db_message=e.message)
