from __future__ import annotations

import io
from dataclasses import replace

import pytest
from PIL import Image

from vine_portal.core.enums import Orientation
from vine_portal.core.exceptions import NotFoundError, ValidationError
from vine_portal.gallery.model import GalleryImage
from vine_portal.gallery.service import GalleryService, inspect_image
from vine_portal.gallery.supabase_gallery_repository import SupabaseImageStorage

BASE_URL = "https://abc.supabase.co"


def _image_bytes(size, fmt="PNG", exif_orientation=None) -> bytes:
    buf = io.BytesIO()
    img = Image.new("RGB", size, (120, 200, 80))
    if exif_orientation is not None:
        exif = Image.Exif()
        exif[274] = exif_orientation
        img.save(buf, fmt, exif=exif)
    else:
        img.save(buf, fmt)
    return buf.getvalue()


class InMemoryStorage:
    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.removed: list[str] = []

    def upload(self, path, data, content_type):
        self.objects[path] = data
        return f"{BASE_URL}/storage/v1/object/public/vine-kids-gallery/{path}"

    def path_for_url(self, url):
        prefix = f"{BASE_URL}/storage/v1/object/public/vine-kids-gallery/"
        return url[len(prefix):] if url.startswith(prefix) else None

    def remove(self, path):
        self.removed.append(path)
        self.objects.pop(path, None)


class InMemoryImages:
    def __init__(self):
        self.rows: dict[str, GalleryImage] = {}

    def list_ordered(self):
        return sorted(self.rows.values(), key=lambda i: i.display_order)

    def get_by_id(self, image_id):
        return self.rows.get(image_id)

    def create(self, values):
        image = GalleryImage(id=f"g{len(self.rows) + 1}", **values)
        self.rows[image.id] = image
        return image

    def update(self, image_id, values):
        if image_id not in self.rows:
            return None
        self.rows[image_id] = replace(self.rows[image_id], **values)
        return self.rows[image_id]

    def delete(self, image_id):
        return self.rows.pop(image_id, None) is not None


def _service(max_upload_bytes=5 * 1024 * 1024):
    storage = InMemoryStorage()
    images = InMemoryImages()
    return GalleryService(images, storage, max_upload_bytes=max_upload_bytes), images, storage


def test_upload_detects_orientation_and_stores_file():
    svc, _, storage = _service()

    uploaded = svc.upload(_image_bytes((30, 60)), content_type="image/png")

    assert uploaded.orientation == Orientation.PORTRAIT
    assert (uploaded.width, uploaded.height) == (30, 60)
    assert uploaded.path.endswith(".png")
    assert uploaded.path in storage.objects
    assert uploaded.url.endswith(uploaded.path)


def test_exif_rotation_swaps_dimensions():
    fmt, width, height = inspect_image(_image_bytes((60, 30), "JPEG", exif_orientation=6))
    assert fmt == "JPEG"
    assert (width, height) == (30, 60)


@pytest.mark.parametrize(
    "data, content_type, code",
    [
        (b"", "image/png", "MISSING_FILE"),
        (b"%PDF-1.4", "application/pdf", "INVALID_FILE_TYPE"),
        (b"not really a png", "image/png", "INVALID_IMAGE"),
    ],
)
def test_upload_rejects_bad_files(data, content_type, code):
    svc, _, storage = _service()
    with pytest.raises(ValidationError) as exc:
        svc.upload(data, content_type=content_type)
    assert exc.value.code == code
    assert storage.objects == {}


def test_upload_rejects_oversized_file():
    data = _image_bytes((10, 10))
    svc, _, storage = _service(max_upload_bytes=len(data) - 1)
    with pytest.raises(ValidationError) as exc:
        svc.upload(data, content_type="image/png")
    assert exc.value.code == "FILE_TOO_LARGE"
    assert storage.objects == {}


def test_delete_removes_storage_object_and_row():
    svc, images, storage = _service()
    uploaded = svc.upload(_image_bytes((60, 30)), content_type="image/png")
    image = svc.create({"image_url": uploaded.url, "alt_text_pt": "Crianças", "alt_text_en": "Kids", "orientation": "landscape"})

    svc.delete(image.id)

    assert storage.removed == [uploaded.path]
    assert images.rows == {}
    with pytest.raises(NotFoundError):
        svc.delete(image.id)


def test_delete_keeps_foreign_urls_in_storage():
    svc, images, storage = _service()
    image = svc.create({"image_url": "https://cdn.example.org/kids.jpg", "alt_text_pt": "a", "alt_text_en": "a"})
    svc.delete(image.id)
    assert storage.removed == []
    assert images.rows == {}


def test_create_rejects_unknown_orientation():
    svc, _, _ = _service()
    with pytest.raises(ValidationError) as exc:
        svc.create({"image_url": "u", "alt_text_pt": "a", "alt_text_en": "a", "orientation": "square"})
    assert exc.value.code == "INVALID_ORIENTATION"


class _Conn:
    url = BASE_URL


@pytest.mark.parametrize(
    "url, expected",
    [
        (f"{BASE_URL}/storage/v1/object/public/vine-kids-gallery/abc.jpg", "abc.jpg"),
        (f"{BASE_URL}/storage/v1/object/public/vine-kids-gallery/2024/a%20b.jpg?t=1", "2024/a b.jpg"),
        (f"{BASE_URL}/storage/v1/object/public/other-bucket/abc.jpg", None),
        ("https://elsewhere.io/storage/v1/object/public/vine-kids-gallery/abc.jpg", None),
        ("https://cdn.example.org/kids.jpg", None),
        ("", None),
    ],
)
def test_storage_path_for_url(url, expected):
    assert SupabaseImageStorage(_Conn(), "vine-kids-gallery").path_for_url(url) == expected
