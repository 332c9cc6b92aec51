from __future__ import annotations

from flask import Flask, request

from ..auth.guards import roles_required
from ..common.http import json_ok, request_json
from ..container import Container
from ..core.enums import ADMIN_ROLES


def register(app: Flask, container: Container) -> None:
    admin_required = roles_required(container.auth_service, container.role_service, ADMIN_ROLES)
    gallery = container.gallery_service

    @app.route("/api/vine-kids-gallery", methods=["GET"], endpoint="gallery_list")
    def list_images():
        return json_ok([i.to_dict() for i in gallery.list_ordered()])

    @app.route("/api/vine-kids-gallery/<image_id>", methods=["GET"], endpoint="gallery_get")
    def get_image(image_id: str):
        return json_ok(gallery.get(image_id).to_dict())

    @app.route("/api/vine-kids-gallery/upload", methods=["POST"], endpoint="gallery_upload")
    @admin_required
    def upload_image():
        file = request.files.get("file")
        data = file.read() if file else None
        uploaded = gallery.upload(data, content_type=file.mimetype if file else None)
        return json_ok(uploaded.to_dict(), 201)

    @app.route("/api/vine-kids-gallery", methods=["POST"], endpoint="gallery_create")
    @admin_required
    def create_image():
        return json_ok(gallery.create(request_json()).to_dict(), 201)

    @app.route("/api/vine-kids-gallery/<image_id>", methods=["PUT", "PATCH"], endpoint="gallery_update")
    @admin_required
    def update_image(image_id: str):
        return json_ok(gallery.update(image_id, request_json()).to_dict())

    @app.route("/api/vine-kids-gallery/<image_id>", methods=["DELETE"], endpoint="gallery_delete")
    @admin_required
    def delete_image(image_id: str):
        gallery.delete(image_id)
        return json_ok({"deleted": True})
