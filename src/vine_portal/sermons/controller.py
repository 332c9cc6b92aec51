from __future__ import annotations

from flask import Flask, request

from ..auth.guards import roles_required
from ..common.http import json_ok, query_int, request_json
from ..container import Container
from ..core.constants import MAX_PAGE_SIZE
from ..core.enums import ADMIN_ROLES


def register(app: Flask, container: Container) -> None:
    admin_required = roles_required(container.auth_service, container.role_service, ADMIN_ROLES)
    sermons = container.sermon_service

    @app.route("/api/sermons", methods=["GET"], endpoint="sermons_list")
    def list_sermons():
        page = sermons.list_page(
            page=query_int("page", 1),
            per_page=query_int("per_page", container.page_size, maximum=MAX_PAGE_SIZE),
            q=request.args.get("q"),
        )
        return json_ok(
            [s.to_localized() for s in page.items],
            source=page.source.value,
            pagination=page.pagination(),
        )

    @app.route("/api/sermons/<sermon_id>", methods=["GET"], endpoint="sermons_get")
    def get_sermon(sermon_id: str):
        sermon, source = sermons.get(sermon_id)
        return json_ok(sermon.to_localized(), source=source.value)

    @app.route("/api/sermons", methods=["POST"], endpoint="sermons_create")
    @admin_required
    def create_sermon():
        return json_ok(sermons.create(request_json()).to_localized(), 201)

    @app.route("/api/sermons/<sermon_id>", methods=["PUT"], endpoint="sermons_update")
    @admin_required
    def update_sermon(sermon_id: str):
        return json_ok(sermons.update(sermon_id, request_json()).to_localized())

    @app.route("/api/sermons/<sermon_id>", methods=["DELETE"], endpoint="sermons_delete")
    @admin_required
    def delete_sermon(sermon_id: str):
        sermons.delete(sermon_id)
        return json_ok({"deleted": True})
