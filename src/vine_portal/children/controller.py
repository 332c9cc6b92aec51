from __future__ import annotations

from flask import Flask, g, request

from ..auth.guards import login_required, roles_required
from ..common.http import json_ok, request_json
from ..container import Container
from ..core.enums import STAFF_ROLES


def register(app: Flask, container: Container) -> None:
    auth_required = login_required(container.auth_service)
    staff_required = roles_required(container.auth_service, container.role_service, STAFF_ROLES)
    children = container.child_service
    visitor_children = container.visitor_child_service

    @app.route("/api/children", methods=["GET"], endpoint="children_list")
    @auth_required
    def list_children():
        rows = children.list_for_parent(g.auth_user, request.args.get("parent_id"))
        return json_ok([c.to_dict() for c in rows])

    @app.route("/api/children", methods=["POST"], endpoint="children_create")
    @auth_required
    def create_child():
        return json_ok(children.create(g.auth_user, request_json()).to_dict(), 201)

    @app.route("/api/children", methods=["PUT"], endpoint="children_update")
    @auth_required
    def update_child():
        return json_ok(children.update(g.auth_user, request_json()).to_dict())

    @app.route("/api/children", methods=["DELETE"], endpoint="children_delete")
    @auth_required
    def delete_child():
        children.delete(g.auth_user, request.args.get("id"))
        return json_ok({"deleted": True})

    @app.route("/api/visitor-children", methods=["GET"], endpoint="visitor_children_list")
    @staff_required
    def list_visitor_children():
        return json_ok([c.to_dict() for c in visitor_children.search(request.args.get("search"))])

    @app.route("/api/visitor-children", methods=["POST"], endpoint="visitor_children_create")
    @staff_required
    def create_visitor_child():
        return json_ok(visitor_children.create(request_json()).to_dict(), 201)

    @app.route("/api/visitor-children", methods=["PUT"], endpoint="visitor_children_update")
    @staff_required
    def update_visitor_child():
        return json_ok(visitor_children.update(request_json()).to_dict())
