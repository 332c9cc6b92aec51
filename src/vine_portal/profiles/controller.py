from __future__ import annotations

from flask import Flask, g

from ..auth.guards import login_required, roles_required
from ..common.http import json_ok, request_json
from ..container import Container
from ..core.enums import REPORT_ROLES
from ..users.permissions import role_to_permissions


def register(app: Flask, container: Container) -> None:
    auth_required = login_required(container.auth_service)
    leaders_only = roles_required(container.auth_service, container.role_service, REPORT_ROLES)
    profiles = container.profile_service

    @app.route("/api/member-profile", methods=["GET"], endpoint="member_profile_get")
    @auth_required
    def get_profile():
        profile = profiles.get_own(g.auth_user.user_id)
        role = container.role_service.get_role(g.auth_user.user_id)
        return json_ok(
            profile.to_dict() if profile else None,
            role=role.value if role else None,
            permissions=role_to_permissions(role).to_dict(),
        )

    @app.route("/api/member-profile", methods=["POST"], endpoint="member_profile_create")
    @auth_required
    def create_profile():
        profile = profiles.create(g.auth_user, request_json())
        return json_ok(profile.to_dict(), 201)

    @app.route("/api/member-profile", methods=["PUT"], endpoint="member_profile_update")
    @auth_required
    def update_profile():
        return json_ok(profiles.update_full(g.auth_user, request_json()).to_dict())

    @app.route("/api/member-profile", methods=["PATCH"], endpoint="member_profile_patch")
    @auth_required
    def patch_profile():
        return json_ok(profiles.update_section(g.auth_user, request_json()).to_dict())

    @app.route("/api/available-spouses", methods=["GET"], endpoint="available_spouses")
    @auth_required
    def available_spouses():
        rows, warning = profiles.available_spouses(g.auth_user.user_id)
        data = [{"id": p.id, "name": p.name, "gender": p.gender.value if p.gender else None} for p in rows]
        if warning:
            return json_ok(data, warning=warning)
        return json_ok(data)

    @app.route("/api/members", methods=["GET"], endpoint="members_list")
    @leaders_only
    def list_members():
        return json_ok([p.to_dict() for p in profiles.list_members()])
