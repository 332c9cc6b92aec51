from __future__ import annotations

from flask import Flask

from ..common.http import bearer_token, json_ok, request_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        session = container.auth_service.sign_in(request_json())
        return json_ok(
            {
                "access_token": session.access_token,
                "refresh_token": session.refresh_token,
                "expires_at": session.expires_at,
                "user": {
                    "id": session.user.user_id,
                    "email": session.user.email,
                    "name": session.user.metadata_name,
                },
            }
        )

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    def logout():
        container.auth_service.sign_out(bearer_token())
        return json_ok({"signed_out": True})

    @app.route("/api/auth/session", methods=["GET"], endpoint="auth_session")
    def session_info():
        return json_ok(container.auth_service.get_session(bearer_token()))

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return json_ok({"status": "ok", "backend_configured": container.conn.is_configured})
