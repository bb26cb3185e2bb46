from __future__ import annotations

from flask import Flask, session

from ..common.http import SESSION_COOKIE_KEY, current_session, make_login_required, ok, request_data
from ..common.validators import require_bool
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = make_login_required(container.auth_service)

    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = request_data()
        remember = require_bool(data.get("remember_me", False), "Remember me")
        user_session = container.auth_service.login(data.get("email", ""), data.get("password", ""))

        session.clear()
        session.permanent = remember
        session[SESSION_COOKIE_KEY] = user_session.session_id
        return ok(
            "Signed in",
            user={"id": user_session.user_id, "display_name": user_session.display_name},
            expires_at=user_session.expires_at.isoformat(),
        )

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        container.auth_service.logout(session.get(SESSION_COOKIE_KEY))
        session.clear()
        return ok("Signed out")

    @app.route("/api/auth/me", endpoint="me")
    @login_required
    def me():
        user_session = current_session()
        return ok(
            user={"id": user_session.user_id, "display_name": user_session.display_name},
            expires_at=user_session.expires_at.isoformat(),
        )

    @app.route("/api/auth/register", methods=["POST"], endpoint="register")
    def register_account():
        data = request_data()
        user_id = container.user_service.register(
            email=data.get("email", ""),
            display_name=data.get("display_name", ""),
            password=data.get("password", ""),
        )
        return ok("Account created", 201, user={"id": user_id})
