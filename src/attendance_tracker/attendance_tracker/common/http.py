from __future__ import annotations

import logging
from functools import wraps
from typing import Callable, Optional

from flask import Flask, g, jsonify, request, session

from ..auth.session import UserSession
from ..core.exceptions import AuthenticationError, BackendError, NotFoundError, ValidationError
from ..users.service import AuthService
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)

SESSION_COOKIE_KEY = "session_id"


def ok(message: str = "", status: int = 200, **payload):
    body = {"success": True, "message": message}
    body.update(payload)
    return jsonify(body), status


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def request_data() -> dict:
    """JSON body, falling back to form fields."""

    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def date_arg(name: str, default=None):
    raw = request.args.get(name)
    if not raw:
        return default
    return parse_iso_date(raw)


def current_session() -> UserSession:
    return g.user_session


def make_login_required(auth: AuthService) -> Callable:
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                g.user_session = auth.current(session.get(SESSION_COOKIE_KEY))
            except AuthenticationError:
                session.pop(SESSION_COOKIE_KEY, None)
                raise
            return view(*args, **kwargs)

        return wrapper

    return login_required


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def handle_validation(e: ValidationError):
        return fail(str(e), 400)

    @app.errorhandler(NotFoundError)
    def handle_not_found(e: NotFoundError):
        return fail(str(e), 404)

    @app.errorhandler(AuthenticationError)
    def handle_auth(e: AuthenticationError):
        return fail(str(e), 401)

    @app.errorhandler(BackendError)
    def handle_backend(e: BackendError):
        logger.exception("backend failure path=%s", request.path)
        if app.config.get("DEBUG"):
            return fail(f"Backend unavailable: {e}", 503)
        return fail("Backend unavailable, please try again", 503)

    @app.errorhandler(404)
    def handle_missing_route(_e):
        return fail("Not found", 404)


def int_arg(name: str) -> Optional[int]:
    raw = request.args.get(name)
    if raw in (None, ""):
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be a whole number")
