from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, flash, jsonify, redirect, render_template, request, session, url_for
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BiometricError,
    DomainError,
    GeofenceError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = (
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (GeofenceError, 403),
    (NotFoundError, 404),
    (BiometricError, 422),
    (ValidationError, 400),
)


def status_for(error: DomainError) -> int:
    for cls, status in STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 400


def json_error(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Expected a JSON object")
    return data


def current_user() -> dict:
    return {"id": session.get("user_id"), "full_name": session.get("name"), "role": session.get("role")}


def admin_required(view):
    """Dashboard pages and admin APIs: session login with the admin role."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        is_api = request.path.startswith("/api/")
        if "user_id" not in session:
            return json_error("Login required", 401) if is_api else redirect(url_for("login"))

        if session.get("role") != Role.ADMIN.value:
            if is_api:
                return json_error("Administrators only", 403)
            return render_template("403.html", current_user=current_user()), 403

        return view(*args, **kwargs)

    return wrapper


def portal_required(view):
    """Employee portal APIs: the PIN session must belong to the user in the URL."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        portal_user = session.get("portal_user_id")
        if portal_user is None:
            return json_error("PIN login required", 401)
        if int(portal_user) != int(kwargs.get("user_id", -1)):
            return json_error("You can only access your own portal", 403)
        return view(*args, **kwargs)

    return wrapper


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = status_for(e)
        logger.info("%s on %s: %s", type(e).__name__, request.path, e)
        if request.path.startswith("/api/"):
            return json_error(str(e), status)
        flash(str(e), "warning")
        template = "403.html" if status == 403 else "error.html"
        return render_template(template, current_user=current_user(), status=status), status

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return e
        logger.exception("Unhandled error on %s", request.path)
        message = f"System error: {e}" if app.config.get("DEBUG") else "System error"
        if request.path.startswith("/api/"):
            return json_error(message, 500)
        flash(message, "danger")
        return render_template("error.html", current_user=current_user(), status=500), 500
