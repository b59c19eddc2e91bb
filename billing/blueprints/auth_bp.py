"""
Auth Blueprint - login, logout and capability check.

Endpoints:
    POST /api/v1/auth/login    - email + password → token cookie
    GET  /api/v1/auth/logout   - clear the token cookie
    GET  /api/v1/auth/check    - ?admin=true&financial=true ... → 200 or 403
"""

import logging

from flask import Blueprint, current_app, g, jsonify, request

from billing.blueprints import json_body
from billing.middleware.jwt_auth import TOKEN_COOKIE
from billing.services import role_service, user_service
from billing.services.authorization import require
from billing.services.jwt_service import generate_access_token, get_access_expires
from billing.services.project_store import get_project_store
from billing.utils.errors import E, api_error

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/api/v1/auth")


@auth_bp.route("/login", methods=["POST"])
def login():
    data = json_body()
    if data is None:
        return api_error(E.VALIDATION_INVALID, "JSON body required")

    email = str(data.get("email") or "").strip()
    password = data.get("password") or ""
    if not email or not password:
        return api_error(E.VALIDATION_REQUIRED, "email and password are required")

    user = user_service.authenticate_user(email, password)
    token = generate_access_token(user.uuid, user.role_uuid)

    response = jsonify({"message": "Logged in", "user_uuid": user.uuid})
    response.set_cookie(
        TOKEN_COOKIE,
        token,
        max_age=get_access_expires(),
        httponly=True,
        secure=current_app.config.get("SESSION_COOKIE_SECURE", False),
        samesite="Lax",
        path="/",
    )
    logger.info("User %s logged in", user.uuid)
    return response, 200


@auth_bp.route("/logout", methods=["GET"])
def logout():
    response = jsonify({"message": "Logged out"})
    response.delete_cookie(TOKEN_COOKIE, path="/")
    return response, 200


@auth_bp.route("/check", methods=["GET"])
def check():
    """403 naming the first requested capability the caller's role lacks."""
    capabilities = require(g.role_uuid, get_project_store())
    role_service.check_capabilities(capabilities, request.args)
    return jsonify({"message": "Authorized"}), 200
