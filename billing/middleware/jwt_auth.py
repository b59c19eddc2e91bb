"""
JWT Auth Middleware - reads the access token, sets g.user_uuid / g.role_uuid.

Token sources, in order:
  1. Authorization: Bearer <token>
  2. the HTTP-only ``token`` cookie set by /auth/login

Every /api/v1/ path outside JWT_SKIP_PREFIXES requires a valid token;
anything else is answered with 401 before the view runs.
"""

import logging

import jwt as pyjwt
from flask import g, request

from billing.services.jwt_service import decode_access_token
from billing.utils.errors import E, api_error

logger = logging.getLogger(__name__)

TOKEN_COOKIE = "token"

JWT_SKIP_PREFIXES = (
    "/api/v1/auth/login",
    "/api/v1/auth/logout",
    "/api/v1/health",
)


def read_token():
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:]
    return request.cookies.get(TOKEN_COOKIE)


def init_jwt_middleware(app):
    @app.before_request
    def _jwt_auth():
        g.user_uuid = None
        g.role_uuid = None
        g.capabilities = None

        path = request.path
        if not path.startswith("/api/v1/") or request.method == "OPTIONS":
            return None
        if path.startswith(JWT_SKIP_PREFIXES):
            return None

        token = read_token()
        if not token:
            return api_error(E.UNAUTHENTICATED, "Authentication required")

        try:
            payload = decode_access_token(token)
        except pyjwt.ExpiredSignatureError:
            return api_error(E.UNAUTHENTICATED, "Token expired")
        except pyjwt.InvalidTokenError as exc:
            logger.info("Rejected token on %s: %s", path, exc)
            return api_error(E.UNAUTHENTICATED, "Invalid token")

        g.user_uuid = payload["sub"]
        g.role_uuid = payload["role"]
        return None
