"""
JWT Service - access token issue and verification.

Access token: 8 hours (configurable via JWT_ACCESS_EXPIRES)
Algorithm:    HS256

Token payload:
{
    "sub": <user uuid>,
    "role": <role uuid>,
    "type": "access",
    "iat": <issued_at>,
    "exp": <expires_at>,
    "jti": <unique_id>
}
"""

import uuid
from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app

DEFAULT_ACCESS_EXPIRES = 28800     # 8 hours
ALGORITHM = "HS256"
TOKEN_TYPE = "access"


def _get_secret():
    return current_app.config.get("JWT_SECRET_KEY") or current_app.config["SECRET_KEY"]


def get_access_expires() -> int:
    return int(current_app.config.get("JWT_ACCESS_EXPIRES", DEFAULT_ACCESS_EXPIRES))


def generate_access_token(user_uuid: str, role_uuid: str) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_uuid,
        "role": role_uuid,
        "type": TOKEN_TYPE,
        "iat": now,
        "exp": now + timedelta(seconds=get_access_expires()),
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(payload, _get_secret(), algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    """
    Decode and verify an access token.

    Raises jwt exceptions on failure (ExpiredSignatureError, InvalidTokenError).
    """
    payload = jwt.decode(token, _get_secret(), algorithms=[ALGORITHM])
    if payload.get("type") != TOKEN_TYPE:
        raise jwt.InvalidTokenError(f"Expected {TOKEN_TYPE} token, got {payload.get('type')}")
    if not payload.get("sub") or not payload.get("role"):
        raise jwt.InvalidTokenError("Token is missing subject or role")
    return payload
