"""
User service - redacted user listing, login check and owner seeding.

Listing keys:
    all   every user, redacted by the caller's capabilities
    this  the caller's own record; personal and financial always visible
    uuid  one user
"""

import logging

from billing.core.exceptions import AuthorizationError, ConflictError, NotFoundError
from billing.core.records import Capabilities
from billing.models import db
from billing.models.auth import User
from billing.services.redaction import redact_user
from billing.utils.crypto import hash_password, verify_password
from billing.utils.currency import format_brl

logger = logging.getLogger(__name__)

PERSONAL_FILTERS = ("cpf", "name", "phone")
PUBLIC_FILTERS = ("username", "email")


def list_users(key: str, *, own_uuid: str, capabilities: Capabilities,
               filters: dict | None = None) -> list[dict]:
    """Users visible to the caller.

    Filters on personal fields and the hourly_rate bounds only apply when the
    caller may see those fields, so a filter cannot reveal hidden values.
    """
    filters = filters or {}
    if key == "this":
        capabilities = capabilities.for_self()
        query = User.query.filter(User.uuid == own_uuid)
    elif key == "all":
        query = User.query
    else:
        query = User.query.filter(User.uuid == key)

    for name in PUBLIC_FILTERS:
        if filters.get(name):
            query = query.filter(getattr(User, name).contains(filters[name]))
    if capabilities.personal:
        for name in PERSONAL_FILTERS:
            if filters.get(name):
                query = query.filter(getattr(User, name).contains(filters[name]))
    if capabilities.financial:
        if filters.get("hourly_rate_min") is not None:
            query = query.filter(User.hourly_rate >= filters["hourly_rate_min"])
        if filters.get("hourly_rate_max") is not None:
            query = query.filter(User.hourly_rate <= filters["hourly_rate_max"])
    if filters.get("active") is not None:
        query = query.filter(User.active.is_(filters["active"]))
    if filters.get("role_uuids"):
        query = query.filter(User.role_uuid.in_(filters["role_uuids"]))

    result = []
    for user in query.order_by(User.username).all():
        out = user.to_dict()
        out["hourly_rate"] = format_brl(user.hourly_rate) if user.hourly_rate is not None else None
        result.append(redact_user(out, capabilities))
    return result


def authenticate_user(email: str, password: str) -> User:
    """
    Raises:
        NotFoundError: no user with that email.
        AuthorizationError: inactive user or wrong password.
    """
    user = User.query.filter_by(email=email).first()
    if user is None:
        raise NotFoundError(resource="User", resource_id=email)
    if not user.active:
        logger.warning("Login refused for inactive user %s", user.uuid)
        raise AuthorizationError(message="User is inactive")
    if not verify_password(password, user.password_hash):
        logger.warning("Login refused for user %s: wrong password", user.uuid)
        raise AuthorizationError(message="Wrong password")
    return user


def create_owner_user(*, role_uuid: str, email: str, password: str, name: str,
                      username: str, cpf: str) -> User:
    if User.query.filter_by(email=email).first() is not None:
        raise ConflictError(resource="User", field="email", value=email)
    user = User(
        role_uuid=role_uuid,
        email=email,
        password_hash=hash_password(password),
        name=name,
        username=username,
        cpf=cpf,
        active=True,
    )
    db.session.add(user)
    db.session.flush()
    logger.info("Owner user %s created", user.uuid)
    return user
