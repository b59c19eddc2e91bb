"""
Role service - capability bundles and the owner-role guard.

Role id 0 is the owner role, seeded once by ``flask seed-owner``. It cannot be
edited or deleted by anyone, admins included.
"""

import logging

from billing.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from billing.core.records import CAPABILITY_NAMES, FULL_CAPABILITIES, Capabilities
from billing.models import db
from billing.models.auth import OWNER_ROLE_ID, Role

logger = logging.getLogger(__name__)


def check_capabilities(capabilities: Capabilities, requested: dict) -> None:
    """Raise for the first capability flagged ``"true"`` in ``requested`` that is missing."""
    for name in CAPABILITY_NAMES:
        if requested.get(name) == "true" and not capabilities.has(name):
            raise AuthorizationError(name)


def list_roles(key: str, *, own_role_uuid: str | None = None,
               types: list[str] | None = None, required: list[str] | None = None) -> list[dict]:
    """Roles by key: ``all``, ``this`` (the caller's own role) or a uuid.

    ``types`` filters on Role.type; ``required`` keeps roles holding every
    listed capability.
    """
    query = Role.query
    if key == "this":
        query = query.filter(Role.uuid == own_role_uuid)
    elif key != "all":
        query = query.filter(Role.uuid == key)
    if types:
        query = query.filter(Role.type.in_(types))
    for name in required or ():
        if name in CAPABILITY_NAMES:
            query = query.filter(getattr(Role, name).is_(True))
    return [r.to_dict() for r in query.order_by(Role.id).all()]


def _apply_role_fields(role: Role, data: dict) -> None:
    role_type = str(data.get("type") or "").strip()
    if not role_type:
        raise ValidationError("type is required", details={"type": "required"})
    role.type = role_type
    for name in CAPABILITY_NAMES:
        value = data.get(name, False)
        if not isinstance(value, bool):
            raise ValidationError(f"{name} must be a boolean", details={name: "boolean"})
        setattr(role, name, value)


def _get_mutable_role(role_uuid: str) -> Role:
    role = Role.query.filter_by(uuid=role_uuid).first()
    if role is None:
        raise NotFoundError(resource="Role", resource_id=role_uuid)
    if role.is_owner:
        logger.warning("Refused to modify owner role %s", role_uuid)
        raise AuthorizationError(message="The owner role cannot be modified")
    return role


def create_role(data: dict) -> Role:
    role = Role()
    _apply_role_fields(role, data)
    db.session.add(role)
    db.session.flush()
    logger.info("Role %s (%s) created", role.uuid, role.type)
    return role


def update_role(data: dict) -> Role:
    role_uuid = data.get("uuid")
    if not role_uuid:
        raise ValidationError("uuid is required", details={"uuid": "required"})
    role = _get_mutable_role(role_uuid)
    _apply_role_fields(role, data)
    db.session.flush()
    logger.info("Role %s updated", role.uuid)
    return role


def delete_role(role_uuid: str) -> None:
    role = _get_mutable_role(role_uuid)
    if role.users.count():
        raise ValidationError(f"Role {role.type!r} is still assigned to users")
    db.session.delete(role)
    db.session.flush()
    logger.info("Role %s deleted", role_uuid)


def seed_owner_role(role_type: str = "owner") -> Role:
    """Create role id 0 with every capability, or return it if present."""
    role = db.session.get(Role, OWNER_ROLE_ID)
    if role is not None:
        return role
    role = Role(id=OWNER_ROLE_ID, type=role_type, **FULL_CAPABILITIES.to_dict())
    db.session.add(role)
    db.session.flush()
    logger.info("Owner role seeded: %s", role.uuid)
    return role
