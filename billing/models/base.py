"""
Shared column helpers for uuid-keyed models.

Every business table is keyed by a string UUID; only roles keep an integer
``id`` next to their uuid because role id 0 is the protected owner role.
"""

import uuid
from datetime import datetime, timezone

from billing.models import db


def new_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class UUIDModel(db.Model):
    """Abstract base: uuid primary key plus created/updated timestamps."""
    __abstract__ = True

    uuid = db.Column(db.String(36), primary_key=True, default=new_uuid)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)


def iso(value):
    """ISO-8601 string for a datetime column, None passthrough."""
    return value.isoformat() if value else None
