"""Status service - workflow statuses shared by projects and tasks."""

import logging

from billing.core.exceptions import NotFoundError, ValidationError
from billing.models import db
from billing.models.project import Project
from billing.models.status import Status
from billing.models.task import Task

logger = logging.getLogger(__name__)


def list_statuses(key: str, *, name: str | None = None,
                  priorities: list[int] | None = None) -> list[dict]:
    query = Status.query
    if key != "all":
        query = query.filter(Status.uuid == key)
    if name:
        query = query.filter(Status.name.contains(name))
    if priorities:
        query = query.filter(Status.priority.in_(priorities))
    return [s.to_dict() for s in query.order_by(Status.priority, Status.name).all()]


def _apply_status_fields(status: Status, data: dict) -> None:
    name = str(data.get("name") or "").strip()
    if not name:
        raise ValidationError("name is required", details={"name": "required"})
    description = str(data.get("description") or "").strip()
    if not description:
        raise ValidationError("description is required", details={"description": "required"})
    priority = data.get("priority")
    if isinstance(priority, bool) or not isinstance(priority, int) or priority < 1:
        raise ValidationError("priority must be a positive integer", details={"priority": "invalid"})
    status.name = name
    status.description = description
    status.priority = priority


def create_status(data: dict) -> Status:
    status = Status()
    _apply_status_fields(status, data)
    db.session.add(status)
    db.session.flush()
    logger.info("Status %s (%s) created", status.uuid, status.name)
    return status


def update_status(data: dict) -> Status:
    status_uuid = data.get("uuid")
    if not status_uuid:
        raise ValidationError("uuid is required", details={"uuid": "required"})
    status = db.session.get(Status, status_uuid)
    if status is None:
        raise NotFoundError(resource="Status", resource_id=status_uuid)
    _apply_status_fields(status, data)
    db.session.flush()
    logger.info("Status %s updated", status.uuid)
    return status


def delete_status(status_uuid: str) -> None:
    status = db.session.get(Status, status_uuid)
    if status is None:
        raise NotFoundError(resource="Status", resource_id=status_uuid)
    if (Project.query.filter_by(status_uuid=status_uuid).count()
            or Task.query.filter_by(status_uuid=status_uuid).count()):
        raise ValidationError(f"Status {status.name!r} is still in use")
    db.session.delete(status)
    db.session.flush()
    logger.info("Status %s deleted", status_uuid)
