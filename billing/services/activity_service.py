"""
Activity service - logged work against Activity tasks.

Each entry is one stretch of work by one user at one hourly rate; the task
valuation sums them into the task's actual cost.
"""

import logging

from billing.core.exceptions import NotFoundError, ValidationError
from billing.core.records import Capabilities, TaskKind
from billing.models import db
from billing.models.auth import User
from billing.models.task import Activity
from billing.services.redaction import redact_entry
from billing.services.task_service import get_entry_task
from billing.utils.currency import format_brl, parse_brl
from billing.utils.helpers import format_datetime, parse_datetime

logger = logging.getLogger(__name__)


def _parse_date(data: dict, name: str):
    try:
        value = parse_datetime(data.get(name))
    except ValueError as exc:
        raise ValidationError(str(exc), details={name: "invalid date"}) from None
    if value is None:
        raise ValidationError(f"{name} is required", details={name: "required"})
    return value


def _activity_values(data: dict) -> dict:
    begin_date = _parse_date(data, "begin_date")
    end_date = _parse_date(data, "end_date")
    if begin_date > end_date:
        raise ValidationError("end_date cannot be before begin_date",
                              details={"end_date": "before begin_date"})

    if data.get("hourly_rate") in (None, ""):
        raise ValidationError("hourly_rate is required", details={"hourly_rate": "required"})
    hourly_rate = parse_brl(data["hourly_rate"], field="hourly_rate")

    user_uuid = data.get("user_uuid")
    if not user_uuid:
        raise ValidationError("user_uuid is required", details={"user_uuid": "required"})
    if db.session.get(User, user_uuid) is None:
        raise NotFoundError(resource="User", resource_id=user_uuid)

    task = get_entry_task(data.get("task_uuid"), TaskKind.ACTIVITY)
    return {
        "description": str(data.get("description") or "").strip(),
        "begin_date": begin_date,
        "end_date": end_date,
        "hourly_rate": hourly_rate,
        "user_uuid": user_uuid,
        "task_uuid": task.uuid,
    }


def format_activity(entry: Activity) -> dict:
    out = entry.to_dict()
    out["begin_date"] = format_datetime(entry.begin_date)
    out["end_date"] = format_datetime(entry.end_date)
    out["hourly_rate"] = format_brl(entry.hourly_rate)
    return out


def list_activities(key: str, capabilities: Capabilities, filters: dict | None = None) -> list[dict]:
    """Logged work, oldest first.

    Filters: description, begin_date, end_date, hourly_rate_min,
    hourly_rate_max (financial only), user_uuid, task_uuid.
    """
    filters = filters or {}
    query = Activity.query
    if key != "all":
        query = query.filter(Activity.uuid == key)
    if filters.get("description"):
        query = query.filter(Activity.description.contains(filters["description"]))
    if filters.get("begin_date"):
        query = query.filter(Activity.begin_date >= filters["begin_date"])
    if filters.get("end_date"):
        query = query.filter(Activity.end_date <= filters["end_date"])
    if capabilities.financial:
        if filters.get("hourly_rate_min") is not None:
            query = query.filter(Activity.hourly_rate >= filters["hourly_rate_min"])
        if filters.get("hourly_rate_max") is not None:
            query = query.filter(Activity.hourly_rate <= filters["hourly_rate_max"])
    for name in ("user_uuid", "task_uuid"):
        if filters.get(name):
            query = query.filter(getattr(Activity, name) == filters[name])

    return [
        redact_entry(format_activity(entry), capabilities)
        for entry in query.order_by(Activity.begin_date).all()
    ]


def create_activity(data: dict) -> Activity:
    entry = Activity(**_activity_values(data))
    db.session.add(entry)
    db.session.flush()
    logger.info("Activity %s logged on task %s", entry.uuid, entry.task_uuid)
    return entry


def update_activity(data: dict) -> Activity:
    activity_uuid = data.get("uuid")
    if not activity_uuid:
        raise ValidationError("uuid is required", details={"uuid": "required"})
    entry = db.session.get(Activity, activity_uuid)
    if entry is None:
        raise NotFoundError(resource="Activity", resource_id=activity_uuid)
    for name, value in _activity_values(data).items():
        setattr(entry, name, value)
    db.session.flush()
    logger.info("Activity %s updated", entry.uuid)
    return entry


def delete_activity(activity_uuid: str) -> None:
    entry = db.session.get(Activity, activity_uuid)
    if entry is None:
        raise NotFoundError(resource="Activity", resource_id=activity_uuid)
    db.session.delete(entry)
    db.session.flush()
    logger.info("Activity %s deleted", activity_uuid)
