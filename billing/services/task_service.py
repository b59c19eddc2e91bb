"""
Task service - payload validation, listing with valuation, create, update, delete.

``validate_task_payload`` is shared with the budget and live-task bulk updates
in project_service, so a task is held to the same rules however it arrives:

  - type must be a TaskKind
  - Activity needs hourly_rate, Expense needs cost
  - begin_date <= end_date
  - status (and user, when given) must exist
"""

import logging

from sqlalchemy.orm import selectinload

from billing.core.exceptions import NotFoundError, ValidationError
from billing.core.records import Capabilities, TaskKind
from billing.models import db
from billing.models.auth import User
from billing.models.project import Project
from billing.models.status import Status
from billing.models.task import Task
from billing.services.project_store import task_to_record
from billing.services.valuation import valuate_task
from billing.utils.currency import ZERO, format_brl, parse_brl
from billing.utils.helpers import format_datetime, parse_datetime

logger = logging.getLogger(__name__)

MONEY_FILTERS = ("hourly_rate", "cost", "revenue")


def _parse_date_field(data: dict, name: str):
    raw = data.get(name)
    if raw in (None, ""):
        raise ValidationError(f"{name} is required", details={name: "required"})
    try:
        return parse_datetime(raw)
    except ValueError as exc:
        raise ValidationError(str(exc), details={name: "invalid date"}) from None


def validate_task_payload(data: dict, *, project_uuid: str | None = None) -> dict:
    """Validate one inbound task and return its column values.

    ``project_uuid`` overrides whatever the payload names; bulk updates use it
    to pin every task to the project being reconciled.

    Raises:
        ValidationError: malformed or inconsistent fields.
        NotFoundError: status, user or project does not exist.
    """
    if not isinstance(data, dict):
        raise ValidationError("Each task must be an object")

    kind = TaskKind.parse(data.get("type"))
    description = str(data.get("description") or "").strip()
    if not description:
        raise ValidationError("description is required", details={"description": "required"})

    begin_date = _parse_date_field(data, "begin_date")
    end_date = _parse_date_field(data, "end_date")
    if begin_date > end_date:
        raise ValidationError(
            "end_date cannot be before begin_date",
            details={"end_date": "before begin_date"},
        )

    values = {
        "type": kind.value,
        "description": description,
        "begin_date": begin_date,
        "end_date": end_date,
        "hourly_rate": None,
        "cost": None,
        "revenue": parse_brl(data.get("revenue"), field="revenue"),
    }
    if kind is TaskKind.ACTIVITY:
        if data.get("hourly_rate") is None:
            raise ValidationError("hourly_rate is required for Activity tasks",
                                  details={"hourly_rate": "required"})
        values["hourly_rate"] = parse_brl(data["hourly_rate"], field="hourly_rate")
    else:
        if data.get("cost") is None:
            raise ValidationError("cost is required for Expense tasks", details={"cost": "required"})
        values["cost"] = parse_brl(data["cost"], field="cost")

    status_uuid = data.get("status_uuid")
    if not status_uuid:
        raise ValidationError("status_uuid is required", details={"status_uuid": "required"})
    if db.session.get(Status, status_uuid) is None:
        raise NotFoundError(resource="Status", resource_id=status_uuid)
    values["status_uuid"] = status_uuid

    user_uuid = data.get("user_uuid") or None
    if user_uuid and db.session.get(User, user_uuid) is None:
        raise NotFoundError(resource="User", resource_id=user_uuid)
    values["user_uuid"] = user_uuid

    target_project = project_uuid or data.get("project_uuid")
    if not target_project:
        raise ValidationError("project_uuid is required", details={"project_uuid": "required"})
    if project_uuid is None and db.session.get(Project, target_project) is None:
        raise NotFoundError(resource="Project", resource_id=target_project)
    values["project_uuid"] = target_project

    return values


def format_task(task: Task) -> dict:
    """Task columns with display dates and BRL strings."""
    out = task.to_dict()
    out["begin_date"] = format_datetime(task.begin_date)
    out["end_date"] = format_datetime(task.end_date)
    for name in ("hourly_rate", "cost", "revenue"):
        out[name] = format_brl(out[name] if out[name] is not None else ZERO)
    return out


# ═════════════════════════════════════════════════════════════════════════════
# Queries
# ═════════════════════════════════════════════════════════════════════════════

def list_tasks(key: str, capabilities: Capabilities, filters: dict | None = None) -> list[dict]:
    """Tasks with their valuation, money already formatted.

    Filters: type (list of kinds), description, begin_date, end_date,
    status_uuid, user_uuid, project_uuid, budget_uuid (``"null"`` selects live
    tasks only) and min/max bounds on the stored hourly_rate, cost and
    revenue. Money bounds are ignored for callers that cannot see money.
    """
    filters = filters or {}
    query = Task.query.options(selectinload(Task.activities), selectinload(Task.expenses))
    if key != "all":
        query = query.filter(Task.uuid == key)
    if filters.get("type"):
        query = query.filter(Task.type.in_([k.value for k in filters["type"]]))
    if filters.get("description"):
        query = query.filter(Task.description.contains(filters["description"]))
    if filters.get("begin_date"):
        query = query.filter(Task.begin_date >= filters["begin_date"])
    if filters.get("end_date"):
        query = query.filter(Task.end_date <= filters["end_date"])
    if capabilities.financial:
        for name in MONEY_FILTERS:
            column = getattr(Task, name)
            if filters.get(f"{name}_min") is not None:
                query = query.filter(column >= filters[f"{name}_min"])
            if filters.get(f"{name}_max") is not None:
                query = query.filter(column <= filters[f"{name}_max"])
    for name in ("status_uuid", "user_uuid", "project_uuid"):
        if filters.get(name):
            query = query.filter(getattr(Task, name) == filters[name])
    if filters.get("budget_uuid") == "null":
        query = query.filter(Task.budget_uuid.is_(None))
    elif filters.get("budget_uuid"):
        query = query.filter(Task.budget_uuid == filters["budget_uuid"])

    result = []
    for task in query.order_by(Task.begin_date).all():
        out = format_task(task)
        for name, value in valuate_task(task_to_record(task)).items():
            out[name] = format_brl(value)
        result.append(out)
    return result


# ═════════════════════════════════════════════════════════════════════════════
# Mutations (flush only; the blueprint commits)
# ═════════════════════════════════════════════════════════════════════════════

def create_task(data: dict) -> Task:
    values = validate_task_payload(data)
    task = Task(**values)
    db.session.add(task)
    db.session.flush()
    logger.info("Task %s (%s) created on project %s", task.uuid, task.type, task.project_uuid)
    return task


def update_task(data: dict) -> Task:
    """Rewrite one live task from a full payload.

    Budget tasks belong to the frozen plan and only change through the budget
    update. A task that already carries logged work or expense entries keeps
    its type.
    """
    task_uuid = data.get("uuid")
    if not task_uuid:
        raise ValidationError("uuid is required", details={"uuid": "required"})
    task = db.session.get(Task, task_uuid)
    if task is None:
        raise NotFoundError(resource="Task", resource_id=task_uuid)
    if not task.is_live:
        raise ValidationError("Budget tasks are edited through the project budget",
                              details={"uuid": "budget task"})

    values = validate_task_payload(data)
    if values["type"] != task.type and (task.activities or task.expenses):
        raise ValidationError("type cannot change while the task has entries",
                              details={"type": "has entries"})
    for name, value in values.items():
        setattr(task, name, value)
    db.session.flush()
    logger.info("Task %s updated", task.uuid)
    return task


def delete_task(task_uuid: str) -> None:
    task = db.session.get(Task, task_uuid)
    if task is None:
        raise NotFoundError(resource="Task", resource_id=task_uuid)
    db.session.delete(task)
    db.session.flush()
    logger.info("Task %s deleted", task_uuid)


def get_entry_task(task_uuid: str | None, kind: TaskKind) -> Task:
    """The live task a logged-work or expense entry hangs off.

    Raises:
        ValidationError: no uuid, a budget task, or a task of the other kind.
        NotFoundError: no such task.
    """
    if not task_uuid:
        raise ValidationError("task_uuid is required", details={"task_uuid": "required"})
    task = db.session.get(Task, task_uuid)
    if task is None:
        raise NotFoundError(resource="Task", resource_id=task_uuid)
    if not task.is_live:
        raise ValidationError("Entries can only be logged on live tasks",
                              details={"task_uuid": "budget task"})
    if task.type != kind.value:
        raise ValidationError(f"Task {task_uuid} is not an {kind.value} task",
                              details={"task_uuid": f"not {kind.value}"})
    return task
