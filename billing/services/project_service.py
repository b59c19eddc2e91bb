"""
Project service - project CRUD, budget snapshot and live task reconciliation.

A project and its budget are created together and deleted together. The
budget's tasks are the frozen plan; tasks with no budget are the live work.
Both task sets are replaced wholesale through ``reconcile_budget_tasks``:
every incoming task is validated before anything is written, so a bad item
leaves the stored set untouched.

Services flush; the calling blueprint commits once.
"""

from __future__ import annotations

import logging

from billing.core.exceptions import NotFoundError, ValidationError
from billing.core.records import Capabilities
from billing.models import db
from billing.models.base import utcnow
from billing.models.client import Client
from billing.models.project import Budget, Project
from billing.models.status import Status
from billing.models.task import Task
from billing.services.project_store import ProjectStore
from billing.services.reconcile import reconcile_budget_tasks
from billing.services.redaction import redact_task
from billing.services.rollup import format_rollup, rollup_project
from billing.services.task_service import format_task, validate_task_payload
from billing.utils.helpers import format_datetime, parse_datetime

logger = logging.getLogger(__name__)


def _get_project(project_uuid: str) -> Project:
    project = db.session.get(Project, project_uuid)
    if project is None:
        raise NotFoundError(resource="Project", resource_id=project_uuid)
    return project


def _apply_project_fields(project: Project, data: dict) -> None:
    name = str(data.get("name") or "").strip()
    if not name:
        raise ValidationError("name is required", details={"name": "required"})

    client_uuid = data.get("client_uuid")
    if not client_uuid:
        raise ValidationError("client_uuid is required", details={"client_uuid": "required"})
    if db.session.get(Client, client_uuid) is None:
        raise NotFoundError(resource="Client", resource_id=client_uuid)

    status_uuid = data.get("status_uuid")
    if not status_uuid:
        raise ValidationError("status_uuid is required", details={"status_uuid": "required"})
    if db.session.get(Status, status_uuid) is None:
        raise NotFoundError(resource="Status", resource_id=status_uuid)

    project.name = name
    project.description = str(data.get("description") or "")
    project.active = bool(data.get("active", True))
    project.client_uuid = client_uuid
    project.status_uuid = status_uuid


# ═════════════════════════════════════════════════════════════════════════════
# 1. PROJECTS
# ═════════════════════════════════════════════════════════════════════════════

def list_projects(key: str, filters: dict, capabilities: Capabilities, store: ProjectStore) -> list[dict]:
    """Projects with their financial rollup, formatted for the response."""
    trees = store.find_project_tree(key, filters)
    return [format_rollup(rollup_project(tree, capabilities)) for tree in trees]


def create_project(data: dict) -> Project:
    """Create a project together with its (empty) budget."""
    project = Project()
    _apply_project_fields(project, data)
    project.budget = Budget(date=utcnow())
    db.session.add(project)
    db.session.flush()
    logger.info("Project %s created with budget %s", project.uuid, project.budget_uuid)
    return project


def update_project(data: dict) -> Project:
    project_uuid = data.get("uuid")
    if not project_uuid:
        raise ValidationError("uuid is required", details={"uuid": "required"})
    project = _get_project(project_uuid)
    _apply_project_fields(project, data)
    db.session.flush()
    logger.info("Project %s updated", project.uuid)
    return project


def delete_project(project_uuid: str) -> None:
    """Delete the project, its tasks and its budget."""
    project = _get_project(project_uuid)
    budget = project.budget
    db.session.delete(project)
    if budget is not None:
        db.session.delete(budget)
    db.session.flush()
    logger.info("Project %s deleted", project_uuid)


# ═════════════════════════════════════════════════════════════════════════════
# 2. TASK SET RECONCILIATION
# ═════════════════════════════════════════════════════════════════════════════

def _incoming_tasks(data: dict) -> list:
    tasks = data.get("tasks")
    if not isinstance(tasks, list) or not tasks:
        raise ValidationError("tasks must be a non-empty list", details={"tasks": "required"})
    return tasks


def _apply_task_set(existing: list[Task], incoming: list, *, project_uuid: str,
                    budget_uuid: str | None) -> dict:
    plan = reconcile_budget_tasks(existing, incoming)
    creates = [validate_task_payload(item, project_uuid=project_uuid) for item in plan.to_create]
    updates = [
        (task, validate_task_payload(item, project_uuid=project_uuid))
        for task, item in plan.to_update
    ]

    for values in creates:
        db.session.add(Task(budget_uuid=budget_uuid, **values))
    for task, values in updates:
        for attr, value in values.items():
            setattr(task, attr, value)
    for task in plan.to_delete:
        db.session.delete(task)
    db.session.flush()

    return {
        "created": len(creates),
        "updated": len(updates),
        "deleted": len(plan.to_delete),
    }


def get_budget(budget_uuid: str, capabilities: Capabilities) -> dict:
    budget = db.session.get(Budget, budget_uuid)
    if budget is None:
        raise NotFoundError(resource="Budget", resource_id=budget_uuid)
    return {
        "uuid": budget.uuid,
        "date": format_datetime(budget.date),
        "project_uuid": budget.project.uuid if budget.project else None,
        "tasks": [
            redact_task(format_task(t), capabilities)
            for t in sorted(budget.tasks, key=lambda t: t.begin_date)
        ],
    }


def update_budget(data: dict) -> dict:
    """Set the budget date and replace its snapshot tasks."""
    budget_uuid = data.get("uuid")
    if not budget_uuid:
        raise ValidationError("uuid is required", details={"uuid": "required"})
    budget = db.session.get(Budget, budget_uuid)
    if budget is None:
        raise NotFoundError(resource="Budget", resource_id=budget_uuid)
    if budget.project is None:
        raise ValidationError(f"Budget {budget_uuid} is not attached to a project")

    try:
        date = parse_datetime(data.get("date"))
    except ValueError as exc:
        raise ValidationError(str(exc), details={"date": "invalid date"}) from None
    if date is None:
        raise ValidationError("date is required", details={"date": "required"})

    counts = _apply_task_set(
        list(budget.tasks), _incoming_tasks(data),
        project_uuid=budget.project.uuid, budget_uuid=budget.uuid,
    )
    budget.date = date
    db.session.flush()
    logger.info("Budget %s reconciled: %s", budget.uuid, counts)
    return counts


def list_live_tasks(project_uuid: str, capabilities: Capabilities) -> list[dict]:
    _get_project(project_uuid)
    tasks = (
        Task.query
        .filter(Task.project_uuid == project_uuid, Task.budget_uuid.is_(None))
        .order_by(Task.begin_date)
        .all()
    )
    return [redact_task(format_task(t), capabilities) for t in tasks]


def update_live_tasks(data: dict) -> dict:
    """Replace the live tasks of one project; other projects are untouched."""
    project_uuid = data.get("project_uuid")
    if not project_uuid:
        raise ValidationError("project_uuid is required", details={"project_uuid": "required"})
    _get_project(project_uuid)

    existing = Task.query.filter(
        Task.project_uuid == project_uuid, Task.budget_uuid.is_(None)
    ).all()
    counts = _apply_task_set(existing, _incoming_tasks(data), project_uuid=project_uuid, budget_uuid=None)
    logger.info("Live tasks of project %s reconciled: %s", project_uuid, counts)
    return counts
