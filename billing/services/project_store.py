"""
Project Store - persistence port for the rollup engine.

The engine depends on ``ProjectStore`` only. ``SqlProjectStore`` is the
SQLAlchemy implementation; the app factory builds one per application and
parks it in ``app.extensions["project_store"]``.

Conversion to records happens here, so an unknown task or transaction kind in
the database surfaces as ``ValidationError`` before any aggregation runs.
"""

import logging
from abc import ABC, abstractmethod

from flask import current_app
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from billing.core.records import (
    ActivityLog,
    ActivityTask,
    BudgetSnapshot,
    Capabilities,
    ExpenseEntry,
    ExpenseTask,
    LedgerEntry,
    ProjectTree,
    TaskKind,
    TransactionKind,
)
from billing.models.auth import Role
from billing.models.project import Budget, Project
from billing.models.task import Task

logger = logging.getLogger(__name__)

EXTENSION_KEY = "project_store"


class ProjectStore(ABC):
    @abstractmethod
    def find_project_tree(self, key: str, filters: dict | None = None) -> list[ProjectTree]:
        """Projects matching ``key`` (a uuid or ``"all"``) and ``filters``."""

    @abstractmethod
    def find_role(self, role_ref: str) -> Capabilities | None:
        """Capabilities of the role with uuid ``role_ref``, None if unknown."""


# ── ORM → record conversion ──────────────────────────────────────────────────

def task_to_record(task: Task):
    kind = TaskKind.parse(task.type)
    if kind is TaskKind.ACTIVITY:
        return ActivityTask(
            uuid=task.uuid,
            begin_date=task.begin_date,
            end_date=task.end_date,
            revenue=task.revenue,
            hourly_rate=task.hourly_rate,
            activities=tuple(
                ActivityLog(begin_date=a.begin_date, end_date=a.end_date, hourly_rate=a.hourly_rate)
                for a in task.activities
            ),
        )
    return ExpenseTask(
        uuid=task.uuid,
        begin_date=task.begin_date,
        end_date=task.end_date,
        revenue=task.revenue,
        cost=task.cost,
        expenses=tuple(ExpenseEntry(cost=e.cost, date=e.date) for e in task.expenses),
    )


def project_to_record(project: Project) -> ProjectTree:
    budget = project.budget
    snapshot = BudgetSnapshot(
        date=budget.date if budget else None,
        tasks=tuple(task_to_record(t) for t in (budget.tasks if budget else [])),
    )
    return ProjectTree(
        uuid=project.uuid,
        name=project.name,
        description=project.description,
        active=project.active,
        client_uuid=project.client_uuid,
        client_name=project.client.name if project.client else None,
        status_uuid=project.status_uuid,
        status_name=project.status.name if project.status else None,
        budget_uuid=project.budget_uuid,
        budget=snapshot,
        tasks=tuple(task_to_record(t) for t in project.tasks if t.is_live),
        transactions=tuple(
            LedgerEntry(kind=TransactionKind.parse(tx.type), amount=tx.amount, date=tx.date)
            for tx in project.transactions
        ),
    )


# ── SQLAlchemy implementation ────────────────────────────────────────────────

class SqlProjectStore(ProjectStore):
    def __init__(self, db):
        self.db = db

    def _tree_query(self):
        task_children = (selectinload(Task.activities), selectinload(Task.expenses))
        return select(Project).options(
            selectinload(Project.client),
            selectinload(Project.status),
            selectinload(Project.transactions),
            selectinload(Project.tasks).options(*task_children),
            selectinload(Project.budget).selectinload(Budget.tasks).options(*task_children),
        )

    def find_project_tree(self, key, filters=None):
        filters = filters or {}
        stmt = self._tree_query()
        if key != "all":
            stmt = stmt.where(Project.uuid == key)
        if filters.get("name"):
            stmt = stmt.where(Project.name.contains(filters["name"]))
        if filters.get("description"):
            stmt = stmt.where(Project.description.contains(filters["description"]))
        if filters.get("active") is not None:
            stmt = stmt.where(Project.active == filters["active"])
        if filters.get("client_uuid"):
            stmt = stmt.where(Project.client_uuid == filters["client_uuid"])
        if filters.get("status_uuid"):
            stmt = stmt.where(Project.status_uuid == filters["status_uuid"])
        stmt = stmt.order_by(Project.created_at)

        projects = self.db.session.execute(stmt).scalars().all()
        logger.debug("Fetched %d project tree(s) for key=%s", len(projects), key)
        return [project_to_record(p) for p in projects]

    def find_role(self, role_ref):
        if not role_ref:
            return None
        role = self.db.session.execute(
            select(Role).where(Role.uuid == role_ref)
        ).scalar_one_or_none()
        if role is None:
            return None
        return Capabilities(
            admin=bool(role.admin),
            project=bool(role.project),
            personal=bool(role.personal),
            financial=bool(role.financial),
        )


def init_project_store(app, store: ProjectStore | None = None) -> ProjectStore:
    if store is None:
        from billing.models import db
        store = SqlProjectStore(db)
    app.extensions[EXTENSION_KEY] = store
    return store


def get_project_store() -> ProjectStore:
    return current_app.extensions[EXTENSION_KEY]
