"""
Rollup Aggregator - project-level planned vs. actual totals.

    prev_*     planned figures summed over the budget's snapshot tasks
    total/...  actual figures summed over the live tasks
    current_*  Income and Expense transactions of the project
    dates      min/max over every timestamp in the tree

``aggregate_project`` is pure and works on ``ProjectTree`` records.
``rollup_project`` adds the capability projection, and ``format_rollup``
turns the result into display strings at the response boundary.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from billing.core.exceptions import ValidationError
from billing.core.records import (
    ActivityTask,
    Capabilities,
    ExpenseTask,
    ProjectTree,
    Task,
    TransactionKind,
)
from billing.services.redaction import MONETARY_ROLLUP_FIELDS, redact_rollup
from billing.services.valuation import valuate
from billing.utils.currency import ZERO, format_brl, to_decimal
from billing.utils.helpers import format_datetime

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectTotals:
    prev_total: Decimal
    prev_cost: Decimal
    prev_revenue: Decimal
    total: Decimal
    cost: Decimal
    revenue: Decimal
    current_expense: Decimal
    current_income: Decimal
    current_revenue: Decimal
    begin_date: datetime | None
    end_date: datetime | None

    def monetary(self) -> dict:
        return {name: getattr(self, name) for name in MONETARY_ROLLUP_FIELDS}


def _task_dates(task: Task) -> list:
    dates = [task.begin_date, task.end_date]
    if isinstance(task, ExpenseTask):
        dates.extend(e.date for e in task.expenses)
    elif isinstance(task, ActivityTask):
        for activity in task.activities:
            dates.extend((activity.begin_date, activity.end_date))
    return dates


def project_dates(project: ProjectTree) -> list[datetime]:
    """Every non-null timestamp in the project tree."""
    candidates = [project.budget.date]
    for task in project.budget.tasks:
        candidates.extend(_task_dates(task))
    for task in project.tasks:
        candidates.extend(_task_dates(task))
    candidates.extend(t.date for t in project.transactions)
    return [d for d in candidates if d is not None]


def date_span(project: ProjectTree) -> tuple[datetime | None, datetime | None]:
    dates = project_dates(project)
    if not dates:
        return None, None
    return min(dates), max(dates)


def _transaction_totals(project: ProjectTree) -> tuple[Decimal, Decimal]:
    income = ZERO
    expense = ZERO
    for entry in project.transactions:
        if entry.kind is TransactionKind.INCOME:
            income += to_decimal(entry.amount)
        elif entry.kind is TransactionKind.EXPENSE:
            expense += to_decimal(entry.amount)
        elif entry.kind in (
            TransactionKind.TRANSFER,
            TransactionKind.LOAN,
            TransactionKind.ADJUSTMENT,
            TransactionKind.REFUND,
        ):
            continue
        else:
            raise ValidationError(f"Unsupported transaction kind {entry.kind!r}")
    return income, expense


def aggregate_project(project: ProjectTree) -> ProjectTotals:
    planned = [valuate(t) for t in project.budget.tasks]
    actual = [valuate(t) for t in project.tasks]

    prev_cost = sum((v.planned_cost for v in planned), ZERO)
    prev_revenue = sum((v.planned_revenue for v in planned), ZERO)
    cost = sum((v.actual_cost for v in actual), ZERO)
    revenue = sum((v.actual_revenue for v in actual), ZERO)
    income, expense = _transaction_totals(project)
    begin_date, end_date = date_span(project)

    return ProjectTotals(
        prev_total=prev_cost + prev_revenue,
        prev_cost=prev_cost,
        prev_revenue=prev_revenue,
        total=cost + revenue,
        cost=cost,
        revenue=revenue,
        current_expense=expense,
        current_income=income,
        current_revenue=income - expense,
        begin_date=begin_date,
        end_date=end_date,
    )


def rollup_project(project: ProjectTree, capabilities: Capabilities) -> dict:
    """Aggregate one project and project it onto the viewer's capabilities.

    Monetary keys are present iff ``capabilities.financial``. Values stay
    Decimal / datetime; see ``format_rollup`` for the response shape.
    """
    totals = aggregate_project(project)
    logger.debug(
        "Rolled up project %s: %d budget tasks, %d live tasks, %d transactions",
        project.uuid, len(project.budget.tasks), len(project.tasks), len(project.transactions),
    )
    return redact_rollup(project.to_dict(), totals, capabilities)


def format_rollup(rollup: dict) -> dict:
    """Display strings for money and dates; other keys pass through."""
    out = dict(rollup)
    for name in MONETARY_ROLLUP_FIELDS:
        if name in out:
            out[name] = format_brl(out[name])
    out["begin_date"] = format_datetime(out.get("begin_date"))
    out["end_date"] = format_datetime(out.get("end_date"))
    return out
