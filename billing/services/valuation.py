"""
Task Valuation - planned and actual cost/revenue of a single task.

Activity tasks are priced by the hour:
    duration_hours = (end_date - begin_date) in ms / 3 600 000
    planned cost   = duration_hours * task.hourly_rate
    actual cost    = sum(activity hours * activity.hourly_rate)
    revenue        = task.revenue * duration_hours   (planned and actual)

Expense tasks are priced flat:
    planned cost   = task.cost
    actual cost    = sum(expense.cost)
    revenue        = task.revenue

Missing numbers count as zero. A task without children has an actual cost of
zero, never None.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

from billing.core.exceptions import ValidationError
from billing.core.records import ActivityTask, ExpenseTask, Task, TaskKind
from billing.utils.currency import ZERO, to_decimal

MS_PER_HOUR = Decimal(3_600_000)


def duration_hours(begin_date: datetime | None, end_date: datetime | None) -> Decimal:
    """Interval length in hours, from the millisecond difference."""
    if begin_date is None or end_date is None:
        return ZERO
    ms = (end_date - begin_date) // timedelta(milliseconds=1)
    return Decimal(ms) / MS_PER_HOUR


@dataclass(frozen=True)
class TaskValuation:
    kind: TaskKind
    planned_cost: Decimal
    actual_cost: Decimal
    planned_revenue: Decimal
    actual_revenue: Decimal
    planned_hourly_rate: Decimal | None = None
    actual_hourly_rate: Decimal | None = None

    @property
    def planned_total(self) -> Decimal:
        return self.planned_cost + self.planned_revenue

    @property
    def actual_total(self) -> Decimal:
        return self.actual_cost + self.actual_revenue


def _value_activity_task(task: ActivityTask) -> TaskValuation:
    hours = duration_hours(task.begin_date, task.end_date)
    planned_rate = to_decimal(task.hourly_rate)
    revenue = to_decimal(task.revenue) * hours

    actual_cost = sum(
        (duration_hours(a.begin_date, a.end_date) * to_decimal(a.hourly_rate) for a in task.activities),
        ZERO,
    )
    if task.activities:
        mean_rate = sum((to_decimal(a.hourly_rate) for a in task.activities), ZERO) / len(task.activities)
    else:
        mean_rate = ZERO

    return TaskValuation(
        kind=TaskKind.ACTIVITY,
        planned_cost=hours * planned_rate,
        actual_cost=actual_cost,
        planned_revenue=revenue,
        actual_revenue=revenue,
        planned_hourly_rate=planned_rate,
        actual_hourly_rate=mean_rate,
    )


def _value_expense_task(task: ExpenseTask) -> TaskValuation:
    revenue = to_decimal(task.revenue)
    return TaskValuation(
        kind=TaskKind.EXPENSE,
        planned_cost=to_decimal(task.cost),
        actual_cost=sum((to_decimal(e.cost) for e in task.expenses), ZERO),
        planned_revenue=revenue,
        actual_revenue=revenue,
    )


def valuate(task: Task) -> TaskValuation:
    """Value one task record. Unknown record types are rejected."""
    if isinstance(task, ActivityTask):
        return _value_activity_task(task)
    if isinstance(task, ExpenseTask):
        return _value_expense_task(task)
    raise ValidationError(f"Unsupported task record {type(task).__name__}")


def valuate_task(task: Task) -> dict:
    """Valuation in the shape the task endpoints return.

    Keys: cost (actual), prev_cost and prev_revenue (planned); Activity tasks
    also carry prev_hourly_rate (the task's own rate) and hourly_rate (mean
    rate of the logged activities). The stored revenue is left to the caller.
    """
    v = valuate(task)
    result = {
        "cost": v.actual_cost,
        "prev_revenue": v.planned_revenue,
        "prev_cost": v.planned_cost,
    }
    if v.kind is TaskKind.ACTIVITY:
        result["prev_hourly_rate"] = v.planned_hourly_rate
        result["hourly_rate"] = v.actual_hourly_rate
    return result
