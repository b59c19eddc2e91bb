"""
Read-only records consumed by the financial rollup engine.

The engine never touches ORM objects. The project store converts a fetched
project tree into these frozen dataclasses, rejecting unknown task and
transaction kinds on the way in, so aggregation only ever sees closed,
already-validated variants.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Union

from billing.core.exceptions import ValidationError


# ═════════════════════════════════════════════════════════════════════════════
# Kinds
# ═════════════════════════════════════════════════════════════════════════════

class TaskKind(str, Enum):
    ACTIVITY = "Activity"
    EXPENSE = "Expense"

    @classmethod
    def parse(cls, value) -> "TaskKind":
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(
                f"Invalid task type {value!r}",
                details={"type": f"Must be one of: {', '.join(k.value for k in cls)}"},
            ) from None


class TransactionKind(str, Enum):
    INCOME = "Income"
    EXPENSE = "Expense"
    TRANSFER = "Transfer"
    LOAN = "Loan"
    ADJUSTMENT = "Adjustment"
    REFUND = "Refund"

    @classmethod
    def parse(cls, value) -> "TransactionKind":
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(
                f"Invalid transaction type {value!r}",
                details={"type": f"Must be one of: {', '.join(k.value for k in cls)}"},
            ) from None


# ═════════════════════════════════════════════════════════════════════════════
# Task tree
# ═════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ActivityLog:
    """Logged work interval under an Activity-kind task."""
    begin_date: datetime
    end_date: datetime
    hourly_rate: Decimal | None = None


@dataclass(frozen=True)
class ExpenseEntry:
    """Actual cost entry under an Expense-kind task."""
    cost: Decimal | None
    date: datetime | None = None


@dataclass(frozen=True)
class ActivityTask:
    kind: ClassVar[TaskKind] = TaskKind.ACTIVITY

    begin_date: datetime
    end_date: datetime
    revenue: Decimal | None = None
    hourly_rate: Decimal | None = None
    activities: tuple[ActivityLog, ...] = ()
    uuid: str | None = None


@dataclass(frozen=True)
class ExpenseTask:
    kind: ClassVar[TaskKind] = TaskKind.EXPENSE

    begin_date: datetime
    end_date: datetime
    revenue: Decimal | None = None
    cost: Decimal | None = None
    expenses: tuple[ExpenseEntry, ...] = ()
    uuid: str | None = None


Task = Union[ActivityTask, ExpenseTask]


@dataclass(frozen=True)
class LedgerEntry:
    """A project transaction as seen by the aggregator."""
    kind: TransactionKind
    amount: Decimal | None
    date: datetime | None = None


@dataclass(frozen=True)
class BudgetSnapshot:
    date: datetime | None
    tasks: tuple[Task, ...] = ()


@dataclass(frozen=True)
class ProjectTree:
    """A project with its budget snapshot, live tasks and transactions."""
    uuid: str
    name: str
    budget: BudgetSnapshot
    description: str | None = None
    active: bool = True
    client_uuid: str | None = None
    client_name: str | None = None
    status_uuid: str | None = None
    status_name: str | None = None
    budget_uuid: str | None = None
    tasks: tuple[Task, ...] = ()
    transactions: tuple[LedgerEntry, ...] = ()

    def to_dict(self) -> dict:
        """Non-monetary project fields, safe for every viewer."""
        return {
            "uuid": self.uuid,
            "name": self.name,
            "description": self.description,
            "active": self.active,
            "client_uuid": self.client_uuid,
            "client_name": self.client_name,
            "status_uuid": self.status_uuid,
            "status_name": self.status_name,
            "budget_uuid": self.budget_uuid,
        }


# ═════════════════════════════════════════════════════════════════════════════
# Capabilities
# ═════════════════════════════════════════════════════════════════════════════

CAPABILITY_NAMES = ("admin", "project", "personal", "financial")


@dataclass(frozen=True)
class Capabilities:
    admin: bool = False
    project: bool = False
    personal: bool = False
    financial: bool = False

    def has(self, name: str) -> bool:
        if name not in CAPABILITY_NAMES:
            raise ValueError(f"Unknown capability {name!r}")
        return bool(getattr(self, name))

    def for_self(self) -> "Capabilities":
        """A viewer always sees personal and financial data on their own record."""
        return replace(self, personal=True, financial=True)

    def to_dict(self) -> dict:
        return {name: getattr(self, name) for name in CAPABILITY_NAMES}


NO_CAPABILITIES = Capabilities()
FULL_CAPABILITIES = Capabilities(admin=True, project=True, personal=True, financial=True)


@dataclass(frozen=True)
class Reconciliation:
    """Three-way diff of an incoming task set against the stored one."""
    to_create: list = field(default_factory=list)
    to_update: list = field(default_factory=list)
    to_delete: list = field(default_factory=list)
