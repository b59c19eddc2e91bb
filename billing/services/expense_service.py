"""Expense service - spending entries against Expense tasks."""

import logging

from billing.core.exceptions import NotFoundError, ValidationError
from billing.core.records import Capabilities, TaskKind
from billing.models import db
from billing.models.client import Supplier
from billing.models.task import Expense
from billing.services.redaction import redact_entry
from billing.services.task_service import get_entry_task
from billing.utils.currency import format_brl, parse_brl
from billing.utils.helpers import format_datetime, parse_datetime

logger = logging.getLogger(__name__)


def _expense_values(data: dict) -> dict:
    if data.get("cost") in (None, ""):
        raise ValidationError("cost is required", details={"cost": "required"})
    cost = parse_brl(data["cost"], field="cost")

    try:
        date = parse_datetime(data.get("date"))
    except ValueError as exc:
        raise ValidationError(str(exc), details={"date": "invalid date"}) from None
    if date is None:
        raise ValidationError("date is required", details={"date": "required"})

    supplier_uuid = data.get("supplier_uuid") or None
    if supplier_uuid and db.session.get(Supplier, supplier_uuid) is None:
        raise NotFoundError(resource="Supplier", resource_id=supplier_uuid)

    task = get_entry_task(data.get("task_uuid"), TaskKind.EXPENSE)
    return {
        "description": str(data.get("description") or "").strip(),
        "cost": cost,
        "date": date,
        "supplier_uuid": supplier_uuid,
        "task_uuid": task.uuid,
    }


def format_expense(entry: Expense) -> dict:
    out = entry.to_dict()
    out["date"] = format_datetime(entry.date)
    out["cost"] = format_brl(entry.cost)
    return out


def list_expenses(key: str, capabilities: Capabilities, filters: dict | None = None) -> list[dict]:
    """Expense entries, newest first.

    Filters: description, date_min, date_max, cost_min, cost_max (financial
    only), task_uuid, supplier_uuid.
    """
    filters = filters or {}
    query = Expense.query
    if key != "all":
        query = query.filter(Expense.uuid == key)
    if filters.get("description"):
        query = query.filter(Expense.description.contains(filters["description"]))
    if filters.get("date_min"):
        query = query.filter(Expense.date >= filters["date_min"])
    if filters.get("date_max"):
        query = query.filter(Expense.date <= filters["date_max"])
    if capabilities.financial:
        if filters.get("cost_min") is not None:
            query = query.filter(Expense.cost >= filters["cost_min"])
        if filters.get("cost_max") is not None:
            query = query.filter(Expense.cost <= filters["cost_max"])
    for name in ("task_uuid", "supplier_uuid"):
        if filters.get(name):
            query = query.filter(getattr(Expense, name) == filters[name])

    return [
        redact_entry(format_expense(entry), capabilities)
        for entry in query.order_by(Expense.date.desc()).all()
    ]


def create_expense(data: dict) -> Expense:
    entry = Expense(**_expense_values(data))
    db.session.add(entry)
    db.session.flush()
    logger.info("Expense %s recorded on task %s", entry.uuid, entry.task_uuid)
    return entry


def update_expense(data: dict) -> Expense:
    expense_uuid = data.get("uuid")
    if not expense_uuid:
        raise ValidationError("uuid is required", details={"uuid": "required"})
    entry = db.session.get(Expense, expense_uuid)
    if entry is None:
        raise NotFoundError(resource="Expense", resource_id=expense_uuid)
    for name, value in _expense_values(data).items():
        setattr(entry, name, value)
    db.session.flush()
    logger.info("Expense %s updated", entry.uuid)
    return entry


def delete_expense(expense_uuid: str) -> None:
    entry = db.session.get(Expense, expense_uuid)
    if entry is None:
        raise NotFoundError(resource="Expense", resource_id=expense_uuid)
    db.session.delete(entry)
    db.session.flush()
    logger.info("Expense %s deleted", expense_uuid)
