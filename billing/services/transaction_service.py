"""Transaction service - ledger listing, create, update and delete."""

import logging

from billing.core.exceptions import NotFoundError, ValidationError
from billing.core.records import Capabilities, TransactionKind
from billing.models import db
from billing.models.auth import User
from billing.models.client import Client
from billing.models.project import Project
from billing.models.transaction import Transaction
from billing.services.redaction import redact_transaction
from billing.utils.currency import format_brl, parse_brl
from billing.utils.helpers import format_datetime, parse_datetime

logger = logging.getLogger(__name__)


def list_transactions(key: str, capabilities: Capabilities, filters: dict | None = None) -> list[dict]:
    """Ledger entries, amounts formatted, redacted without ``financial``.

    Filters: type (list of kinds), date_min, date_max, amount_min,
    amount_max, description, client_uuid, project_uuid, user_uuid. Amount
    filters are ignored for callers that cannot see amounts.
    """
    filters = filters or {}
    query = Transaction.query
    if key != "all":
        query = query.filter(Transaction.uuid == key)
    if filters.get("type"):
        query = query.filter(Transaction.type.in_([k.value for k in filters["type"]]))
    if filters.get("date_min"):
        query = query.filter(Transaction.date >= filters["date_min"])
    if filters.get("date_max"):
        query = query.filter(Transaction.date <= filters["date_max"])
    if capabilities.financial:
        if filters.get("amount_min") is not None:
            query = query.filter(Transaction.amount >= filters["amount_min"])
        if filters.get("amount_max") is not None:
            query = query.filter(Transaction.amount <= filters["amount_max"])
    if filters.get("description"):
        query = query.filter(Transaction.description.contains(filters["description"]))
    for name in ("client_uuid", "project_uuid", "user_uuid"):
        if filters.get(name):
            query = query.filter(getattr(Transaction, name) == filters[name])

    result = []
    for entry in query.order_by(Transaction.date.desc()).all():
        out = entry.to_dict()
        out["amount"] = format_brl(entry.amount)
        out["date"] = format_datetime(entry.date)
        result.append(redact_transaction(out, capabilities))
    return result


def _transaction_values(data: dict, *, user_uuid: str) -> dict:
    kind = TransactionKind.parse(data.get("type"))

    if data.get("amount") in (None, ""):
        raise ValidationError("amount is required", details={"amount": "required"})
    amount = parse_brl(data["amount"], field="amount")

    try:
        date = parse_datetime(data.get("date"))
    except ValueError as exc:
        raise ValidationError(str(exc), details={"date": "invalid date"}) from None
    if date is None:
        raise ValidationError("date is required", details={"date": "required"})

    description = str(data.get("description") or "").strip()
    if not description:
        raise ValidationError("description is required", details={"description": "required"})

    client_uuid = data.get("client_uuid")
    if not client_uuid:
        raise ValidationError("client_uuid is required", details={"client_uuid": "required"})
    if db.session.get(Client, client_uuid) is None:
        raise NotFoundError(resource="Client", resource_id=client_uuid)

    project_uuid = data.get("project_uuid") or None
    if project_uuid and db.session.get(Project, project_uuid) is None:
        raise NotFoundError(resource="Project", resource_id=project_uuid)

    owner_uuid = data.get("user_uuid") or user_uuid
    if db.session.get(User, owner_uuid) is None:
        raise NotFoundError(resource="User", resource_id=owner_uuid)

    return {
        "type": kind.value,
        "amount": amount,
        "date": date,
        "description": description,
        "client_uuid": client_uuid,
        "project_uuid": project_uuid,
        "user_uuid": owner_uuid,
    }


def create_transaction(data: dict, *, user_uuid: str) -> Transaction:
    entry = Transaction(**_transaction_values(data, user_uuid=user_uuid))
    db.session.add(entry)
    db.session.flush()
    logger.info("Transaction %s (%s) created", entry.uuid, entry.type)
    return entry


def update_transaction(data: dict, *, user_uuid: str) -> Transaction:
    transaction_uuid = data.get("uuid")
    if not transaction_uuid:
        raise ValidationError("uuid is required", details={"uuid": "required"})
    entry = db.session.get(Transaction, transaction_uuid)
    if entry is None:
        raise NotFoundError(resource="Transaction", resource_id=transaction_uuid)
    for name, value in _transaction_values(data, user_uuid=user_uuid).items():
        setattr(entry, name, value)
    db.session.flush()
    logger.info("Transaction %s updated", entry.uuid)
    return entry


def delete_transaction(transaction_uuid: str) -> None:
    entry = db.session.get(Transaction, transaction_uuid)
    if entry is None:
        raise NotFoundError(resource="Transaction", resource_id=transaction_uuid)
    db.session.delete(entry)
    db.session.flush()
    logger.info("Transaction %s deleted", transaction_uuid)
