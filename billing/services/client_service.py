"""
Client service - clients and suppliers.

Both tables hold the same party shape, so every operation takes the model:

    list_parties(Client, "all", filters)
    create_party(Supplier, data)

A ``Person`` is identified by CPF, an ``Enterprise`` by CNPJ. CPF, CNPJ and
email are unique within each table.
"""

import logging

from billing.core.exceptions import ConflictError, NotFoundError, ValidationError
from billing.models import db
from billing.models.client import PARTY_TYPES, Client
from billing.models.transaction import Transaction

logger = logging.getLogger(__name__)

TEXT_FILTERS = ("cpf", "cnpj", "name", "fantasy", "email", "phone")
UNIQUE_FIELDS = ("cpf", "cnpj", "email")


def list_parties(model, key: str, filters: dict | None = None) -> list[dict]:
    """Filters: types (list), cpf, cnpj, name, fantasy, email, phone, active."""
    filters = filters or {}
    query = model.query
    if key != "all":
        query = query.filter(model.uuid == key)
    if filters.get("types"):
        query = query.filter(model.type.in_(filters["types"]))
    for name in TEXT_FILTERS:
        if filters.get(name):
            query = query.filter(getattr(model, name).contains(filters[name]))
    if filters.get("active") is not None:
        query = query.filter(model.active.is_(filters["active"]))
    return [p.to_dict() for p in query.order_by(model.name).all()]


def _text(data: dict, name: str):
    value = str(data.get(name) or "").strip()
    return value or None


def _apply_party_fields(model, party, data: dict) -> None:
    party_type = data.get("type")
    if party_type not in PARTY_TYPES:
        raise ValidationError(f"type must be one of {', '.join(PARTY_TYPES)}",
                              details={"type": "invalid"})
    name = _text(data, "name")
    if not name:
        raise ValidationError("name is required", details={"name": "required"})

    values = {
        "type": party_type,
        "name": name,
        "cpf": _text(data, "cpf") if party_type == "Person" else None,
        "cnpj": _text(data, "cnpj") if party_type == "Enterprise" else None,
        "fantasy": _text(data, "fantasy"),
        "email": _text(data, "email"),
        "phone": _text(data, "phone"),
    }
    document = "cpf" if party_type == "Person" else "cnpj"
    if not values[document]:
        raise ValidationError(f"{document} is required for {party_type}",
                              details={document: "required"})

    active = data.get("active", True)
    if not isinstance(active, bool):
        raise ValidationError("active must be a boolean", details={"active": "boolean"})
    values["active"] = active

    for field in UNIQUE_FIELDS:
        if values[field] is None:
            continue
        clash = model.query.filter(getattr(model, field) == values[field])
        if party.uuid is not None:
            clash = clash.filter(model.uuid != party.uuid)
        if clash.first() is not None:
            raise ConflictError(resource=model.__name__, field=field, value=values[field])

    for field, value in values.items():
        setattr(party, field, value)


def create_party(model, data: dict):
    party = model()
    _apply_party_fields(model, party, data)
    db.session.add(party)
    db.session.flush()
    logger.info("%s %s created", model.__name__, party.uuid)
    return party


def update_party(model, data: dict):
    party_uuid = data.get("uuid")
    if not party_uuid:
        raise ValidationError("uuid is required", details={"uuid": "required"})
    party = db.session.get(model, party_uuid)
    if party is None:
        raise NotFoundError(resource=model.__name__, resource_id=party_uuid)
    _apply_party_fields(model, party, data)
    db.session.flush()
    logger.info("%s %s updated", model.__name__, party.uuid)
    return party


def delete_party(model, party_uuid: str) -> None:
    """Clients still referenced by projects or transactions are kept.

    Expenses of a deleted supplier lose their supplier reference.
    """
    party = db.session.get(model, party_uuid)
    if party is None:
        raise NotFoundError(resource=model.__name__, resource_id=party_uuid)
    if model is Client:
        in_use = party.projects.count() or Transaction.query.filter_by(client_uuid=party_uuid).count()
        if in_use:
            raise ValidationError(f"Client {party.name!r} still has projects or transactions")
    db.session.delete(party)
    db.session.flush()
    logger.info("%s %s deleted", model.__name__, party_uuid)
