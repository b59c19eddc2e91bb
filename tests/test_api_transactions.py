"""
Tests: transaction blueprint - ledger listing, amount redaction, create, update, delete.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from billing.models import db
from billing.models.transaction import Transaction


@pytest.fixture()
def ledger(owner, make_project):
    project = make_project()
    rows = [
        ("Income", "1500.00", datetime(2024, 3, 1), "Invoice 1"),
        ("Expense", "200.00", datetime(2024, 3, 10), "Hosting"),
        ("Transfer", "50.00", datetime(2024, 2, 1), "Between accounts"),
    ]
    for kind, amount, date, description in rows:
        db.session.add(Transaction(type=kind, amount=Decimal(amount), date=date,
                                   description=description, client_uuid=project.client_uuid,
                                   project_uuid=project.uuid, user_uuid=owner.uuid))
    db.session.commit()
    return project


def test_list_is_newest_first_and_formatted(client, owner, ledger, auth_headers) -> None:
    res = client.get("/api/v1/transactions/all", headers=auth_headers(owner))
    entries = res.get_json()
    assert [e["description"] for e in entries] == ["Hosting", "Invoice 1", "Between accounts"]
    assert entries[1]["amount"] == "R$ 1.500,00"
    assert entries[1]["date"] == "01/03/24 00:00"
    assert entries[1]["project_name"] == "Website"
    assert entries[1]["username"] == owner.username


def test_amount_hidden_without_financial(client, viewer, ledger, auth_headers) -> None:
    entries = client.get("/api/v1/transactions/all", headers=auth_headers(viewer)).get_json()
    assert len(entries) == 3
    assert all("amount" not in e for e in entries)


def test_amount_filters_ignored_without_financial(client, owner, viewer, ledger, auth_headers) -> None:
    url = "/api/v1/transactions/all"
    params = {"amount_min": "R$ 1.000,00"}
    assert len(client.get(url, query_string=params, headers=auth_headers(viewer)).get_json()) == 3
    res = client.get(url, query_string=params, headers=auth_headers(owner))
    assert [e["description"] for e in res.get_json()] == ["Invoice 1"]


def test_type_and_date_filters(client, owner, ledger, auth_headers) -> None:
    headers = auth_headers(owner)
    res = client.get("/api/v1/transactions/all?type=Income,Expense", headers=headers)
    assert len(res.get_json()) == 2

    res = client.get("/api/v1/transactions/all?date_min=2024-03-05", headers=headers)
    assert [e["description"] for e in res.get_json()] == ["Hosting"]

    res = client.get("/api/v1/transactions/all?date_max=yesterday", headers=headers)
    assert res.status_code == 422


def test_create_transaction_defaults_user_to_caller(client, owner, make_client, auth_headers) -> None:
    res = client.post("/api/v1/transactions", json={
        "type": "Income", "amount": "R$ 2.345,67", "date": "10/04/2024 14:30",
        "description": "Invoice 2", "client_uuid": make_client().uuid,
    }, headers=auth_headers(owner))

    assert res.status_code == 201
    entry = db.session.get(Transaction, res.get_json()["uuid"])
    assert entry.amount == Decimal("2345.67")
    assert entry.date == datetime(2024, 4, 10, 14, 30)
    assert entry.user_uuid == owner.uuid
    assert entry.project_uuid is None


def test_create_transaction_validation(client, owner, make_client, auth_headers) -> None:
    base = {"type": "Income", "amount": "R$ 1,00", "date": "2024-04-10",
            "description": "x", "client_uuid": make_client().uuid}
    headers = auth_headers(owner)

    assert client.post("/api/v1/transactions", json={**base, "type": "Gift"},
                       headers=headers).status_code == 422
    assert client.post("/api/v1/transactions", json={**base, "amount": ""},
                       headers=headers).status_code == 422
    assert client.post("/api/v1/transactions", json={**base, "project_uuid": "nope"},
                       headers=headers).status_code == 404
    assert Transaction.query.count() == 0


def test_create_requires_financial(client, viewer, make_client, auth_headers) -> None:
    res = client.post("/api/v1/transactions", json={
        "type": "Income", "amount": "R$ 1,00", "date": "2024-04-10",
        "description": "x", "client_uuid": make_client().uuid,
    }, headers=auth_headers(viewer))
    assert res.status_code == 403


def test_delete_transaction(client, owner, ledger, auth_headers) -> None:
    entry_uuid = Transaction.query.filter_by(type="Transfer").one().uuid
    res = client.delete(f"/api/v1/transactions/{entry_uuid}", headers=auth_headers(owner))
    assert res.status_code == 200
    assert db.session.get(Transaction, entry_uuid) is None


def test_update_transaction(client, owner, ledger, auth_headers) -> None:
    entry = Transaction.query.filter_by(type="Income").one()
    body = {"uuid": entry.uuid, "type": "Income", "amount": "R$ 1.750,00", "date": "2024-03-02",
            "description": "Invoice 1 (revised)", "client_uuid": entry.client_uuid,
            "project_uuid": entry.project_uuid}

    res = client.put("/api/v1/transactions", json=body, headers=auth_headers(owner))

    assert res.status_code == 200
    db.session.refresh(entry)
    assert entry.amount == Decimal("1750.00")
    assert entry.description == "Invoice 1 (revised)"
    assert entry.date == datetime(2024, 3, 2)


def test_update_transaction_errors(client, owner, viewer, ledger, auth_headers) -> None:
    entry = Transaction.query.filter_by(type="Income").one()
    body = {"uuid": entry.uuid, "type": "Income", "amount": "R$ 1,00", "date": "2024-03-02",
            "description": "x", "client_uuid": entry.client_uuid}

    assert client.put("/api/v1/transactions", json=body,
                      headers=auth_headers(viewer)).status_code == 403
    assert client.put("/api/v1/transactions", json={**body, "uuid": "nope"},
                      headers=auth_headers(owner)).status_code == 404
    assert client.put("/api/v1/transactions", json={**body, "type": "Gift"},
                      headers=auth_headers(owner)).status_code == 422
    db.session.refresh(entry)
    assert entry.amount == Decimal("1500.00")
