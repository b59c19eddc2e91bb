"""
Tests: activity and expense blueprints.

Covers:
  1. logging work and expenses, kind and date checks on the parent task
  2. listing with filters and redaction
  3. update and delete
  4. the full flow from reference data to a non-zero actual cost in the rollup
"""

from datetime import datetime
from decimal import Decimal

import pytest

from billing.models import db
from billing.models.client import Supplier
from billing.models.task import Activity, Expense, Task


def _task(project, kind="Activity", **fields) -> Task:
    values = dict(
        type=kind, description=f"{kind} task",
        begin_date=datetime(2024, 4, 1, 8), end_date=datetime(2024, 4, 1, 18),
        hourly_rate=Decimal("90") if kind == "Activity" else None,
        cost=Decimal("500") if kind == "Expense" else None,
        revenue=Decimal("0"),
        status_uuid=project.status_uuid, project_uuid=project.uuid,
    )
    values.update(fields)
    task = Task(**values)
    db.session.add(task)
    db.session.commit()
    return task


def _work(task, user, **overrides) -> dict:
    body = {"description": "Pairing", "begin_date": "2024-04-01T09:00:00",
            "end_date": "2024-04-01T11:00:00", "hourly_rate": "R$ 60,00",
            "user_uuid": user.uuid, "task_uuid": task.uuid}
    body.update(overrides)
    return body


def _spend(task, **overrides) -> dict:
    body = {"description": "Servers", "cost": "R$ 120,50", "date": "2024-04-02",
            "task_uuid": task.uuid}
    body.update(overrides)
    return body


@pytest.fixture()
def supplier():
    s = Supplier(type="Enterprise", name="Cloud Co", cnpj="11.111.111/0001-11")
    db.session.add(s)
    db.session.commit()
    return s


# ── 1. Create ────────────────────────────────────────────────────────────────


def test_log_work(client, owner, make_project, auth_headers) -> None:
    task = _task(make_project())
    res = client.post("/api/v1/activities", json=_work(task, owner), headers=auth_headers(owner))

    assert res.status_code == 201
    logged = res.get_json()["activity"]
    assert logged["hourly_rate"] == "R$ 60,00"
    assert logged["begin_date"] == "01/04/24 09:00"
    assert Activity.query.one().hourly_rate == Decimal("60.00")


def test_log_work_validation(client, owner, viewer, make_project, auth_headers) -> None:
    project = make_project()
    task = _task(project)
    spend_task = _task(project, "Expense")
    planned = _task(project, budget_uuid=project.budget_uuid)

    def post(body, user=owner):
        return client.post("/api/v1/activities", json=body, headers=auth_headers(user)).status_code

    assert post(_work(task, owner), viewer) == 403
    assert post(_work(task, owner, end_date="2024-04-01T08:00:00")) == 422
    assert post(_work(task, owner, hourly_rate="")) == 422
    assert post(_work(task, owner, user_uuid="nope")) == 404
    assert post(_work(task, owner, task_uuid="nope")) == 404
    assert post(_work(spend_task, owner)) == 422
    assert post(_work(planned, owner)) == 422
    assert Activity.query.count() == 0


def test_record_expense(client, owner, make_project, supplier, auth_headers) -> None:
    task = _task(make_project(), "Expense")
    res = client.post("/api/v1/expenses", json=_spend(task, supplier_uuid=supplier.uuid),
                      headers=auth_headers(owner))

    assert res.status_code == 201
    recorded = res.get_json()["expense"]
    assert recorded["cost"] == "R$ 120,50"
    assert recorded["supplier_name"] == "Cloud Co"


def test_record_expense_validation(client, owner, make_project, auth_headers) -> None:
    project = make_project()
    task = _task(project, "Expense")

    def post(body):
        return client.post("/api/v1/expenses", json=body, headers=auth_headers(owner)).status_code

    assert post(_spend(task, cost=None)) == 422
    assert post(_spend(task, date="someday")) == 422
    assert post(_spend(task, supplier_uuid="nope")) == 404
    assert post(_spend(_task(project))) == 422
    assert Expense.query.count() == 0


# ── 2. Listing ───────────────────────────────────────────────────────────────


def test_list_work_filters_and_redaction(client, owner, viewer, make_project, auth_headers) -> None:
    task = _task(make_project())
    headers = auth_headers(owner)
    client.post("/api/v1/activities", json=_work(task, owner), headers=headers)
    client.post("/api/v1/activities", json=_work(task, viewer, description="Review",
                                                 begin_date="2024-04-03T09:00:00",
                                                 end_date="2024-04-03T10:00:00",
                                                 hourly_rate="R$ 200,00"), headers=headers)

    def descriptions(params, user=owner):
        res = client.get("/api/v1/activities/all", query_string=params, headers=auth_headers(user))
        return [a["description"] for a in res.get_json()]

    assert descriptions({}) == ["Pairing", "Review"]
    assert descriptions({"begin_date": "2024-04-02"}) == ["Review"]
    assert descriptions({"user_uuid": owner.uuid}) == ["Pairing"]
    assert descriptions({"hourly_rate_max": "R$ 100,00"}) == ["Pairing"]
    assert descriptions({"hourly_rate_max": "R$ 100,00"}, viewer) == ["Pairing", "Review"]

    listed = client.get("/api/v1/activities/all", headers=auth_headers(viewer)).get_json()
    assert all("hourly_rate" not in a for a in listed)


def test_list_expenses_hides_cost_without_financial(client, owner, viewer, make_project,
                                                    auth_headers) -> None:
    task = _task(make_project(), "Expense")
    client.post("/api/v1/expenses", json=_spend(task), headers=auth_headers(owner))

    (entry,) = client.get("/api/v1/expenses/all", headers=auth_headers(viewer)).get_json()
    assert "cost" not in entry
    assert entry["date"] == "02/04/24 00:00"

    res = client.get("/api/v1/expenses/all", query_string={"cost_min": "R$ 200,00"},
                     headers=auth_headers(owner))
    assert res.get_json() == []


# ── 3. Update and delete ─────────────────────────────────────────────────────


def test_update_and_delete_work(client, owner, make_project, auth_headers) -> None:
    task = _task(make_project())
    headers = auth_headers(owner)
    client.post("/api/v1/activities", json=_work(task, owner), headers=headers)
    entry = Activity.query.one()

    res = client.put("/api/v1/activities", json=_work(task, owner, uuid=entry.uuid,
                                                      hourly_rate="R$ 75,00"), headers=headers)
    assert res.status_code == 200
    db.session.refresh(entry)
    assert entry.hourly_rate == Decimal("75.00")

    bad = _work(task, owner, uuid=entry.uuid, end_date="2024-04-01T07:00:00")
    assert client.put("/api/v1/activities", json=bad, headers=headers).status_code == 422
    assert client.put("/api/v1/activities", json=_work(task, owner, uuid="nope"),
                      headers=headers).status_code == 404

    assert client.delete(f"/api/v1/activities/{entry.uuid}", headers=headers).status_code == 200
    assert Activity.query.count() == 0
    assert client.delete(f"/api/v1/activities/{entry.uuid}", headers=headers).status_code == 404


def test_update_and_delete_expense(client, owner, make_project, auth_headers) -> None:
    task = _task(make_project(), "Expense")
    headers = auth_headers(owner)
    client.post("/api/v1/expenses", json=_spend(task), headers=headers)
    entry = Expense.query.one()

    res = client.put("/api/v1/expenses", json=_spend(task, uuid=entry.uuid, cost="R$ 99,90"),
                     headers=headers)
    assert res.status_code == 200
    db.session.refresh(entry)
    assert entry.cost == Decimal("99.90")

    assert client.delete(f"/api/v1/expenses/{entry.uuid}", headers=headers).status_code == 200
    assert Expense.query.count() == 0


# ── 4. Full flow ─────────────────────────────────────────────────────────────


def test_logged_entries_reach_the_project_rollup(client, owner, auth_headers) -> None:
    headers = auth_headers(owner)

    def created(path, body):
        res = client.post(f"/api/v1/{path}", json=body, headers=headers)
        assert res.status_code == 201, res.get_json()
        return res.get_json()

    status = created("status", {"name": "Doing", "description": "In progress", "priority": 2})
    status_uuid = status["status"]["uuid"]
    client_uuid = created("clients", {"type": "Enterprise", "name": "Initech",
                                      "cnpj": "22.222.222/0001-22"})["uuid"]
    project_uuid = created("projects", {"name": "Portal", "description": "Customer portal",
                                        "client_uuid": client_uuid,
                                        "status_uuid": status_uuid})["project"]["uuid"]
    base = {"status_uuid": status_uuid, "project_uuid": project_uuid,
            "begin_date": "2024-04-01T08:00:00", "end_date": "2024-04-01T18:00:00"}
    work_task = created("tasks", {**base, "type": "Activity", "description": "Build",
                                  "hourly_rate": "R$ 90,00"})["task"]
    spend_task = created("tasks", {**base, "type": "Expense", "description": "Hosting",
                                   "cost": "R$ 500,00"})["task"]
    created("activities", _work(db.session.get(Task, work_task["uuid"]), owner))
    created("expenses", _spend(db.session.get(Task, spend_task["uuid"])))

    (rollup,) = client.get(f"/api/v1/projects/{project_uuid}", headers=headers).get_json()

    # 2h at R$ 60,00 plus R$ 120,50 of expenses
    assert rollup["cost"] == "R$ 240,50"
    assert rollup["total"] == "R$ 240,50"
