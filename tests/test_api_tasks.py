"""
Tests: task blueprint - valuation in listings, filters, create, update, delete.
"""

from datetime import datetime
from decimal import Decimal

from billing.models import db
from billing.models.task import Activity, Expense, Task


def _payload(project, **overrides) -> dict:
    body = {
        "type": "Activity",
        "description": "Backend work",
        "begin_date": "2024-04-01T09:00:00",
        "end_date": "2024-04-01T11:00:00",
        "hourly_rate": "R$ 90,00",
        "revenue": "R$ 10,00",
        "status_uuid": project.status_uuid,
        "project_uuid": project.uuid,
    }
    body.update(overrides)
    return body


def test_create_activity_task(client, owner, make_project, auth_headers) -> None:
    project = make_project()
    res = client.post("/api/v1/tasks", json=_payload(project, user_uuid=owner.uuid),
                      headers=auth_headers(owner))

    assert res.status_code == 201
    task = res.get_json()["task"]
    assert task["hourly_rate"] == "R$ 90,00"
    assert task["cost"] == "R$ 0,00"
    assert task["begin_date"] == "01/04/24 09:00"
    assert task["budget_uuid"] is None


def test_create_requires_project_capability(client, viewer, make_project, auth_headers) -> None:
    res = client.post("/api/v1/tasks", json=_payload(make_project()), headers=auth_headers(viewer))
    assert res.status_code == 403


def test_create_validation(client, owner, make_project, auth_headers) -> None:
    project = make_project()
    headers = auth_headers(owner)

    res = client.post("/api/v1/tasks", json=_payload(project, type="Expense"), headers=headers)
    assert res.status_code == 422
    assert res.get_json()["details"] == {"cost": "required"}

    res = client.post("/api/v1/tasks", json=_payload(project, end_date="2024-03-01"), headers=headers)
    assert res.status_code == 422

    res = client.post("/api/v1/tasks", json=_payload(project, project_uuid="nope"), headers=headers)
    assert res.status_code == 404

    res = client.post("/api/v1/tasks", json=_payload(project, user_uuid="nope"), headers=headers)
    assert res.status_code == 404
    assert Task.query.count() == 0


def test_list_carries_planned_and_actual_values(client, owner, make_project, auth_headers) -> None:
    project = make_project()
    client.post("/api/v1/tasks", json=_payload(project), headers=auth_headers(owner))
    task = Task.query.one()
    db.session.add(Activity(task_uuid=task.uuid, user_uuid=owner.uuid, hourly_rate=Decimal("60"),
                            begin_date=datetime(2024, 4, 1, 9), end_date=datetime(2024, 4, 1, 10)))
    db.session.commit()

    (listed,) = client.get(f"/api/v1/tasks/{task.uuid}", headers=auth_headers(owner)).get_json()

    assert listed["prev_cost"] == "R$ 180,00"
    assert listed["cost"] == "R$ 60,00"
    assert listed["revenue"] == "R$ 10,00"
    assert listed["prev_revenue"] == "R$ 20,00"
    assert listed["prev_hourly_rate"] == "R$ 90,00"
    assert listed["hourly_rate"] == "R$ 60,00"


def test_list_expense_task_sums_entries(client, owner, make_project, auth_headers) -> None:
    project = make_project()
    client.post("/api/v1/tasks", json=_payload(project, type="Expense", cost="R$ 500,00",
                                               hourly_rate=None),
                headers=auth_headers(owner))
    task = Task.query.one()
    for cost in ("120.00", "30.50"):
        db.session.add(Expense(task_uuid=task.uuid, cost=Decimal(cost), date=datetime(2024, 4, 2)))
    db.session.commit()

    (listed,) = client.get("/api/v1/tasks/all", headers=auth_headers(owner)).get_json()

    assert listed["prev_cost"] == "R$ 500,00"
    assert listed["cost"] == "R$ 150,50"
    assert "prev_hourly_rate" not in listed


def test_list_redacts_money_without_financial(client, owner, viewer, make_project, auth_headers) -> None:
    client.post("/api/v1/tasks", json=_payload(make_project()), headers=auth_headers(owner))
    (listed,) = client.get("/api/v1/tasks/all", headers=auth_headers(viewer)).get_json()
    for name in ("hourly_rate", "cost", "revenue", "prev_cost", "prev_revenue", "prev_hourly_rate"):
        assert name not in listed
    assert listed["description"] == "Backend work"


def test_list_filters(client, owner, make_project, auth_headers) -> None:
    project = make_project()
    headers = auth_headers(owner)
    client.post("/api/v1/tasks", json=_payload(project), headers=headers)
    client.post("/api/v1/tasks", json=_payload(project, type="Expense", cost="R$ 1,00",
                                               description="Servers"), headers=headers)
    planned = Task(type="Expense", description="Planned", begin_date=datetime(2024, 1, 1),
                   end_date=datetime(2024, 1, 1), cost=Decimal("1"), revenue=Decimal("0"),
                   status_uuid=project.status_uuid, project_uuid=project.uuid,
                   budget_uuid=project.budget_uuid)
    db.session.add(planned)
    db.session.commit()

    def descriptions(query):
        res = client.get(f"/api/v1/tasks/all?{query}", headers=headers)
        return sorted(t["description"] for t in res.get_json())

    assert descriptions("type=Expense") == ["Planned", "Servers"]
    assert descriptions("type=Expense,Bogus") == ["Planned", "Servers"]
    assert descriptions("budget_uuid=null") == ["Backend work", "Servers"]
    assert descriptions(f"budget_uuid={project.budget_uuid}") == ["Planned"]
    assert descriptions("description=Serv") == ["Servers"]


def test_delete_task(client, owner, make_project, auth_headers) -> None:
    client.post("/api/v1/tasks", json=_payload(make_project()), headers=auth_headers(owner))
    task_uuid = Task.query.one().uuid

    res = client.delete(f"/api/v1/tasks/{task_uuid}", headers=auth_headers(owner))

    assert res.status_code == 200
    assert db.session.get(Task, task_uuid) is None
    assert client.delete(f"/api/v1/tasks/{task_uuid}", headers=auth_headers(owner)).status_code == 404


def test_listing_and_project_view_agree_on_revenue(client, owner, make_project, auth_headers) -> None:
    project = make_project()
    headers = auth_headers(owner)
    client.post("/api/v1/tasks", json=_payload(project, begin_date="2024-04-01T08:00:00",
                                               end_date="2024-04-01T12:00:00"), headers=headers)

    (listed,) = client.get("/api/v1/tasks/all", headers=headers).get_json()
    (live,) = client.get(f"/api/v1/projects/tasks/{project.uuid}", headers=headers).get_json()

    assert listed["revenue"] == live["revenue"] == "R$ 10,00"
    assert listed["prev_revenue"] == "R$ 40,00"


def test_list_date_and_money_filters(client, owner, viewer, make_project, auth_headers) -> None:
    project = make_project()
    headers = auth_headers(owner)
    client.post("/api/v1/tasks", json=_payload(project), headers=headers)
    client.post("/api/v1/tasks", json=_payload(project, description="Late and pricey",
                                               begin_date="2024-05-01T09:00:00",
                                               end_date="2024-05-01T10:00:00",
                                               hourly_rate="R$ 300,00", revenue="R$ 50,00"),
                headers=headers)

    def descriptions(params, user=owner):
        res = client.get("/api/v1/tasks/all", query_string=params, headers=auth_headers(user))
        return sorted(t["description"] for t in res.get_json())

    assert descriptions({"begin_date": "2024-04-15"}) == ["Late and pricey"]
    assert descriptions({"end_date": "2024-04-30"}) == ["Backend work"]
    assert descriptions({"hourly_rate_min": "R$ 100,00"}) == ["Late and pricey"]
    assert descriptions({"revenue_max": "R$ 20,00"}) == ["Backend work"]
    assert descriptions({"cost_min": "R$ 1,00"}) == []
    assert descriptions({"hourly_rate_min": "R$ 100,00"}, viewer) == ["Backend work", "Late and pricey"]


def test_update_task(client, owner, make_project, auth_headers) -> None:
    project = make_project()
    headers = auth_headers(owner)
    client.post("/api/v1/tasks", json=_payload(project), headers=headers)
    task = Task.query.one()

    res = client.put("/api/v1/tasks", json=_payload(project, uuid=task.uuid, description="Reworked",
                                                    hourly_rate="R$ 120,00"), headers=headers)

    assert res.status_code == 200
    assert res.get_json()["task"]["hourly_rate"] == "R$ 120,00"
    db.session.refresh(task)
    assert task.description == "Reworked"
    assert task.hourly_rate == Decimal("120.00")


def test_update_task_errors(client, owner, viewer, make_project, auth_headers) -> None:
    project = make_project()
    headers = auth_headers(owner)
    client.post("/api/v1/tasks", json=_payload(project), headers=headers)
    task = Task.query.one()
    db.session.add(Activity(task_uuid=task.uuid, user_uuid=owner.uuid, hourly_rate=Decimal("60"),
                            begin_date=datetime(2024, 4, 1, 9), end_date=datetime(2024, 4, 1, 10)))
    planned = Task(type="Expense", description="Planned", begin_date=datetime(2024, 1, 1),
                   end_date=datetime(2024, 1, 1), cost=Decimal("1"), revenue=Decimal("0"),
                   status_uuid=project.status_uuid, project_uuid=project.uuid,
                   budget_uuid=project.budget_uuid)
    db.session.add(planned)
    db.session.commit()

    def put(body, user=owner):
        return client.put("/api/v1/tasks", json=body, headers=auth_headers(user)).status_code

    assert put(_payload(project, uuid=task.uuid), viewer) == 403
    assert put(_payload(project, uuid="nope")) == 404
    assert put(_payload(project)) == 422
    assert put(_payload(project, uuid=task.uuid, type="Expense", cost="R$ 5,00")) == 422
    assert put(_payload(project, uuid=task.uuid, end_date="2024-03-01")) == 422
    assert put(_payload(project, uuid=planned.uuid, type="Expense", cost="R$ 5,00")) == 422
    db.session.refresh(task)
    assert task.type == "Activity"
    assert task.description == "Backend work"
