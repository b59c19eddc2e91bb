"""
Tests: role blueprint - listing, admin-gated CRUD and the owner-role guard.
"""

from billing.models.auth import Role
from billing.services.role_service import seed_owner_role


def test_list_all_and_this(client, owner, viewer, auth_headers) -> None:
    res = client.get("/api/v1/roles/all", headers=auth_headers(viewer))
    assert res.status_code == 200
    assert [r["type"] for r in res.get_json()] == ["owner", "Viewer"]

    res = client.get("/api/v1/roles/this", headers=auth_headers(viewer))
    assert [r["uuid"] for r in res.get_json()] == [viewer.role_uuid]


def test_list_filters_by_type_and_capability(client, owner, make_role, auth_headers) -> None:
    make_role("Finance", financial=True)
    make_role("PM", project=True)

    res = client.get("/api/v1/roles/all?auth=financial", headers=auth_headers(owner))
    assert [r["type"] for r in res.get_json()] == ["owner", "Finance"]

    res = client.get("/api/v1/roles/all?type=PM,Finance", headers=auth_headers(owner))
    assert {r["type"] for r in res.get_json()} == {"PM", "Finance"}


def test_create_role_requires_admin(client, viewer, auth_headers) -> None:
    res = client.post("/api/v1/roles", json={"type": "Intern"}, headers=auth_headers(viewer))
    assert res.status_code == 403
    assert Role.query.filter_by(type="Intern").first() is None


def test_create_and_update_role(client, owner, auth_headers) -> None:
    res = client.post("/api/v1/roles", json={"type": "Intern", "project": True},
                      headers=auth_headers(owner))
    assert res.status_code == 201
    created = res.get_json()["role"]
    assert created["project"] is True
    assert created["financial"] is False

    res = client.put("/api/v1/roles", json={"uuid": created["uuid"], "type": "Junior",
                                            "financial": True},
                     headers=auth_headers(owner))
    assert res.status_code == 200
    updated = res.get_json()["role"]
    assert updated["type"] == "Junior"
    assert updated["project"] is False
    assert updated["financial"] is True


def test_capability_values_must_be_booleans(client, owner, auth_headers) -> None:
    res = client.post("/api/v1/roles", json={"type": "Odd", "admin": "yes"},
                      headers=auth_headers(owner))
    assert res.status_code == 422
    assert "admin" in res.get_json()["details"]


def test_owner_role_cannot_be_updated(client, owner, auth_headers) -> None:
    res = client.put("/api/v1/roles", json={"uuid": owner.role_uuid, "type": "Hijacked"},
                     headers=auth_headers(owner))
    assert res.status_code == 403
    assert Role.query.filter_by(id=0).one().type == "owner"


def test_owner_role_cannot_be_deleted(client, owner, auth_headers) -> None:
    res = client.delete(f"/api/v1/roles/{owner.role_uuid}", headers=auth_headers(owner))
    assert res.status_code == 403
    assert Role.query.filter_by(id=0).first() is not None


def test_role_in_use_cannot_be_deleted(client, owner, viewer, auth_headers) -> None:
    res = client.delete(f"/api/v1/roles/{viewer.role_uuid}", headers=auth_headers(owner))
    assert res.status_code == 422


def test_delete_unused_role(client, owner, make_role, auth_headers) -> None:
    role_uuid = make_role("Temp").uuid
    res = client.delete(f"/api/v1/roles/{role_uuid}", headers=auth_headers(owner))
    assert res.status_code == 200
    assert Role.query.filter_by(uuid=role_uuid).first() is None


def test_delete_unknown_role_is_404(client, owner, auth_headers) -> None:
    assert client.delete("/api/v1/roles/nope", headers=auth_headers(owner)).status_code == 404


def test_seed_owner_role_is_idempotent() -> None:
    first = seed_owner_role()
    second = seed_owner_role()
    assert first is second
    assert first.id == 0
    assert first.admin and first.financial
