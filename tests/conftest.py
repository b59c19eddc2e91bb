"""
Shared pytest fixtures for the billing backend test suite.

Provides:
    - app: Flask application (session-scoped)
    - _setup_db: Database table creation/teardown (session-scoped)
    - session: Per-test DB cleanup w/ rollback + recreate (autouse)
    - client: Flask test client (function-scoped)
    - make_role / make_user / make_client / make_status / make_project:
      ORM factories; every factory commits so request-level rollbacks
      never take fixture data with them
    - auth_headers: Bearer header for a user
    - owner / viewer: ready-made users with all / no capabilities
"""

from datetime import datetime

import pytest

from billing import create_app
from billing.models import db as _db
from billing.models.auth import Role, User
from billing.models.client import Client
from billing.models.project import Budget, Project
from billing.models.status import Status
from billing.services.jwt_service import generate_access_token


# ── App & DB fixtures ────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def app():
    """Create the Flask application once per test session."""
    return create_app("testing")


@pytest.fixture(scope="session")
def _setup_db(app):
    """Create all tables at session start, drop at end."""
    with app.app_context():
        _db.create_all()
    yield
    with app.app_context():
        _db.drop_all()


@pytest.fixture(autouse=True)
def session(app, _setup_db):
    """Per-test: open app context, rollback after test, recreate tables."""
    with app.app_context():
        yield
        _db.session.rollback()
        _db.drop_all()
        _db.create_all()


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


# ── ORM factories ────────────────────────────────────────────────────────


@pytest.fixture()
def make_role():
    def _make(role_type="Analyst", *, role_id=None, admin=False, project=False,
              personal=False, financial=False) -> Role:
        role = Role(type=role_type, admin=admin, project=project,
                    personal=personal, financial=financial)
        if role_id is not None:
            role.id = role_id
        _db.session.add(role)
        _db.session.commit()
        return role
    return _make


@pytest.fixture()
def make_user():
    counter = {"n": 0}

    def _make(role, *, name="Test User", email=None, password_hash="!",
              hourly_rate=None, active=True, phone="(11) 99999-0000") -> User:
        counter["n"] += 1
        n = counter["n"]
        user = User(
            role_uuid=role.uuid,
            cpf=f"000.000.000-{n:02d}",
            name=name,
            username=f"user{n}",
            email=email or f"user{n}@example.com",
            password_hash=password_hash,
            phone=phone,
            hourly_rate=hourly_rate,
            active=active,
        )
        _db.session.add(user)
        _db.session.commit()
        return user
    return _make


@pytest.fixture()
def make_client():
    def _make(name="ACME Ltda") -> Client:
        c = Client(name=name, type="Enterprise", cnpj="00.000.000/0001-00")
        _db.session.add(c)
        _db.session.commit()
        return c
    return _make


@pytest.fixture()
def make_status():
    def _make(name="Open", priority=1) -> Status:
        s = Status(name=name, description=f"{name} status", priority=priority)
        _db.session.add(s)
        _db.session.commit()
        return s
    return _make


@pytest.fixture()
def make_project(make_client, make_status):
    def _make(name="Website", *, client_entity=None, status=None,
              budget_date=datetime(2024, 1, 1, 8, 0)) -> Project:
        project = Project(
            name=name,
            description=f"{name} project",
            client=client_entity or make_client(),
            status=status or make_status(),
            budget=Budget(date=budget_date),
        )
        _db.session.add(project)
        _db.session.commit()
        return project
    return _make


# ── Auth fixtures ────────────────────────────────────────────────────────


@pytest.fixture()
def auth_headers():
    def _headers(user) -> dict:
        return {"Authorization": f"Bearer {generate_access_token(user.uuid, user.role_uuid)}"}
    return _headers


@pytest.fixture()
def owner(make_role, make_user):
    """User on role id 0 with every capability."""
    role = make_role("owner", role_id=0, admin=True, project=True, personal=True, financial=True)
    return make_user(role, name="Olivia Owner", hourly_rate=150)


@pytest.fixture()
def viewer(make_role, make_user):
    """User whose role holds no capability at all."""
    role = make_role("Viewer")
    return make_user(role, name="Victor Viewer", hourly_rate=40)
