"""
Project Billing Backend
Flask Application Factory.

Usage:
    from billing import create_app
    app = create_app()           # defaults to APP_ENV or "development"
    app = create_app("testing")  # explicit config
"""

import logging
import os

import click
from flask import Flask, abort, request
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from sqlalchemy import engine as _sa_engine
from sqlalchemy import event as _sa_event

from billing.config import config
from billing.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from billing.middleware.jwt_auth import init_jwt_middleware
from billing.middleware.logging_config import configure_logging
from billing.middleware.rate_limiter import init_rate_limits
from billing.middleware.security_headers import init_security_headers
from billing.middleware.timing import init_request_timing
from billing.models import db
from billing.services.project_store import init_project_store
from billing.utils.errors import E, api_error

logger = logging.getLogger(__name__)


# ── SQLite FK enforcement (global engine event) ─────────────────────────
@_sa_event.listens_for(_sa_engine.Engine, "connect")
def _enable_sqlite_fk(dbapi_conn, connection_record):
    if "sqlite" in type(dbapi_conn).__module__:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


migrate = Migrate()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],
    storage_uri=os.getenv("REDIS_URL", "memory://"),
)


def _register_error_handlers(app):
    # Domain errors can follow a flush; drop whatever the service staged.
    @app.errorhandler(ValidationError)
    def _validation_error(e):
        db.session.rollback()
        return api_error(E.VALIDATION_RULE, str(e), details=e.details)

    @app.errorhandler(NotFoundError)
    def _not_found_error(e):
        db.session.rollback()
        return api_error(E.NOT_FOUND, str(e))

    @app.errorhandler(AuthorizationError)
    def _authorization_error(e):
        db.session.rollback()
        return api_error(E.FORBIDDEN, str(e))

    @app.errorhandler(ConflictError)
    def _conflict_error(e):
        db.session.rollback()
        return api_error(E.CONFLICT_DUPLICATE, str(e))

    @app.errorhandler(404)
    def _not_found(e):
        return {"error": "Not found", "code": E.NOT_FOUND, "path": request.path}, 404

    @app.errorhandler(405)
    def _method_not_allowed(e):
        return {"error": "Method not allowed"}, 405

    @app.errorhandler(415)
    def _unsupported_media_type(e):
        return {"error": e.description}, 415

    @app.errorhandler(429)
    def _rate_limited(e):
        return {"error": "Too many requests", "retry_after": e.description}, 429

    @app.errorhandler(500)
    def _server_error(e):
        logger.error("500 error on %s %s", request.method, request.path,
                     exc_info=getattr(e, "original_exception", None) or e)
        return {"error": "Internal server error", "code": E.INTERNAL}, 500


def _register_cli(app):
    @app.cli.command("seed-owner")
    @click.option("--email", required=True, help="Login email of the owner account.")
    @click.option("--password", required=True, help="Initial password.")
    @click.option("--name", default="Owner", show_default=True)
    @click.option("--username", default="owner", show_default=True)
    @click.option("--cpf", default="000.000.000-00", show_default=True)
    def seed_owner_cmd(email, password, name, username, cpf):
        """Create role id 0 (all capabilities) and its first user."""
        from billing.services.role_service import seed_owner_role
        from billing.services.user_service import create_owner_user

        role = seed_owner_role()
        user = create_owner_user(
            role_uuid=role.uuid, email=email, password=password,
            name=name, username=username, cpf=cpf,
        )
        db.session.commit()
        click.echo(f"Owner role {role.uuid} and user {user.uuid} ready.")


def create_app(config_name=None):
    """
    Create and configure the Flask application.

    Args:
        config_name: "development", "testing" or "production".
                     Defaults to the APP_ENV env var, or "development".
    """
    if config_name is None:
        config_name = os.getenv("APP_ENV", "development")

    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config[config_name]())

    # ── Structured logging (must be first) ───────────────────────────────
    configure_logging(app)

    # ── Extensions ───────────────────────────────────────────────────────
    db_uri = app.config.get("SQLALCHEMY_DATABASE_URI") or ""
    if db_uri.startswith("sqlite:///") and ":memory:" not in db_uri:
        os.makedirs(os.path.dirname(db_uri[len("sqlite:///"):]), exist_ok=True)

    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)
    cors_origins = app.config.get("CORS_ORIGINS", "*")
    if cors_origins and cors_origins != "*":
        CORS(app, origins=[o.strip() for o in cors_origins.split(",") if o.strip()],
             supports_credentials=True)
    else:
        CORS(app)

    # ── Middleware ───────────────────────────────────────────────────────
    init_security_headers(app)
    init_request_timing(app)
    init_jwt_middleware(app)

    @app.before_request
    def _guard_content_type():
        if request.method in ("POST", "PUT", "PATCH") and request.path.startswith("/api/"):
            if request.data and "json" not in (request.content_type or ""):
                abort(415, description="Content-Type must be application/json")

    # ── Models (registered on db.metadata for Alembic) ───────────────────
    from billing.models import auth as _auth_models                # noqa: F401
    from billing.models import client as _client_models            # noqa: F401
    from billing.models import project as _project_models          # noqa: F401
    from billing.models import status as _status_models            # noqa: F401
    from billing.models import task as _task_models                # noqa: F401
    from billing.models import transaction as _transaction_models  # noqa: F401

    with app.app_context():
        db.create_all()

    # ── Persistence port for the rollup engine ───────────────────────────
    init_project_store(app)

    # ── Blueprints ───────────────────────────────────────────────────────
    from billing.blueprints.activity_bp import activity_bp
    from billing.blueprints.auth_bp import auth_bp
    from billing.blueprints.client_bp import client_bp
    from billing.blueprints.expense_bp import expense_bp
    from billing.blueprints.health_bp import health_bp
    from billing.blueprints.project_bp import project_bp
    from billing.blueprints.role_bp import role_bp
    from billing.blueprints.status_bp import status_bp
    from billing.blueprints.task_bp import task_bp
    from billing.blueprints.transaction_bp import transaction_bp
    from billing.blueprints.user_bp import user_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(role_bp)
    app.register_blueprint(user_bp)
    app.register_blueprint(client_bp)
    app.register_blueprint(status_bp)
    app.register_blueprint(project_bp)
    app.register_blueprint(task_bp)
    app.register_blueprint(activity_bp)
    app.register_blueprint(expense_bp)
    app.register_blueprint(transaction_bp)

    init_rate_limits(app, limiter)
    _register_error_handlers(app)
    _register_cli(app)

    return app
