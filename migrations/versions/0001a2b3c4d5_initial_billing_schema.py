"""initial_billing_schema

Roles, users, reference entities, projects with their budgets, tasks with
activity/expense children, and the transaction ledger.

Revision ID: 0001a2b3c4d5
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect as sa_inspect


# revision identifiers, used by Alembic.
revision = "0001a2b3c4d5"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return (
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )


def _party_columns():
    return (
        sa.Column("uuid", sa.String(length=36), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False, server_default="Enterprise"),
        sa.Column("cpf", sa.String(length=14), nullable=True),
        sa.Column("cnpj", sa.String(length=18), nullable=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("fantasy", sa.String(length=200), nullable=True),
        sa.Column("email", sa.String(length=200), nullable=True),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("uuid"),
    )


def upgrade():
    bind = op.get_bind()
    existing_tables = set(sa_inspect(bind).get_table_names())

    if "roles" not in existing_tables:
        op.create_table(
            "roles",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("uuid", sa.String(length=36), nullable=False),
            sa.Column("type", sa.String(length=100), nullable=False),
            sa.Column("admin", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("project", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("personal", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("financial", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("created_at", sa.DateTime(), nullable=True),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("uuid"),
        )

    if "users" not in existing_tables:
        op.create_table(
            "users",
            sa.Column("uuid", sa.String(length=36), nullable=False),
            sa.Column("cpf", sa.String(length=14), nullable=False),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("username", sa.String(length=100), nullable=False),
            sa.Column("email", sa.String(length=200), nullable=False),
            sa.Column("password_hash", sa.String(length=256), nullable=False),
            sa.Column("phone", sa.String(length=20), nullable=True),
            sa.Column("photo", sa.String(length=500), nullable=True),
            sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column("hourly_rate", sa.Numeric(12, 2), nullable=True),
            sa.Column("role_uuid", sa.String(length=36), nullable=False),
            *_timestamps(),
            sa.ForeignKeyConstraint(["role_uuid"], ["roles.uuid"], ondelete="RESTRICT"),
            sa.PrimaryKeyConstraint("uuid"),
            sa.UniqueConstraint("cpf"),
            sa.UniqueConstraint("email"),
        )
        op.create_index("ix_users_role_uuid", "users", ["role_uuid"])

    if "clients" not in existing_tables:
        op.create_table("clients", *_party_columns())
    if "suppliers" not in existing_tables:
        op.create_table("suppliers", *_party_columns())

    if "statuses" not in existing_tables:
        op.create_table(
            "statuses",
            sa.Column("uuid", sa.String(length=36), nullable=False),
            sa.Column("name", sa.String(length=100), nullable=False),
            sa.Column("description", sa.Text(), nullable=False, server_default=""),
            sa.Column("priority", sa.Integer(), nullable=False, server_default="1"),
            *_timestamps(),
            sa.PrimaryKeyConstraint("uuid"),
        )

    if "budgets" not in existing_tables:
        op.create_table(
            "budgets",
            sa.Column("uuid", sa.String(length=36), nullable=False),
            sa.Column("date", sa.DateTime(), nullable=False),
            *_timestamps(),
            sa.PrimaryKeyConstraint("uuid"),
        )

    if "projects" not in existing_tables:
        op.create_table(
            "projects",
            sa.Column("uuid", sa.String(length=36), nullable=False),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("description", sa.Text(), nullable=False, server_default=""),
            sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column("client_uuid", sa.String(length=36), nullable=False),
            sa.Column("status_uuid", sa.String(length=36), nullable=False),
            sa.Column("budget_uuid", sa.String(length=36), nullable=False),
            *_timestamps(),
            sa.ForeignKeyConstraint(["client_uuid"], ["clients.uuid"], ondelete="RESTRICT"),
            sa.ForeignKeyConstraint(["status_uuid"], ["statuses.uuid"], ondelete="RESTRICT"),
            sa.ForeignKeyConstraint(["budget_uuid"], ["budgets.uuid"]),
            sa.PrimaryKeyConstraint("uuid"),
            sa.UniqueConstraint("budget_uuid"),
        )
        op.create_index("ix_projects_client_uuid", "projects", ["client_uuid"])
        op.create_index("ix_projects_status_uuid", "projects", ["status_uuid"])

    if "tasks" not in existing_tables:
        op.create_table(
            "tasks",
            sa.Column("uuid", sa.String(length=36), nullable=False),
            sa.Column("type", sa.String(length=20), nullable=False),
            sa.Column("description", sa.Text(), nullable=False),
            sa.Column("begin_date", sa.DateTime(), nullable=False),
            sa.Column("end_date", sa.DateTime(), nullable=False),
            sa.Column("hourly_rate", sa.Numeric(12, 2), nullable=True),
            sa.Column("cost", sa.Numeric(12, 2), nullable=True),
            sa.Column("revenue", sa.Numeric(12, 2), nullable=False, server_default="0"),
            sa.Column("status_uuid", sa.String(length=36), nullable=False),
            sa.Column("user_uuid", sa.String(length=36), nullable=True),
            sa.Column("project_uuid", sa.String(length=36), nullable=False),
            sa.Column("budget_uuid", sa.String(length=36), nullable=True),
            *_timestamps(),
            sa.CheckConstraint("begin_date <= end_date", name="ck_tasks_date_range"),
            sa.ForeignKeyConstraint(["status_uuid"], ["statuses.uuid"], ondelete="RESTRICT"),
            sa.ForeignKeyConstraint(["user_uuid"], ["users.uuid"], ondelete="SET NULL"),
            sa.ForeignKeyConstraint(["project_uuid"], ["projects.uuid"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["budget_uuid"], ["budgets.uuid"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("uuid"),
        )
        op.create_index("ix_tasks_project_uuid", "tasks", ["project_uuid"])
        op.create_index("ix_tasks_budget_uuid", "tasks", ["budget_uuid"])

    if "activities" not in existing_tables:
        op.create_table(
            "activities",
            sa.Column("uuid", sa.String(length=36), nullable=False),
            sa.Column("description", sa.Text(), nullable=False, server_default=""),
            sa.Column("begin_date", sa.DateTime(), nullable=False),
            sa.Column("end_date", sa.DateTime(), nullable=False),
            sa.Column("hourly_rate", sa.Numeric(12, 2), nullable=False),
            sa.Column("task_uuid", sa.String(length=36), nullable=False),
            sa.Column("user_uuid", sa.String(length=36), nullable=False),
            *_timestamps(),
            sa.CheckConstraint("begin_date <= end_date", name="ck_activities_date_range"),
            sa.ForeignKeyConstraint(["task_uuid"], ["tasks.uuid"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["user_uuid"], ["users.uuid"], ondelete="RESTRICT"),
            sa.PrimaryKeyConstraint("uuid"),
        )
        op.create_index("ix_activities_task_uuid", "activities", ["task_uuid"])

    if "expenses" not in existing_tables:
        op.create_table(
            "expenses",
            sa.Column("uuid", sa.String(length=36), nullable=False),
            sa.Column("description", sa.Text(), nullable=False, server_default=""),
            sa.Column("cost", sa.Numeric(12, 2), nullable=False),
            sa.Column("date", sa.DateTime(), nullable=False),
            sa.Column("task_uuid", sa.String(length=36), nullable=False),
            sa.Column("supplier_uuid", sa.String(length=36), nullable=True),
            *_timestamps(),
            sa.ForeignKeyConstraint(["task_uuid"], ["tasks.uuid"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["supplier_uuid"], ["suppliers.uuid"], ondelete="SET NULL"),
            sa.PrimaryKeyConstraint("uuid"),
        )
        op.create_index("ix_expenses_task_uuid", "expenses", ["task_uuid"])

    if "transactions" not in existing_tables:
        op.create_table(
            "transactions",
            sa.Column("uuid", sa.String(length=36), nullable=False),
            sa.Column("type", sa.String(length=20), nullable=False),
            sa.Column("amount", sa.Numeric(12, 2), nullable=False),
            sa.Column("date", sa.DateTime(), nullable=False),
            sa.Column("description", sa.Text(), nullable=False, server_default=""),
            sa.Column("client_uuid", sa.String(length=36), nullable=False),
            sa.Column("project_uuid", sa.String(length=36), nullable=True),
            sa.Column("user_uuid", sa.String(length=36), nullable=False),
            *_timestamps(),
            sa.ForeignKeyConstraint(["client_uuid"], ["clients.uuid"], ondelete="RESTRICT"),
            sa.ForeignKeyConstraint(["project_uuid"], ["projects.uuid"], ondelete="SET NULL"),
            sa.ForeignKeyConstraint(["user_uuid"], ["users.uuid"], ondelete="RESTRICT"),
            sa.PrimaryKeyConstraint("uuid"),
        )
        op.create_index("ix_transactions_project_uuid", "transactions", ["project_uuid"])


def downgrade():
    bind = op.get_bind()
    existing_tables = set(sa_inspect(bind).get_table_names())

    for table in (
        "transactions", "expenses", "activities", "tasks", "projects",
        "budgets", "statuses", "suppliers", "clients", "users", "roles",
    ):
        if table in existing_tables:
            op.drop_table(table)
