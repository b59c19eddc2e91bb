"""
Project and Budget models.

A project owns exactly one budget. The budget is created in the same unit of
work as the project and deleted together with it; tasks that reference the
budget form the frozen plan, tasks without a budget are the live work.
"""

from billing.models import db
from billing.models.base import UUIDModel, iso, utcnow


class Budget(UUIDModel):
    __tablename__ = "budgets"

    date = db.Column(db.DateTime, nullable=False, default=utcnow)

    tasks = db.relationship(
        "Task", back_populates="budget", cascade="all, delete-orphan",
        foreign_keys="Task.budget_uuid",
    )
    project = db.relationship("Project", back_populates="budget", uselist=False)

    def __repr__(self) -> str:
        return f"<Budget {self.uuid}>"


class Project(UUIDModel):
    __tablename__ = "projects"

    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    active = db.Column(db.Boolean, nullable=False, default=True)
    client_uuid = db.Column(
        db.String(36), db.ForeignKey("clients.uuid", ondelete="RESTRICT"), nullable=False, index=True
    )
    status_uuid = db.Column(
        db.String(36), db.ForeignKey("statuses.uuid", ondelete="RESTRICT"), nullable=False, index=True
    )
    budget_uuid = db.Column(
        db.String(36), db.ForeignKey("budgets.uuid"), nullable=False, unique=True
    )

    client = db.relationship("Client", back_populates="projects")
    status = db.relationship("Status")
    budget = db.relationship("Budget", back_populates="project")
    tasks = db.relationship(
        "Task", back_populates="project", cascade="all, delete-orphan",
        foreign_keys="Task.project_uuid",
    )
    transactions = db.relationship("Transaction", back_populates="project")

    def to_dict(self) -> dict:
        return {
            "uuid": self.uuid,
            "name": self.name,
            "description": self.description,
            "active": self.active,
            "client_uuid": self.client_uuid,
            "status_uuid": self.status_uuid,
            "budget_uuid": self.budget_uuid,
            "created_at": iso(self.created_at),
        }

    def __repr__(self) -> str:
        return f"<Project {self.uuid}: {self.name}>"
