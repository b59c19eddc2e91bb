"""
Task, Activity and Expense models.

Task.type is one of TaskKind ("Activity" | "Expense"):
  Activity - planned by hourly_rate over the task interval; actual cost comes
             from child Activity rows (logged work).
  Expense  - planned by a flat cost; actual cost comes from child Expense rows.
"""

from billing.models import db
from billing.models.base import UUIDModel


class Task(UUIDModel):
    __tablename__ = "tasks"

    type = db.Column(db.String(20), nullable=False, comment="Activity | Expense")
    description = db.Column(db.Text, nullable=False)
    begin_date = db.Column(db.DateTime, nullable=False)
    end_date = db.Column(db.DateTime, nullable=False)
    hourly_rate = db.Column(db.Numeric(12, 2))
    cost = db.Column(db.Numeric(12, 2))
    revenue = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    status_uuid = db.Column(
        db.String(36), db.ForeignKey("statuses.uuid", ondelete="RESTRICT"), nullable=False
    )
    user_uuid = db.Column(db.String(36), db.ForeignKey("users.uuid", ondelete="SET NULL"))
    project_uuid = db.Column(
        db.String(36), db.ForeignKey("projects.uuid", ondelete="CASCADE"), nullable=False, index=True
    )
    budget_uuid = db.Column(
        db.String(36), db.ForeignKey("budgets.uuid", ondelete="CASCADE"), nullable=True, index=True,
        comment="NULL = live task, set = frozen budget plan",
    )

    project = db.relationship("Project", back_populates="tasks", foreign_keys=[project_uuid])
    budget = db.relationship("Budget", back_populates="tasks", foreign_keys=[budget_uuid])
    status = db.relationship("Status")
    user = db.relationship("User")
    activities = db.relationship("Activity", back_populates="task", cascade="all, delete-orphan")
    expenses = db.relationship("Expense", back_populates="task", cascade="all, delete-orphan")

    __table_args__ = (
        db.CheckConstraint("begin_date <= end_date", name="ck_tasks_date_range"),
    )

    @property
    def is_live(self) -> bool:
        return self.budget_uuid is None

    def to_dict(self) -> dict:
        return {
            "uuid": self.uuid,
            "type": self.type,
            "description": self.description,
            "begin_date": self.begin_date,
            "end_date": self.end_date,
            "hourly_rate": self.hourly_rate,
            "cost": self.cost,
            "revenue": self.revenue,
            "status_uuid": self.status_uuid,
            "user_uuid": self.user_uuid,
            "project_uuid": self.project_uuid,
            "budget_uuid": self.budget_uuid,
        }

    def __repr__(self) -> str:
        return f"<Task {self.uuid}: {self.type}>"


class Activity(UUIDModel):
    __tablename__ = "activities"

    description = db.Column(db.Text, nullable=False, default="")
    begin_date = db.Column(db.DateTime, nullable=False)
    end_date = db.Column(db.DateTime, nullable=False)
    hourly_rate = db.Column(db.Numeric(12, 2), nullable=False)
    task_uuid = db.Column(
        db.String(36), db.ForeignKey("tasks.uuid", ondelete="CASCADE"), nullable=False, index=True
    )
    user_uuid = db.Column(
        db.String(36), db.ForeignKey("users.uuid", ondelete="RESTRICT"), nullable=False
    )

    task = db.relationship("Task", back_populates="activities")
    user = db.relationship("User")

    __table_args__ = (
        db.CheckConstraint("begin_date <= end_date", name="ck_activities_date_range"),
    )

    def to_dict(self) -> dict:
        return {
            "uuid": self.uuid,
            "description": self.description,
            "begin_date": self.begin_date,
            "end_date": self.end_date,
            "hourly_rate": self.hourly_rate,
            "task_uuid": self.task_uuid,
            "user_uuid": self.user_uuid,
            "username": self.user.username if self.user else None,
        }


class Expense(UUIDModel):
    __tablename__ = "expenses"

    description = db.Column(db.Text, nullable=False, default="")
    cost = db.Column(db.Numeric(12, 2), nullable=False)
    date = db.Column(db.DateTime, nullable=False)
    task_uuid = db.Column(
        db.String(36), db.ForeignKey("tasks.uuid", ondelete="CASCADE"), nullable=False, index=True
    )
    supplier_uuid = db.Column(db.String(36), db.ForeignKey("suppliers.uuid", ondelete="SET NULL"))

    task = db.relationship("Task", back_populates="expenses")
    supplier = db.relationship("Supplier", back_populates="expenses")

    def to_dict(self) -> dict:
        return {
            "uuid": self.uuid,
            "description": self.description,
            "cost": self.cost,
            "date": self.date,
            "task_uuid": self.task_uuid,
            "supplier_uuid": self.supplier_uuid,
            "supplier_name": self.supplier.name if self.supplier else None,
        }
