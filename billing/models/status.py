"""Workflow status shared by projects and tasks."""

from billing.models import db
from billing.models.base import UUIDModel


class Status(UUIDModel):
    __tablename__ = "statuses"

    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    priority = db.Column(db.Integer, nullable=False, default=1)

    def to_dict(self) -> dict:
        return {
            "uuid": self.uuid,
            "name": self.name,
            "description": self.description,
            "priority": self.priority,
        }

    def __repr__(self) -> str:
        return f"<Status {self.name}>"
