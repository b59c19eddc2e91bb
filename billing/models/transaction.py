"""Ledger entries (Income, Expense, Transfer, Loan, Adjustment, Refund)."""

from billing.models import db
from billing.models.base import UUIDModel


class Transaction(UUIDModel):
    __tablename__ = "transactions"

    type = db.Column(db.String(20), nullable=False,
                     comment="Income | Expense | Transfer | Loan | Adjustment | Refund")
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    date = db.Column(db.DateTime, nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    client_uuid = db.Column(
        db.String(36), db.ForeignKey("clients.uuid", ondelete="RESTRICT"), nullable=False
    )
    project_uuid = db.Column(
        db.String(36), db.ForeignKey("projects.uuid", ondelete="SET NULL"), nullable=True, index=True
    )
    user_uuid = db.Column(
        db.String(36), db.ForeignKey("users.uuid", ondelete="RESTRICT"), nullable=False
    )

    client = db.relationship("Client")
    project = db.relationship("Project", back_populates="transactions")
    user = db.relationship("User")

    def to_dict(self) -> dict:
        return {
            "uuid": self.uuid,
            "type": self.type,
            "amount": self.amount,
            "date": self.date,
            "description": self.description,
            "client_uuid": self.client_uuid,
            "client_name": self.client.name if self.client else None,
            "project_uuid": self.project_uuid,
            "project_name": self.project.name if self.project else None,
            "user_uuid": self.user_uuid,
            "username": self.user.username if self.user else None,
        }
