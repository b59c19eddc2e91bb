"""Client and Supplier reference entities.

Both are parties identified by CPF (``Person``) or CNPJ (``Enterprise``).
"""

from billing.models import db
from billing.models.base import UUIDModel

PARTY_TYPES = ("Person", "Enterprise")


class Client(UUIDModel):
    __tablename__ = "clients"

    type = db.Column(db.String(20), nullable=False, default="Enterprise", comment="Person | Enterprise")
    cpf = db.Column(db.String(14))
    cnpj = db.Column(db.String(18))
    name = db.Column(db.String(200), nullable=False)
    fantasy = db.Column(db.String(200))
    email = db.Column(db.String(200))
    phone = db.Column(db.String(20))
    active = db.Column(db.Boolean, nullable=False, default=True)

    projects = db.relationship("Project", back_populates="client", lazy="dynamic")

    def to_dict(self) -> dict:
        return {
            "uuid": self.uuid,
            "type": self.type,
            "cpf": self.cpf,
            "cnpj": self.cnpj,
            "name": self.name,
            "fantasy": self.fantasy,
            "email": self.email,
            "phone": self.phone,
            "active": self.active,
        }

    def __repr__(self) -> str:
        return f"<Client {self.uuid}: {self.name}>"


class Supplier(UUIDModel):
    """Optional source of an Expense entry."""
    __tablename__ = "suppliers"

    type = db.Column(db.String(20), nullable=False, default="Enterprise", comment="Person | Enterprise")
    cpf = db.Column(db.String(14))
    cnpj = db.Column(db.String(18))
    name = db.Column(db.String(200), nullable=False)
    fantasy = db.Column(db.String(200))
    email = db.Column(db.String(200))
    phone = db.Column(db.String(20))
    active = db.Column(db.Boolean, nullable=False, default=True)

    expenses = db.relationship("Expense", back_populates="supplier", lazy="dynamic")

    def to_dict(self) -> dict:
        return {
            "uuid": self.uuid,
            "type": self.type,
            "cpf": self.cpf,
            "cnpj": self.cnpj,
            "name": self.name,
            "fantasy": self.fantasy,
            "email": self.email,
            "phone": self.phone,
            "active": self.active,
        }

    def __repr__(self) -> str:
        return f"<Supplier {self.uuid}: {self.name}>"
