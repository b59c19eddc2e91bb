"""
Auth Models - roles (capability bundles) and users.

A role is a named bundle of four capabilities:
  admin      - system configuration (role management)
  project    - create/edit projects, budgets and tasks
  personal   - see personal data (cpf, name, phone) of other users
  financial  - see and edit monetary data

Role id 0 is the owner role; it can never be edited or deleted.
"""

from billing.models import db
from billing.models.base import UUIDModel, iso, new_uuid, utcnow

OWNER_ROLE_ID = 0


# ═══════════════════════════════════════════════════════════════
# 1. ROLES
# ═══════════════════════════════════════════════════════════════
class Role(db.Model):
    __tablename__ = "roles"

    id = db.Column(db.Integer, primary_key=True)
    uuid = db.Column(db.String(36), unique=True, nullable=False, default=new_uuid)
    type = db.Column(db.String(100), nullable=False)  # job title shown in the UI
    admin = db.Column(db.Boolean, nullable=False, default=False)
    project = db.Column(db.Boolean, nullable=False, default=False)
    personal = db.Column(db.Boolean, nullable=False, default=False)
    financial = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    users = db.relationship("User", back_populates="role", lazy="dynamic")

    @property
    def is_owner(self) -> bool:
        return self.id == OWNER_ROLE_ID

    def to_dict(self):
        return {
            "id": self.id,
            "uuid": self.uuid,
            "type": self.type,
            "admin": self.admin,
            "project": self.project,
            "personal": self.personal,
            "financial": self.financial,
        }

    def __repr__(self) -> str:
        return f"<Role {self.id}: {self.type}>"


# ═══════════════════════════════════════════════════════════════
# 2. USERS
# ═══════════════════════════════════════════════════════════════
class User(UUIDModel):
    __tablename__ = "users"

    cpf = db.Column(db.String(14), unique=True, nullable=False)
    name = db.Column(db.String(200), nullable=False)
    username = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(200), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    phone = db.Column(db.String(20))
    photo = db.Column(db.String(500))
    active = db.Column(db.Boolean, nullable=False, default=True)
    hourly_rate = db.Column(db.Numeric(12, 2))
    role_uuid = db.Column(
        db.String(36), db.ForeignKey("roles.uuid", ondelete="RESTRICT"), nullable=False, index=True
    )

    role = db.relationship("Role", back_populates="users")

    def to_dict(self):
        """All user fields; callers pass the result through the user redactor."""
        return {
            "uuid": self.uuid,
            "photo": self.photo,
            "cpf": self.cpf,
            "name": self.name,
            "username": self.username,
            "email": self.email,
            "phone": self.phone,
            "active": self.active,
            "hourly_rate": self.hourly_rate,
            "role_uuid": self.role_uuid,
            "type": self.role.type if self.role else None,
            "created_at": iso(self.created_at),
        }

    def __repr__(self) -> str:
        return f"<User {self.email}>"
