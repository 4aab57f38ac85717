"""ORM model for application users (auth and RBAC)."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, func

from app.core.roles import Role
from app.models.base import Base, utcnow


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    role: 'staff', 'moderator' or 'admin'. Accounts are never deleted; they are
    deactivated by clearing is_active.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False, default="")
    phone = Column(String(32), nullable=False, default="")
    role = Column(String(32), nullable=False, default=Role.STAFF.value)
    is_active = Column(Boolean, nullable=False, default=True)
    last_login_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
    )
    created_by = Column(Integer, nullable=True)
    updated_by = Column(Integer, nullable=True)


def normalize_email(email: str) -> str:
    """Emails are stored and looked up lower-cased and stripped."""
    return email.strip().lower()
