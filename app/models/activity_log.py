"""ORM model for the audit trail of user actions (logins, account changes)."""

from sqlalchemy import Column, DateTime, Integer, String, Text, func

from app.models.base import Base, utcnow


class ActivityLog(Base):
    """One row per recorded action. user_id is the actor, entity_* the target."""

    __tablename__ = "activity_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=True, index=True)
    action = Column(String(32), nullable=False, index=True)
    entity_type = Column(String(64), nullable=False, index=True)
    entity_id = Column(String(64), nullable=True)
    summary = Column(Text, nullable=False, default="")
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(String(512), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        index=True,
    )
