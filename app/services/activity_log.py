"""Activity log: record user actions and list them for the admin viewer."""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models import ActivityLog

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 500


class LogAction(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    LOGIN = "login"
    LOGOUT = "logout"


def log_activity(
    db: Session,
    user_id: int | None,
    action: LogAction | str,
    entity_type: str,
    entity_id: int | str | None = None,
    summary: str = "",
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> ActivityLog | None:
    """
    Persist one activity record and commit it.

    A failed write is logged and rolled back but never raised: the action being
    recorded has already happened and must not fail because of its audit entry.
    """
    entry = ActivityLog(
        user_id=user_id,
        action=action.value if isinstance(action, LogAction) else action,
        entity_type=entity_type,
        entity_id=None if entity_id is None else str(entity_id),
        summary=summary,
        ip_address=ip_address,
        user_agent=(user_agent or "")[:512] or None,
    )
    try:
        db.add(entry)
        db.commit()
    except SQLAlchemyError:
        logger.exception(
            "Failed to record activity action=%s entity_type=%s entity_id=%s",
            entry.action,
            entity_type,
            entity_id,
        )
        db.rollback()
        return None
    return entry


@dataclass(frozen=True)
class ActivityLogFilter:
    user_id: int | None = None
    entity_type: str | None = None
    action: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    limit: int = 50
    skip: int = 0


def list_activity_logs(db: Session, filters: ActivityLogFilter) -> tuple[list[ActivityLog], int]:
    """Return (page of logs newest first, total matching)."""
    query = db.query(ActivityLog)
    if filters.user_id is not None:
        query = query.filter(ActivityLog.user_id == filters.user_id)
    if filters.entity_type:
        query = query.filter(ActivityLog.entity_type == filters.entity_type)
    if filters.action:
        query = query.filter(ActivityLog.action == filters.action)
    if filters.start_date is not None:
        query = query.filter(ActivityLog.created_at >= filters.start_date)
    if filters.end_date is not None:
        query = query.filter(ActivityLog.created_at <= filters.end_date)

    total = query.count()
    limit = max(1, min(filters.limit, MAX_PAGE_SIZE))
    logs = (
        query.order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
        .offset(max(filters.skip, 0))
        .limit(limit)
        .all()
    )
    return logs, total
