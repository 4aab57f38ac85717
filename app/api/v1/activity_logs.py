"""Activity log viewer (admin only)."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import require_admin
from app.core.database import get_db
from app.models import User
from app.schemas.activity_log import (
    ActivityLogListResponse,
    ActivityLogOut,
    ActivityLogPagination,
)
from app.services.activity_log import MAX_PAGE_SIZE, ActivityLogFilter, list_activity_logs

router = APIRouter()


@router.get("", response_model=ActivityLogListResponse)
def get_activity_logs(
    _admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
    user_id: int | None = None,
    entity_type: str | None = None,
    action: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = 50,
    skip: Annotated[int, Query(ge=0)] = 0,
) -> ActivityLogListResponse:
    filters = ActivityLogFilter(
        user_id=user_id,
        entity_type=entity_type,
        action=action,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        skip=skip,
    )
    logs, total = list_activity_logs(db, filters)
    return ActivityLogListResponse(
        data=[ActivityLogOut.model_validate(entry) for entry in logs],
        pagination=ActivityLogPagination(
            total=total,
            limit=limit,
            skip=skip,
            has_more=skip + len(logs) < total,
        ),
    )
