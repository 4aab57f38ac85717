"""Schemas for the activity log listing."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class ActivityLogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int | None = None
    action: str
    entity_type: str
    entity_id: str | None = None
    summary: str = ""
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime


class ActivityLogPagination(BaseModel):
    total: int
    limit: int
    skip: int
    has_more: bool


class ActivityLogListResponse(BaseModel):
    success: bool = True
    data: list[ActivityLogOut]
    pagination: ActivityLogPagination
