"""Pydantic request/response schemas."""

from app.schemas.activity_log import ActivityLogListResponse, ActivityLogOut
from app.schemas.auth import LoginRequest, LoginResponse, MessageResponse
from app.schemas.health import HealthResponse
from app.schemas.users import (
    UserCreate,
    UserOut,
    UserResponse,
    UsersListResponse,
    UserUpdate,
)

__all__ = [
    "ActivityLogListResponse",
    "ActivityLogOut",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "UserCreate",
    "UserOut",
    "UserResponse",
    "UsersListResponse",
    "UserUpdate",
]
