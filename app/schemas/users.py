"""Pydantic schemas for user management endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.roles import Role
from app.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from app.core.validation import is_valid_email, is_valid_phone


def _check_email(v: str) -> str:
    v = v.strip().lower()
    if not is_valid_email(v):
        raise ValueError("Invalid email format")
    return v


def _check_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Name is required")
    return v


def _check_phone(v: str) -> str:
    v = v.strip()
    if v and not is_valid_phone(v):
        raise ValueError("Invalid phone number format")
    return v


class UserOut(BaseModel):
    """User as exposed to clients. password_hash is never included."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    phone: str = ""
    role: str
    is_active: bool
    last_login_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserCreate(BaseModel):
    email: str = Field(..., max_length=255)
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    name: str = Field(..., min_length=1, max_length=255)
    role: Role
    phone: str = Field(default="", max_length=32)
    is_active: bool = True

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _check_name(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        return _check_phone(v)


class UserUpdate(BaseModel):
    """Partial update; only fields that are set are applied."""

    email: str | None = Field(default=None, max_length=255)
    password: str | None = Field(
        default=None, min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN
    )
    name: str | None = Field(default=None, min_length=1, max_length=255)
    role: Role | None = None
    phone: str | None = Field(default=None, max_length=32)
    is_active: bool | None = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str | None) -> str | None:
        return None if v is None else _check_email(v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return None if v is None else _check_name(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str | None) -> str | None:
        return None if v is None else _check_phone(v)


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class UserResponse(BaseModel):
    success: bool = True
    data: UserOut


class UsersListResponse(BaseModel):
    """Response for GET /users (admin only)."""

    success: bool = True
    data: list[UserOut]
    pagination: Pagination
