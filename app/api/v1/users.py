"""User management endpoints (admin only)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from app.api.deps import client_info, require_admin
from app.core.database import get_db
from app.models import User
from app.schemas.auth import MessageResponse
from app.schemas.users import (
    Pagination,
    UserCreate,
    UserOut,
    UserResponse,
    UsersListResponse,
    UserUpdate,
)
from app.services import users as users_service
from app.services.activity_log import LogAction, log_activity

router = APIRouter()


def _record(
    db: Session, request: Request, admin: User, action: LogAction, target: User, summary: str
) -> None:
    ip, user_agent = client_info(request)
    log_activity(
        db,
        user_id=admin.id,
        action=action,
        entity_type="user",
        entity_id=target.id,
        summary=summary,
        ip_address=ip,
        user_agent=user_agent,
    )


@router.get("", response_model=UsersListResponse)
def list_users(
    admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=users_service.MAX_PAGE_SIZE)] = users_service.DEFAULT_PAGE_SIZE,
    search: str = "",
    role: str = "",
) -> UsersListResponse:
    """List users, newest first, optionally filtered by name/email search and role."""
    users, total, page, limit = users_service.list_users(
        db, page=page, limit=limit, search=search, role=role
    )
    return UsersListResponse(
        data=[UserOut.model_validate(u) for u in users],
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            pages=users_service.page_count(total, limit),
        ),
    )


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    request: Request,
    admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    user = users_service.create_user(db, body, created_by=admin.id)
    _record(db, request, admin, LogAction.CREATE, user, f"Created user: {user.name}")
    return UserResponse(data=UserOut.model_validate(user))


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    return UserResponse(data=UserOut.model_validate(users_service.get_user(db, user_id)))


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    body: UserUpdate,
    request: Request,
    admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Partial update. Role and active-status changes take effect on the user's next request."""
    user = users_service.update_user(db, user_id, body, updated_by=admin.id)
    _record(db, request, admin, LogAction.UPDATE, user, f"Updated user: {user.name}")
    return UserResponse(data=UserOut.model_validate(user))


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    request: Request,
    admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Deactivate the account. Rows are kept so audit history stays intact."""
    user = users_service.deactivate_user(db, user_id, acting_user_id=admin.id)
    _record(db, request, admin, LogAction.DELETE, user, f"Deactivated user: {user.name}")
    return MessageResponse(message="User deactivated successfully")
