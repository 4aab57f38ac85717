"""Login, logout and current-user endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.deps import client_info, get_current_user
from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import InfrastructureError
from app.models import User
from app.schemas.auth import LoginRequest, LoginResponse, MessageResponse
from app.schemas.users import UserOut
from app.services import auth as auth_service
from app.services.activity_log import LogAction, log_activity

logger = logging.getLogger(__name__)
router = APIRouter()


def set_auth_cookie(response: Response, token: str) -> None:
    """httpOnly session cookie whose max-age matches the token lifetime."""
    response.set_cookie(
        settings.AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.secure_cookies,
        samesite="lax",
        path="/",
        max_age=settings.jwt_expire_seconds,
    )


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    request: Request,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> LoginResponse:
    """
    Authenticate with email and password. Returns the user and a JWT, and sets
    the same JWT as an httpOnly cookie. Send it back either as that cookie or as
    Authorization: Bearer <token>.
    """
    try:
        result = auth_service.login(db, body.email, body.password)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Login failed on database access")
        raise InfrastructureError("Login database failure") from e

    ip, user_agent = client_info(request)
    log_activity(
        db,
        user_id=result.user.id,
        action=LogAction.LOGIN,
        entity_type="user",
        entity_id=result.user.id,
        summary="User login",
        ip_address=ip,
        user_agent=user_agent,
    )
    set_auth_cookie(response, result.token)
    return LoginResponse(user=UserOut.model_validate(result.user), token=result.token)


@router.post("/logout", response_model=MessageResponse)
def logout(
    request: Request,
    response: Response,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Clear the session cookie. The token itself stays valid until it expires."""
    ip, user_agent = client_info(request)
    log_activity(
        db,
        user_id=current_user.id,
        action=LogAction.LOGOUT,
        entity_type="user",
        entity_id=current_user.id,
        summary="User logout",
        ip_address=ip,
        user_agent=user_agent,
    )
    response.delete_cookie(settings.AUTH_COOKIE_NAME, path="/")
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=UserOut)
def me(current_user: Annotated[User, Depends(get_current_user)]) -> UserOut:
    return UserOut.model_validate(current_user)
