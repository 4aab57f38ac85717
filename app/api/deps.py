"""Request gatekeeper: token extraction, verification, actor re-fetch and role checks."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import AuthenticationError, AuthorizationError, InfrastructureError
from app.core.roles import Role, is_authorized
from app.core.security import InvalidToken, decode_access_token
from app.models import User
from app.services.users import find_actor_by_id

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


class GateOutcome(str, Enum):
    FORWARD = "forward"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class GateDecision:
    outcome: GateOutcome
    actor: User | None = None
    reason: str = ""


def extract_token(request: Request) -> str | None:
    """
    Token from the Authorization header (with or without a Bearer prefix),
    falling back to the session cookie.
    """
    auth_header = request.headers.get("Authorization", "").strip()
    scheme, _, credentials = auth_header.partition(" ")
    token = credentials.strip() if scheme.lower() == BEARER_SCHEME else auth_header
    if token:
        return token
    cookie = request.cookies.get(settings.AUTH_COOKIE_NAME)
    return cookie or None


def evaluate_request(
    token: str | None,
    find_actor: Callable[[int], User | None],
    required_role: Role | str | None = None,
) -> GateDecision:
    """Decide Forward / Unauthenticated / Forbidden for one request."""
    if not token:
        return GateDecision(GateOutcome.UNAUTHENTICATED, reason="No token provided")

    result = decode_access_token(token)
    if isinstance(result, InvalidToken):
        logger.debug("Token verification failed: %s", result.reason)
        return GateDecision(GateOutcome.UNAUTHENTICATED, reason="Invalid token")

    # Claims are a snapshot from login; the stored account is authoritative.
    actor = find_actor(result.claims.subject_id)
    if actor is None:
        return GateDecision(GateOutcome.UNAUTHENTICATED, reason="Invalid token")
    if not actor.is_active:
        return GateDecision(GateOutcome.UNAUTHENTICATED, reason="Account is inactive")

    if not is_authorized(actor.role, required_role):
        return GateDecision(GateOutcome.FORBIDDEN, actor=actor, reason="Insufficient permissions")
    return GateDecision(GateOutcome.FORWARD, actor=actor)


def require_role(required_role: Role | None = None) -> Callable[..., User]:
    """
    Build a dependency that admits only active users at or above required_role.
    With no role, any authenticated active user passes. The admitted user is
    returned and attached to request.state.user.
    """

    def dependency(request: Request, db: Annotated[Session, Depends(get_db)]) -> User:
        def find_actor(user_id: int) -> User | None:
            try:
                return find_actor_by_id(db, user_id)
            except SQLAlchemyError as e:
                logger.exception("Actor lookup failed for user id=%s", user_id)
                raise InfrastructureError("Actor lookup failed") from e

        decision = evaluate_request(extract_token(request), find_actor, required_role)
        if decision.outcome is GateOutcome.UNAUTHENTICATED:
            logger.info(
                "Rejected %s %s: %s", request.method, request.url.path, decision.reason
            )
            raise AuthenticationError(decision.reason)
        if decision.outcome is GateOutcome.FORBIDDEN:
            logger.info(
                "Forbidden %s %s: user id=%s role=%s required=%s",
                request.method,
                request.url.path,
                decision.actor.id,
                decision.actor.role,
                required_role.value if required_role else None,
            )
            raise AuthorizationError(decision.reason)

        request.state.user = decision.actor
        return decision.actor

    return dependency


get_current_user = require_role(None)
require_admin = require_role(Role.ADMIN)


def client_info(request: Request) -> tuple[str | None, str | None]:
    """(ip_address, user_agent) for activity records."""
    forwarded = request.headers.get("X-Forwarded-For", "")
    ip = forwarded.split(",")[0].strip() if forwarded else None
    if not ip and request.client is not None:
        ip = request.client.host
    return ip, request.headers.get("User-Agent")
