"""Login: validate credentials, stamp last login and issue the session token."""

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from app.core.exceptions import AuthenticationError
from app.core.security import create_access_token, verify_dummy_password, verify_password
from app.core.validation import require_email, require_password
from app.models import User
from app.models.base import utcnow
from app.services.users import find_user_by_email

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
ACCOUNT_INACTIVE = "Account is inactive"


@dataclass(frozen=True)
class LoginResult:
    user: User
    token: str


def authenticate(db: Session, email: str | None, password: str | None) -> User:
    """
    Return the user for valid credentials.

    Raises ValidationError for a missing/malformed email or missing password and
    AuthenticationError for an unknown email, wrong password or inactive account.
    bcrypt runs even for unknown emails so response time does not reveal which
    emails are registered.
    """
    email = require_email(email)
    password = require_password(password)

    user = find_user_by_email(db, email)
    if user is None:
        verify_dummy_password(password)
        raise AuthenticationError(INVALID_CREDENTIALS)
    if not verify_password(password, user.password_hash):
        raise AuthenticationError(INVALID_CREDENTIALS)
    if not user.is_active:
        raise AuthenticationError(ACCOUNT_INACTIVE)
    return user


def login(db: Session, email: str | None, password: str | None) -> LoginResult:
    """Authenticate, record last_login_at and issue a token."""
    user = authenticate(db, email, password)
    user.last_login_at = utcnow()
    db.commit()
    db.refresh(user)
    token = create_access_token(user)
    logger.info("User id=%s logged in", user.id)
    return LoginResult(user=user, token=token)
