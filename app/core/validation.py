"""Input validation helpers shared by the login flow and user management."""

import re

from app.core.exceptions import ValidationError
from app.core.security import EMAIL_MAX_LEN

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[+]?[\d\s\-()]{10,15}$")


def is_blank(value: object) -> bool:
    return value is None or str(value).strip() == ""


def is_valid_email(email: str) -> bool:
    return len(email) <= EMAIL_MAX_LEN and bool(EMAIL_PATTERN.match(email))


def is_valid_phone(phone: str) -> bool:
    return bool(PHONE_PATTERN.match(phone))


def require_email(email: str | None) -> str:
    """Return the normalized email or raise ValidationError."""
    if is_blank(email) or not is_valid_email(email.strip()):
        raise ValidationError("Valid email is required")
    return email.strip().lower()


def require_password(password: str | None) -> str:
    if is_blank(password):
        raise ValidationError("Password is required")
    return password
