"""Password hashing and JWT creation/verification for authentication."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt

from app.core.config import settings

if TYPE_CHECKING:
    from app.models.user import User

# bcrypt only looks at the first 72 bytes of input.
BCRYPT_MAX_BYTES = 72

# Min/max lengths for input validation on login and account management.
EMAIL_MAX_LEN = 255
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128

REQUIRED_CLAIMS = ("sub", "email", "role", "iat", "exp")


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Each call uses a fresh random salt."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash. Malformed hashes verify as False."""
    if not isinstance(plain_password, str) or not isinstance(hashed, str):
        return False
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


# Unknown-email logins verify against this so their timing matches a wrong password.
_DUMMY_HASH: str = hash_password("tuition-timing-equalizer")


def verify_dummy_password(plain_password: str) -> None:
    verify_password(plain_password, _DUMMY_HASH)


@dataclass(frozen=True)
class TokenClaims:
    """Identity claims carried inside a verified session token."""

    subject_id: int
    email: str
    role: str
    issued_at: datetime
    expires_at: datetime
    name: str | None = None


@dataclass(frozen=True)
class ValidToken:
    claims: TokenClaims


@dataclass(frozen=True)
class InvalidToken:
    """Verification failed. reason is for logs only; callers treat every failure alike."""

    reason: str = "invalid"


TokenResult = ValidToken | InvalidToken


def create_access_token(user: "User", now: datetime | None = None) -> str:
    """Create a signed JWT with sub (user id), email, role, name, iat and exp."""
    issued_at = now or datetime.now(UTC)
    expire = issued_at + timedelta(days=settings.JWT_EXPIRE_DAYS)
    payload: dict[str, Any] = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role,
        "name": user.name,
        "iat": issued_at,
        "exp": expire,
    }
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.encode(
        payload,
        secret,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: Any) -> TokenResult:
    """
    Decode and validate a JWT. Never raises: any malformed, tampered or expired
    token comes back as InvalidToken.
    """
    if not isinstance(token, str) or not token:
        return InvalidToken("missing")
    secret = settings.JWT_SECRET.get_secret_value()
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": list(REQUIRED_CLAIMS)},
        )
    except jwt.ExpiredSignatureError:
        return InvalidToken("expired")
    except jwt.PyJWTError as e:
        return InvalidToken(type(e).__name__)

    try:
        claims = TokenClaims(
            subject_id=int(payload["sub"]),
            email=str(payload["email"]),
            role=str(payload["role"]),
            issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=UTC),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=UTC),
            name=payload.get("name"),
        )
    except (KeyError, TypeError, ValueError, OverflowError, OSError):
        return InvalidToken("bad-claims")

    if datetime.now(UTC) > claims.expires_at:
        return InvalidToken("expired")
    return ValidToken(claims)
