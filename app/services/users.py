"""User persistence: actor lookup for the gatekeeper and admin account management."""

import logging
import math

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, ValidationError
from app.core.security import hash_password
from app.models import User
from app.models.user import normalize_email
from app.schemas.users import UserCreate, UserUpdate

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

LIKE_ESCAPE = "\\"


def find_actor_by_id(db: Session, user_id: int) -> User | None:
    """Point lookup by primary key; None when no such user."""
    return db.get(User, user_id)


def find_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def get_user(db: Session, user_id: int) -> User:
    user = find_actor_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def escape_like(term: str) -> str:
    """Treat % and _ in user input as literal characters."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def list_users(
    db: Session,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    search: str = "",
    role: str = "",
) -> tuple[list[User], int, int, int]:
    """Return (users, total, page, limit) for one page, newest accounts first."""
    page = max(page, 1)
    limit = max(1, min(limit, MAX_PAGE_SIZE))
    query = db.query(User)
    if search:
        pattern = f"%{escape_like(search.strip())}%"
        query = query.filter(
            or_(
                User.name.ilike(pattern, escape=LIKE_ESCAPE),
                User.email.ilike(pattern, escape=LIKE_ESCAPE),
            )
        )
    if role:
        query = query.filter(User.role == role)
    total = query.count()
    users = (
        query.order_by(User.created_at.desc(), User.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return users, total, page, limit


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


def create_user(db: Session, payload: UserCreate, created_by: int | None = None) -> User:
    """Create an account. Raises ValidationError if the email is already registered."""
    if find_user_by_email(db, payload.email) is not None:
        raise ValidationError("Email already exists")
    user = User(
        email=normalize_email(payload.email),
        password_hash=hash_password(payload.password),
        name=payload.name,
        phone=payload.phone,
        role=payload.role.value,
        is_active=payload.is_active,
        created_by=created_by,
        updated_by=created_by,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        # lost a race with a concurrent create for the same email
        db.rollback()
        raise ValidationError("Email already exists") from e
    db.refresh(user)
    logger.info("Created user id=%s role=%s", user.id, user.role)
    return user


def update_user(db: Session, user_id: int, payload: UserUpdate, updated_by: int | None = None) -> User:
    """Apply the fields set on payload. A new password is re-hashed."""
    user = get_user(db, user_id)
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)

    if user_id == updated_by:
        if changes.get("is_active") is False:
            raise ValidationError("Cannot deactivate your own account")
        if "role" in changes and changes["role"].value != user.role:
            raise ValidationError("Cannot change your own role")

    new_email = changes.pop("email", None)
    if new_email is not None and new_email != user.email:
        existing = find_user_by_email(db, new_email)
        if existing is not None and existing.id != user.id:
            raise ValidationError("Email already exists")
        user.email = normalize_email(new_email)

    new_password = changes.pop("password", None)
    if new_password:
        user.password_hash = hash_password(new_password)

    if "role" in changes:
        user.role = changes.pop("role").value
    for field, value in changes.items():
        setattr(user, field, value)

    user.updated_by = updated_by
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ValidationError("Email already exists") from e
    db.refresh(user)
    return user


def deactivate_user(db: Session, user_id: int, acting_user_id: int) -> User:
    """Soft-delete: accounts are deactivated, never removed."""
    if user_id == acting_user_id:
        raise ValidationError("Cannot delete your own account")
    user = get_user(db, user_id)
    user.is_active = False
    user.updated_by = acting_user_id
    db.commit()
    db.refresh(user)
    logger.info("Deactivated user id=%s by user id=%s", user_id, acting_user_id)
    return user
