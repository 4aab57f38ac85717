"""Shared helpers: reset the in-memory database and seed users."""

from app.core.database import SessionLocal, engine
from app.core.roles import Role
from app.core.security import hash_password
from app.models import Base, User

DEFAULT_PASSWORD = "correct-horse-battery"


def reset_db() -> None:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


def make_user(
    email: str,
    role: Role = Role.STAFF,
    password: str = DEFAULT_PASSWORD,
    name: str = "Test User",
    is_active: bool = True,
) -> User:
    """Insert a user and return a detached copy with its attributes loaded."""
    db = SessionLocal()
    try:
        user = User(
            email=email.lower(),
            password_hash=hash_password(password),
            name=name,
            role=role.value,
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        db.expunge(user)
        return user
    finally:
        db.close()


def load_user(user_id: int) -> User | None:
    db = SessionLocal()
    try:
        user = db.get(User, user_id)
        if user is not None:
            db.expunge(user)
        return user
    finally:
        db.close()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
