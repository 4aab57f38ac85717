"""
Create a user (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user EMAIL PASSWORD NAME [role]
Example:
  python -m app.scripts.create_user admin@example.com your-secure-password "Site Admin" admin
"""
import argparse
import logging
import sys

from pydantic import ValidationError as SchemaValidationError

from app.core.database import SessionLocal
from app.core.exceptions import ValidationError
from app.core.roles import Role
from app.schemas.users import UserCreate
from app.services.users import create_user

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a user account (seeds the first admin).")
    parser.add_argument("email", help="Account email")
    parser.add_argument("password", help="Password (6-128 chars)")
    parser.add_argument("name", help="Display name")
    parser.add_argument(
        "role",
        nargs="?",
        default=Role.STAFF.value,
        choices=[r.value for r in Role],
    )
    args = parser.parse_args(argv)

    try:
        payload = UserCreate(
            email=args.email,
            password=args.password,
            name=args.name,
            role=Role(args.role),
        )
    except SchemaValidationError as e:
        for err in e.errors():
            print(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        user = create_user(db, payload)
    except ValidationError as e:
        print(e.message, file=sys.stderr)
        return 1
    except Exception as e:
        logger.exception("Failed to create user: %s", e)
        return 1
    finally:
        db.close()
    print(f"Created user '{user.email}' with role '{user.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
