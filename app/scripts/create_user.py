"""
Create a user and optionally grant extra roles (e.g. the first moderator). Run from project root:
  python -m app.scripts.create_user FULLNAME EMAIL PASSWORD [--role ROLE ...]
Example:
  python -m app.scripts.create_user "Site Admin" admin@example.com your-secure-password \
      --role create-subforum --role delete-subforum --role take-down-post
"""
import argparse
import sys
from datetime import UTC, datetime

from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.core.errors import AppError, RepositoryError, validation_details
from app.core.security import hash_password, new_id
from app.models import ROLE_NAMES, Authentication, User
from app.repositories.auth import AuthRepository
from app.schemas.auth import RegistrationRequest, UserPublic

ROLE_IDS_BY_NAME = {name: role_id for role_id, name in ROLE_NAMES.items()}


def create_user(
    session: Session,
    fullname: str,
    email: str,
    password: str,
    role_names: list[str] | None = None,
) -> UserPublic:
    """
    Register a user through the normal registration path with role_names granted
    in the same transaction.

    Raises ValidationError for bad input, KeyError for an unknown role name and
    AppError/RepositoryError from persistence.
    """
    request = RegistrationRequest(
        fullname=fullname,
        email=email,
        password=password,
        password_confirmation=password,
    )
    extra_roles = [int(ROLE_IDS_BY_NAME[name]) for name in role_names or []]
    now = datetime.now(UTC)
    user_id = new_id()
    user = AuthRepository(session).register(
        User(
            id=user_id,
            fullname=request.fullname,
            email=str(request.email),
            password_hash=hash_password(request.password),
            created_at=now,
        ),
        Authentication(
            id=new_id(),
            refresh_token=new_id(),
            last_login=now,
            remote_ip="",
            agent="create_user",
            user_id=user_id,
        ),
        extra_roles,
    )
    return user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Code Roast user (bootstrap moderators).")
    parser.add_argument("fullname", help="Full name")
    parser.add_argument("email", help="Email address (unique)")
    parser.add_argument("password", help="Password")
    parser.add_argument(
        "--role",
        action="append",
        default=[],
        choices=sorted(ROLE_IDS_BY_NAME),
        help="Extra role to grant; repeatable. Every user gets 'member'.",
    )
    args = parser.parse_args(argv)

    from app.core.database import SessionLocal

    db = SessionLocal()
    try:
        user = create_user(db, args.fullname.strip(), args.email.strip(), args.password, args.role)
    except ValidationError as e:
        for field, message in validation_details(e).items():
            print(f"{field}: {message}", file=sys.stderr)
        return 1
    except AppError as e:
        print(e.message, file=sys.stderr)
        return 1
    except RepositoryError as e:
        print(f"Database error: {e.message}", file=sys.stderr)
        return 1
    finally:
        db.close()

    roles = ", ".join(role.name for role in user.roles)
    print(f"Created user '{user.email}' ({user.id}) with roles: {roles}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
