"""Persistence for registration, login sessions and refresh-token lookup."""

from collections.abc import Callable, Iterable

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import transaction
from app.core.errors import AppError, RepositoryError
from app.models import Authentication, Role, RoleId, User, UserRole
from app.schemas.auth import RoleItem, StoredUser, UserPublic

EMAIL_TAKEN = "this email is already registered, please try signin instead"
REFRESH_TOKEN_COLLISION = (
    "fail to process your request, please insert correct information and try again"
)
INCORRECT_CREDENTIALS = "email or password is incorrect"
REFRESH_TOKEN_NOT_FOUND = "refresh token lookup not found"


def roles_for_user(session: Session, user_id: str) -> list[RoleItem]:
    """Current roles of a user, ordered by role id."""
    rows = (
        session.query(Role.id, Role.name)
        .join(UserRole, UserRole.role_id == Role.id)
        .filter(UserRole.user_id == user_id)
        .order_by(Role.id)
        .all()
    )
    return [RoleItem(id=row.id, name=row.name) for row in rows]


class AuthRepository:
    """Registration and session persistence. Each public method is one transaction."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def _insert_authentication(self, authentication: Authentication) -> None:
        self.session.add(authentication)
        try:
            self.session.flush()
        except IntegrityError as e:
            raise AppError(400, REFRESH_TOKEN_COLLISION, e) from e

    def register(
        self,
        user: User,
        authentication: Authentication,
        extra_role_ids: Iterable[int] = (),
    ) -> UserPublic:
        """
        Insert the user, its first authentication record and its roles atomically.

        Every user gets the member role; extra_role_ids are granted in the same
        transaction, so a failed grant leaves no user behind.

        Raises AppError(400) for a duplicate email or a refresh-token collision,
        RepositoryError for anything else. Nothing is persisted on failure.
        """
        try:
            with transaction(self.session):
                self.session.add(user)
                try:
                    self.session.flush()
                except IntegrityError as e:
                    raise AppError(400, EMAIL_TAKEN, e) from e

                authentication.user_id = user.id
                self._insert_authentication(authentication)

                role_ids = sorted({int(RoleId.MEMBER), *(int(r) for r in extra_role_ids)})
                self.session.add_all(UserRole(user_id=user.id, role_id=r) for r in role_ids)
                self.session.flush()
                roles = roles_for_user(self.session, user.id)
        except SQLAlchemyError as e:
            raise RepositoryError("insert new user failed", cause=e) from e

        return UserPublic(
            id=user.id,
            email=user.email,
            fullname=user.fullname,
            roles=roles,
        )

    def login_by_email(
        self,
        email: str,
        authentication: Authentication,
        password_matches: Callable[[str], bool],
    ) -> StoredUser:
        """
        Look up the user, check the password, and record a new login session atomically.

        password_matches receives the stored hash. An unknown email and a wrong
        password raise the same AppError, and neither leaves a session row behind.
        """
        try:
            with transaction(self.session):
                user = self.session.query(User).filter(User.email == email).first()
                if user is None:
                    raise AppError(400, INCORRECT_CREDENTIALS)
                if not password_matches(user.password_hash):
                    raise AppError(400, INCORRECT_CREDENTIALS)

                authentication.user_id = user.id
                self._insert_authentication(authentication)
                roles = roles_for_user(self.session, user.id)
                stored = StoredUser(
                    id=user.id,
                    email=user.email,
                    fullname=user.fullname,
                    roles=roles,
                    password_hash=user.password_hash,
                )
        except SQLAlchemyError as e:
            raise RepositoryError("login by email failed", cause=e) from e
        return stored

    def find_refresh_token(self, token: str) -> UserPublic:
        """Return the owner of a refresh token with current roles; AppError(401) if unknown."""
        try:
            with transaction(self.session):
                row = (
                    self.session.query(User.id, User.email, User.fullname)
                    .join(Authentication, Authentication.user_id == User.id)
                    .filter(Authentication.refresh_token == token)
                    .first()
                )
                if row is None:
                    raise AppError(401, REFRESH_TOKEN_NOT_FOUND)
                roles = roles_for_user(self.session, row.id)
        except SQLAlchemyError as e:
            raise RepositoryError("refresh token lookup failed", cause=e) from e
        return UserPublic(id=row.id, email=row.email, fullname=row.fullname, roles=roles)
