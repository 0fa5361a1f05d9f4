"""Persistence for granting and revoking user roles."""

from sqlalchemy import delete, insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import transaction
from app.core.errors import AppError, RepositoryError
from app.models import User, UserRole
from app.repositories.auth import roles_for_user
from app.schemas.auth import RoleItem

USER_NOT_FOUND = "user not found"
ROLE_ALREADY_ASSIGNED = "this user already has that role"
ROLE_NOT_ASSIGNED = (
    "remove roles failed, role not found for this user. "
    "Enter correct user and role data and try again"
)


class ModeratorRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def _require_user(self, user_id: str) -> None:
        if self.session.get(User, user_id) is None:
            raise AppError(404, USER_NOT_FOUND)

    def add_roles(self, user_id: str, role_ids: list[int]) -> list[RoleItem]:
        """
        Grant all role_ids to user_id in one multi-row insert, then return the full role set.

        A role the user already holds aborts the whole batch with AppError(400).
        """
        try:
            with transaction(self.session):
                self._require_user(user_id)
                try:
                    result = self.session.execute(
                        insert(UserRole.__table__).values(
                            [{"user_id": user_id, "role_id": role_id} for role_id in role_ids]
                        )
                    )
                except IntegrityError as e:
                    raise AppError(400, ROLE_ALREADY_ASSIGNED, e) from e
                if result.rowcount != len(role_ids):
                    raise RepositoryError(
                        f"add roles to user {user_id}: expected {len(role_ids)} rows, "
                        f"got {result.rowcount}"
                    )
                roles = roles_for_user(self.session, user_id)
        except SQLAlchemyError as e:
            raise RepositoryError(f"add roles to user {user_id} failed", cause=e) from e
        return roles

    def remove_roles(self, user_id: str, role_ids: list[int]) -> list[RoleItem]:
        """
        Revoke role_ids from user_id one delete at a time, then return the remaining roles.

        If any pair is not assigned, nothing is revoked and AppError(400) is raised.
        """
        try:
            with transaction(self.session):
                for role_id in role_ids:
                    result = self.session.execute(
                        delete(UserRole).where(
                            UserRole.user_id == user_id,
                            UserRole.role_id == role_id,
                        )
                    )
                    if result.rowcount == 0:
                        raise AppError(400, ROLE_NOT_ASSIGNED)
                roles = roles_for_user(self.session, user_id)
        except SQLAlchemyError as e:
            raise RepositoryError(f"remove roles from user {user_id} failed", cause=e) from e
        return roles
