"""Persistence for subforums."""

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import transaction
from app.core.errors import AppError, RepositoryError
from app.models import Subforum
from app.schemas.subforum import SubforumItem

SUBFORUM_NOT_FOUND = "subforum not found"


class SubforumRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, subforum: Subforum) -> SubforumItem:
        try:
            with transaction(self.session):
                self.session.add(subforum)
                self.session.flush()
                item = SubforumItem.model_validate(subforum)
        except SQLAlchemyError as e:
            raise RepositoryError("create new subforum failed", cause=e) from e
        return item

    def find_by_name(self, name: str) -> list[SubforumItem]:
        try:
            rows = (
                self.session.query(Subforum)
                .filter(Subforum.name == name)
                .order_by(Subforum.created_at, Subforum.id)
                .all()
            )
        except SQLAlchemyError as e:
            raise RepositoryError("retrieve subforums by name failed", cause=e) from e
        return [SubforumItem.model_validate(row) for row in rows]

    def delete_by_id(self, subforum_id: str, user_id: str) -> None:
        """Delete a subforum owned by user_id; AppError(404) when there is no such row."""
        try:
            with transaction(self.session):
                result = self.session.execute(
                    delete(Subforum).where(
                        Subforum.id == subforum_id,
                        Subforum.user_id == user_id,
                    )
                )
                if result.rowcount != 1:
                    raise AppError(404, SUBFORUM_NOT_FOUND)
        except SQLAlchemyError as e:
            raise RepositoryError(
                f"delete subforum (subforum_id: {subforum_id}, user_id: {user_id}) failed",
                cause=e,
            ) from e
