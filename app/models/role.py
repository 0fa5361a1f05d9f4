"""Fixed role catalogue and the user/role join table."""

from enum import IntEnum

from sqlalchemy import Column, ForeignKey, Integer, String

from app.models.base import Base


class RoleId(IntEnum):
    """Role primary keys as seeded by the initial migration."""

    CREATE_SUBFORUM = 1
    UPDATE_SUBFORUM = 2
    DELETE_SUBFORUM = 3
    MEMBER = 4
    DELETE_POST = 5
    APPROVE_POST = 6
    TAKE_DOWN_POST = 7


ROLE_NAMES: dict[RoleId, str] = {
    RoleId.CREATE_SUBFORUM: "create-subforum",
    RoleId.UPDATE_SUBFORUM: "update-subforum",
    RoleId.DELETE_SUBFORUM: "delete-subforum",
    RoleId.MEMBER: "member",
    RoleId.DELETE_POST: "delete-post",
    RoleId.APPROVE_POST: "approve-post",
    RoleId.TAKE_DOWN_POST: "take-down-post",
}


class Role(Base):
    """Named permission grant. Rows are static reference data."""

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(64), nullable=False, unique=True)


class UserRole(Base):
    """Role assigned to a user; the composite key forbids assigning the same role twice."""

    __tablename__ = "user_roles"

    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    role_id = Column(
        Integer,
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
    )
