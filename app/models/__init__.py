"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.post import Like, Post, PostMedia, PostStatus
from app.models.role import ROLE_NAMES, Role, RoleId, UserRole
from app.models.subforum import Subforum
from app.models.user import Authentication, User

__all__ = [
    "Authentication",
    "Base",
    "Like",
    "Post",
    "PostMedia",
    "PostStatus",
    "ROLE_NAMES",
    "Role",
    "RoleId",
    "Subforum",
    "User",
    "UserRole",
]
