"""Persistence layer: one repository per aggregate, each public method a single transaction."""

from app.repositories.auth import AuthRepository
from app.repositories.moderator import ModeratorRepository
from app.repositories.post import PostRepository
from app.repositories.subforum import SubforumRepository

__all__ = ["AuthRepository", "ModeratorRepository", "PostRepository", "SubforumRepository"]
