"""Core app configuration, database and error types."""

from app.core.config import get_settings, settings
from app.core.database import get_db, transaction
from app.core.errors import AppError, RepositoryError

__all__ = ["AppError", "RepositoryError", "get_settings", "settings", "get_db", "transaction"]
