"""ORM models for user accounts and their login sessions."""

from sqlalchemy import Column, DateTime, ForeignKey, String

from app.models.base import Base


class User(Base):
    """
    Registered account. Immutable after registration except for its roles.

    email is unique; the store enforces it and the repository translates the violation.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True)
    fullname = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column("password", String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)


class Authentication(Base):
    """One row per successful registration or login, holding that session's refresh token."""

    __tablename__ = "authentication"

    id = Column(String(36), primary_key=True)
    refresh_token = Column(String(36), nullable=False, unique=True, index=True)
    last_login = Column(DateTime(timezone=True), nullable=False)
    remote_ip = Column(String(64), nullable=False, default="")
    agent = Column(String(512), nullable=False, default="")
    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
