"""ORM models for posts, their media attachments and likes."""

from enum import StrEnum

from sqlalchemy import Column, DateTime, ForeignKey, String, Text

from app.models.base import Base


class PostStatus(StrEnum):
    PUBLISHED = "published"
    PENDING = "pending"
    TAKE_DOWN = "take_down"


class Post(Base):
    __tablename__ = "posts"

    id = Column(String(36), primary_key=True)
    caption = Column(Text, nullable=False)
    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    subforum_id = Column(
        String(36),
        ForeignKey("subforums.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status = Column(
        String(32),
        nullable=False,
        default=PostStatus.PUBLISHED.value,
        server_default=PostStatus.PUBLISHED.value,
    )
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)


class PostMedia(Base):
    __tablename__ = "post_media"

    id = Column(String(36), primary_key=True)
    media_url = Column(String(2048), nullable=False)
    post_id = Column(
        String(36),
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), nullable=False)


class Like(Base):
    """A user's like on a post. The composite key allows one like per user and post."""

    __tablename__ = "likes"

    post_id = Column(
        String(36),
        ForeignKey("posts.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    created_at = Column(DateTime(timezone=True), nullable=False)
