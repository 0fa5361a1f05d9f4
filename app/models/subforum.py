"""ORM model for subforums."""

from sqlalchemy import Column, DateTime, ForeignKey, String, Text

from app.models.base import Base


class Subforum(Base):
    __tablename__ = "subforums"

    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False)
    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    icon = Column(String(2048), nullable=False)
    banner = Column(String(2048), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
