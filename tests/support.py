"""Shared test helpers: in-memory database, seeded roles, sample images, fake image host."""

import io
from datetime import UTC, datetime

from PIL import Image
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.security import hash_password, new_id
from app.models import ROLE_NAMES, Base, Role, RoleId, User, UserRole


def make_session_factory() -> sessionmaker:
    """Fresh SQLite in-memory database with every table created and the role catalogue seeded."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    with factory() as session:
        session.add_all([Role(id=int(role_id), name=name) for role_id, name in ROLE_NAMES.items()])
        session.commit()
    return factory


def add_user(
    session: Session,
    email: str = "jane@example.com",
    password: str = "s3cret-pass",
    fullname: str = "Jane Doe",
    role_ids: tuple[int, ...] = (RoleId.MEMBER,),
) -> User:
    user = User(
        id=new_id(),
        fullname=fullname,
        email=email,
        password_hash=hash_password(password),
        created_at=datetime.now(UTC),
    )
    session.add(user)
    session.flush()
    session.add_all([UserRole(user_id=user.id, role_id=int(role_id)) for role_id in role_ids])
    session.commit()
    return user


def image_bytes(fmt: str = "PNG", size: tuple[int, int] = (16, 16)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, (200, 30, 30)).save(buf, format=fmt)
    return buf.getvalue()


class FakeImageHost:
    """Stands in for CloudinaryClient; records uploads and returns predictable URLs."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.uploads: list[str] = []

    def upload(self, content: bytes, filename: str = "") -> str:
        if self.error is not None:
            raise self.error
        self.uploads.append(filename)
        return f"https://res.cloudinary.com/demo/image/upload/{len(self.uploads)}-{filename or 'image'}"
