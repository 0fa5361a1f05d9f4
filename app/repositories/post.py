"""Persistence for posts, post media and likes."""

from datetime import datetime

from sqlalchemy import func, insert, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import transaction
from app.core.errors import AppError, RepositoryError
from app.models import Like, Post, PostMedia, PostStatus, Subforum, User
from app.schemas.post import PostAuthor, PostItem, PostSubforum

SUBFORUM_NOT_FOUND = "subforum not found"
POST_NOT_FOUND = "post not found"
TAKE_DOWN_NOT_FOUND = "failed to take down post, post id not found"
ALREADY_LIKED = "you already liked this post"


class PostRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def _load_post(self, post_id: str) -> PostItem:
        """Read the joined post/user/subforum projection plus media URLs."""
        row = (
            self.session.query(
                Post.id,
                Post.caption,
                Post.status,
                Post.created_at,
                Post.updated_at,
                User.id.label("user_id"),
                User.fullname,
                Subforum.id.label("subforum_id"),
                Subforum.name.label("subforum_name"),
            )
            .join(User, Post.user_id == User.id)
            .join(Subforum, Post.subforum_id == Subforum.id)
            .filter(Post.id == post_id)
            .one()
        )
        media_urls = [
            url
            for (url,) in self.session.query(PostMedia.media_url)
            .filter(PostMedia.post_id == post_id)
            .order_by(PostMedia.created_at, PostMedia.id)
            .all()
        ]
        return PostItem(
            id=row.id,
            caption=row.caption,
            status=row.status,
            media=media_urls,
            created_at=row.created_at,
            updated_at=row.updated_at,
            subforum=PostSubforum(id=row.subforum_id, name=row.subforum_name),
            user=PostAuthor(id=row.user_id, fullname=row.fullname),
        )

    def require_subforum(self, subforum_id: str) -> None:
        """Raise AppError(404) unless the subforum exists."""
        try:
            found = self.session.get(Subforum, subforum_id)
        except SQLAlchemyError as e:
            raise RepositoryError(f"lookup subforum {subforum_id} failed", cause=e) from e
        if found is None:
            raise AppError(404, SUBFORUM_NOT_FOUND)

    def create(self, post: Post, media: list[PostMedia]) -> PostItem:
        """Insert the post and all its media atomically and return the denormalised post."""
        try:
            with transaction(self.session):
                if self.session.get(Subforum, post.subforum_id) is None:
                    raise AppError(404, SUBFORUM_NOT_FOUND)
                self.session.add(post)
                self.session.flush()
                for item in media:
                    item.post_id = post.id
                self.session.add_all(media)
                self.session.flush()
                created = self._load_post(post.id)
        except SQLAlchemyError as e:
            raise RepositoryError("create new post failed", cause=e) from e
        return created

    def take_down(self, post_id: str, updated_at: datetime) -> None:
        try:
            with transaction(self.session):
                result = self.session.execute(
                    update(Post)
                    .where(Post.id == post_id)
                    .values(status=PostStatus.TAKE_DOWN.value, updated_at=updated_at)
                )
                if result.rowcount == 0:
                    raise AppError(404, TAKE_DOWN_NOT_FOUND)
        except SQLAlchemyError as e:
            raise RepositoryError(f"take down post {post_id} failed", cause=e) from e

    def like(self, post_id: str, user_id: str, created_at: datetime) -> int:
        """Record a like and return the post's like count afterwards."""
        try:
            with transaction(self.session):
                if self.session.get(Post, post_id) is None:
                    raise AppError(404, POST_NOT_FOUND)
                try:
                    result = self.session.execute(
                        insert(Like.__table__).values(
                            post_id=post_id,
                            user_id=user_id,
                            created_at=created_at,
                        )
                    )
                except IntegrityError as e:
                    raise AppError(400, ALREADY_LIKED, e) from e
                if result.rowcount == 0:
                    raise RepositoryError(f"add like to post {post_id}: 0 rows affected")
                like_count = (
                    self.session.query(func.count(Like.post_id))
                    .filter(Like.post_id == post_id)
                    .scalar()
                )
        except SQLAlchemyError as e:
            raise RepositoryError(f"add like to post {post_id} failed", cause=e) from e
        return int(like_count or 0)
