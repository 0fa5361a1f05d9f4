"""Post use cases: create with media, take down, like."""

import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from app.core.errors import AppError, RepositoryError
from app.core.security import new_id
from app.models import Post, PostMedia, PostStatus
from app.repositories.post import PostRepository
from app.schemas.post import LikeData, LikeItem, PostCreateRequest, PostData, TakeDownData, TakeDownItem
from app.schemas.response import ApiResponse
from app.services.image_host import CloudinaryClient
from app.services.media import check_images, upload_images
from app.services.responses import domain_failed, internal_failed, validation_failed

logger = logging.getLogger(__name__)

CREATE_FAILED = "fail to create new post"


class PostService:
    def __init__(
        self,
        repository: PostRepository,
        image_host: CloudinaryClient,
        max_image_bytes: int,
    ) -> None:
        self.repository = repository
        self.image_host = image_host
        self.max_image_bytes = max_image_bytes

    def create(self, user_id: str, payload: Mapping[str, Any]) -> ApiResponse[PostData]:
        """
        Create a post with 1 to 10 images.

        Every file is sniffed and decoded, and the subforum looked up, before the
        first upload, so a bad file or an unknown subforum rejects the whole request
        without touching the image host. The post
        row and its media rows are written in one transaction.
        """
        try:
            request = PostCreateRequest.model_validate(payload)
        except ValidationError as e:
            return validation_failed(e)

        now = datetime.now(UTC)
        post_id = new_id()
        try:
            check_images(request.media, self.max_image_bytes, CREATE_FAILED, "media")
            self.repository.require_subforum(request.subforum_id)
            urls = upload_images(request.media, self.image_host, CREATE_FAILED, "media")
            item = self.repository.create(
                Post(
                    id=post_id,
                    caption=request.caption,
                    user_id=user_id,
                    subforum_id=request.subforum_id,
                    status=PostStatus.PUBLISHED.value,
                    created_at=now,
                ),
                [PostMedia(id=new_id(), media_url=url, created_at=now) for url in urls],
            )
        except AppError as e:
            if e.code >= 500:
                logger.error("Post media upload failed: %s", e, extra={"user_id": user_id})
            else:
                logger.info(
                    "Create post rejected",
                    extra={"user_id": user_id, "status": e.code, "reason": e.message},
                )
            return domain_failed(e)
        except RepositoryError:
            logger.exception("Create post failed", extra={"post_id": post_id, "user_id": user_id})
            return internal_failed()

        logger.info(
            "Post created",
            extra={"post_id": item.id, "subforum_id": request.subforum_id, "media_count": len(urls)},
        )
        return ApiResponse[PostData].success(201, PostData(post=item))

    def take_down(self, post_id: str) -> ApiResponse[TakeDownData]:
        updated_at = datetime.now(UTC)
        try:
            self.repository.take_down(post_id, updated_at)
        except AppError as e:
            return domain_failed(e)
        except RepositoryError:
            logger.exception("Take down post failed", extra={"post_id": post_id})
            return internal_failed()
        logger.info("Post taken down", extra={"post_id": post_id})
        return ApiResponse[TakeDownData].success(
            200,
            TakeDownData(
                post=TakeDownItem(id=post_id, status=PostStatus.TAKE_DOWN.value, updated_at=updated_at)
            ),
        )

    def like(self, post_id: str, user_id: str) -> ApiResponse[LikeData]:
        """Like a post once; 201 with the post's like count afterwards."""
        try:
            like_count = self.repository.like(post_id, user_id, datetime.now(UTC))
        except AppError as e:
            logger.info(
                "Like rejected",
                extra={"post_id": post_id, "user_id": user_id, "status": e.code, "reason": e.message},
            )
            return domain_failed(e)
        except RepositoryError:
            logger.exception("Like post failed", extra={"post_id": post_id, "user_id": user_id})
            return internal_failed()
        return ApiResponse[LikeData].success(201, LikeData(post=LikeItem(id=post_id, like_count=like_count)))
