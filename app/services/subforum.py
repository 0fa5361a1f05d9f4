"""Subforum use cases: create, search by name, delete."""

import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from app.core.errors import AppError, RepositoryError
from app.core.security import new_id
from app.models import Subforum
from app.repositories.subforum import SubforumRepository
from app.schemas.response import ApiResponse
from app.schemas.subforum import (
    SubforumCreateRequest,
    SubforumData,
    SubforumDeletedData,
    SubforumListData,
)
from app.services.image_host import CloudinaryClient
from app.services.media import check_images, upload_images
from app.services.responses import domain_failed, internal_failed, validation_failed

logger = logging.getLogger(__name__)

CREATE_FAILED = "fail to create new subforum"


class SubforumService:
    def __init__(
        self,
        repository: SubforumRepository,
        image_host: CloudinaryClient,
        max_image_bytes: int,
    ) -> None:
        self.repository = repository
        self.image_host = image_host
        self.max_image_bytes = max_image_bytes

    def create(self, user_id: str, payload: Mapping[str, Any]) -> ApiResponse[SubforumData]:
        """
        Validate name, description, icon and banner, upload both images and store the subforum.
        """
        try:
            request = SubforumCreateRequest.model_validate(payload)
        except ValidationError as e:
            return validation_failed(e)

        try:
            check_images([request.icon], self.max_image_bytes, CREATE_FAILED, "icon")
            check_images([request.banner], self.max_image_bytes, CREATE_FAILED, "banner")
            icon_url, = upload_images([request.icon], self.image_host, CREATE_FAILED, "icon")
            banner_url, = upload_images([request.banner], self.image_host, CREATE_FAILED, "banner")
            item = self.repository.create(
                Subforum(
                    id=new_id(),
                    name=request.name,
                    description=request.description,
                    user_id=user_id,
                    icon=icon_url,
                    banner=banner_url,
                    created_at=datetime.now(UTC),
                )
            )
        except AppError as e:
            if e.code >= 500:
                logger.error("Subforum media upload failed: %s", e, extra={"user_id": user_id})
            return domain_failed(e)
        except RepositoryError:
            logger.exception("Create subforum failed", extra={"user_id": user_id})
            return internal_failed()

        logger.info("Subforum created", extra={"subforum_id": item.id, "user_id": user_id})
        return ApiResponse[SubforumData].success(201, SubforumData(subforum=item))

    def find_by_name(self, name: str | None) -> ApiResponse[SubforumListData]:
        if not name or not name.strip():
            return ApiResponse.fail(400, "subforum name is required", {"name": "Field required"})
        try:
            items = self.repository.find_by_name(name.strip())
        except RepositoryError:
            logger.exception("Find subforums by name failed")
            return internal_failed()
        return ApiResponse[SubforumListData].success(200, SubforumListData(subforums=items))

    def delete_by_id(self, subforum_id: str, user_id: str) -> ApiResponse[SubforumDeletedData]:
        try:
            self.repository.delete_by_id(subforum_id, user_id)
        except AppError as e:
            return domain_failed(e)
        except RepositoryError:
            logger.exception(
                "Delete subforum failed",
                extra={"subforum_id": subforum_id, "user_id": user_id},
            )
            return internal_failed()
        logger.info("Subforum deleted", extra={"subforum_id": subforum_id, "user_id": user_id})
        return ApiResponse[SubforumDeletedData].success(200, SubforumDeletedData(id=subforum_id))
