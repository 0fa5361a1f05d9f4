"""Moderator use cases: granting and revoking roles."""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from app.core.errors import AppError, RepositoryError
from app.repositories.moderator import ModeratorRepository
from app.schemas.auth import CurrentUser
from app.schemas.moderator import UpdatePermissionData, UpdateRoleRequest, UserRoles
from app.schemas.response import ApiResponse
from app.services.responses import domain_failed, internal_failed, validation_failed

logger = logging.getLogger(__name__)

FORBIDDEN = "you don't have permission to do this operation"


class ModeratorService:
    def __init__(self, repository: ModeratorRepository) -> None:
        self.repository = repository

    def _authorize(
        self, payload: Mapping[str, Any], actor: CurrentUser
    ) -> UpdateRoleRequest | ApiResponse[Any]:
        """Validate the payload and check the actor holds every role it touches."""
        try:
            request = UpdateRoleRequest.model_validate(payload)
        except ValidationError as e:
            return validation_failed(e)
        if not actor.has_roles(*request.role_id):
            logger.warning(
                "Role update forbidden",
                extra={"actor_id": actor.id, "target_user_id": request.user_id},
            )
            return ApiResponse.fail(403, FORBIDDEN)
        return request

    def add_roles(
        self, payload: Mapping[str, Any], actor: CurrentUser
    ) -> ApiResponse[UpdatePermissionData]:
        """Grant roles to a user; 201 with the user's full role set."""
        request = self._authorize(payload, actor)
        if isinstance(request, ApiResponse):
            return request
        try:
            roles = self.repository.add_roles(request.user_id, request.role_id)
        except AppError as e:
            logger.info(
                "Add roles rejected",
                extra={"target_user_id": request.user_id, "status": e.code, "reason": e.message},
            )
            return domain_failed(e)
        except RepositoryError:
            logger.exception("Add roles failed", extra={"target_user_id": request.user_id})
            return internal_failed()
        logger.info(
            "Roles granted",
            extra={
                "actor_id": actor.id,
                "target_user_id": request.user_id,
                "role_ids": request.role_id,
            },
        )
        return ApiResponse[UpdatePermissionData].success(
            201, UpdatePermissionData(user=UserRoles(id=request.user_id, roles=roles))
        )

    def remove_roles(
        self, payload: Mapping[str, Any], actor: CurrentUser
    ) -> ApiResponse[UpdatePermissionData]:
        """Revoke roles from a user; all-or-nothing. 200 with the remaining roles."""
        request = self._authorize(payload, actor)
        if isinstance(request, ApiResponse):
            return request
        try:
            roles = self.repository.remove_roles(request.user_id, request.role_id)
        except AppError as e:
            logger.info(
                "Remove roles rejected",
                extra={"target_user_id": request.user_id, "status": e.code, "reason": e.message},
            )
            return domain_failed(e)
        except RepositoryError:
            logger.exception("Remove roles failed", extra={"target_user_id": request.user_id})
            return internal_failed()
        logger.info(
            "Roles revoked",
            extra={
                "actor_id": actor.id,
                "target_user_id": request.user_id,
                "role_ids": request.role_id,
            },
        )
        return ApiResponse[UpdatePermissionData].success(
            200, UpdatePermissionData(user=UserRoles(id=request.user_id, roles=roles))
        )
