"""Moderator endpoints: grant/revoke roles and take down posts."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user, require_roles
from app.api.v1.common import render
from app.api.v1.posts import get_post_service
from app.core.database import get_db
from app.models import RoleId
from app.repositories.moderator import ModeratorRepository
from app.schemas.auth import CurrentUser
from app.services.moderator import ModeratorService
from app.services.post import PostService

router = APIRouter()


def get_moderator_service(db: Annotated[Session, Depends(get_db)]) -> ModeratorService:
    return ModeratorService(ModeratorRepository(db))


@router.post("")
def add_roles(
    request: Request,
    body: Annotated[dict[str, Any], Body()],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[ModeratorService, Depends(get_moderator_service)],
) -> JSONResponse:
    """
    Grant roles: {"user_id": ..., "role_id": [...]}.
    The caller must already hold every role being granted.
    """
    return render(request, service.add_roles(body, current_user))


@router.delete("")
def remove_roles(
    request: Request,
    body: Annotated[dict[str, Any], Body()],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[ModeratorService, Depends(get_moderator_service)],
) -> JSONResponse:
    """Revoke roles; all of them or none."""
    return render(request, service.remove_roles(body, current_user))


@router.put("/posts/{post_id}/status")
def take_down_post(
    request: Request,
    post_id: str,
    _moderator: Annotated[CurrentUser, Depends(require_roles(RoleId.TAKE_DOWN_POST))],
    service: Annotated[PostService, Depends(get_post_service)],
) -> JSONResponse:
    return render(request, service.take_down(post_id))
