"""Post endpoints: create with media, like."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.api.v1.common import get_image_host, read_upload, render
from app.core.config import get_settings
from app.core.database import get_db
from app.repositories.post import PostRepository
from app.schemas.auth import CurrentUser
from app.services.image_host import CloudinaryClient
from app.services.post import PostService

router = APIRouter()


def get_post_service(
    db: Annotated[Session, Depends(get_db)],
    image_host: Annotated[CloudinaryClient, Depends(get_image_host)],
) -> PostService:
    return PostService(PostRepository(db), image_host, get_settings().MAX_IMAGE_BYTES)


@router.post("")
def create_post(
    request: Request,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[PostService, Depends(get_post_service)],
    caption: Annotated[str | None, Form()] = None,
    subforum_id: Annotated[str | None, Form()] = None,
    media: Annotated[list[UploadFile] | None, File()] = None,
) -> JSONResponse:
    """
    Create a post in a subforum with 1 to 10 JPEG/PNG images sent as repeated `media` parts.
    """
    payload = {
        "caption": caption,
        "subforum_id": subforum_id,
        "media": [read_upload(item, service.max_image_bytes) for item in media or []],
    }
    return render(request, service.create(current_user.id, payload))


@router.post("/{post_id}/likes")
def like_post(
    request: Request,
    post_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[PostService, Depends(get_post_service)],
) -> JSONResponse:
    return render(request, service.like(post_id, current_user.id))
