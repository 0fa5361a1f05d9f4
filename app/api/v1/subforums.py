"""Subforum endpoints: create (multipart), search by name, delete."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user, require_roles
from app.api.v1.common import get_image_host, read_upload, render
from app.core.config import get_settings
from app.core.database import get_db
from app.models import RoleId
from app.repositories.subforum import SubforumRepository
from app.schemas.auth import CurrentUser
from app.services.image_host import CloudinaryClient
from app.services.subforum import SubforumService

router = APIRouter()


def get_subforum_service(
    db: Annotated[Session, Depends(get_db)],
    image_host: Annotated[CloudinaryClient, Depends(get_image_host)],
) -> SubforumService:
    return SubforumService(SubforumRepository(db), image_host, get_settings().MAX_IMAGE_BYTES)


@router.post("")
def create_subforum(
    request: Request,
    current_user: Annotated[CurrentUser, Depends(require_roles(RoleId.CREATE_SUBFORUM))],
    service: Annotated[SubforumService, Depends(get_subforum_service)],
    name: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    icon: Annotated[UploadFile | None, File()] = None,
    banner: Annotated[UploadFile | None, File()] = None,
) -> JSONResponse:
    """Create a subforum from name, description and JPEG/PNG icon and banner images."""
    max_bytes = service.max_image_bytes
    payload = {
        "name": name,
        "description": description,
        "icon": read_upload(icon, max_bytes),
        "banner": read_upload(banner, max_bytes),
    }
    return render(request, service.create(current_user.id, payload))


@router.get("")
def find_subforums(
    request: Request,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[SubforumService, Depends(get_subforum_service)],
    name: Annotated[str | None, Query()] = None,
) -> JSONResponse:
    """List subforums whose name matches exactly."""
    return render(request, service.find_by_name(name))


@router.delete("/{subforum_id}")
def delete_subforum(
    request: Request,
    subforum_id: str,
    current_user: Annotated[CurrentUser, Depends(require_roles(RoleId.DELETE_SUBFORUM))],
    service: Annotated[SubforumService, Depends(get_subforum_service)],
) -> JSONResponse:
    """Delete a subforum owned by the caller."""
    return render(request, service.delete_by_id(subforum_id, current_user.id))
