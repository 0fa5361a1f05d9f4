"""Helpers shared by v1 handlers: envelope rendering, client metadata, image host dependency."""

import logging
from typing import Any

from fastapi import Request, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.core.config import get_settings
from app.core.errors import GENERIC_ERROR
from app.schemas.response import ApiResponse
from app.services.image_host import CloudinaryClient

logger = logging.getLogger(__name__)


def client_ip(request: Request) -> str:
    return request.client.host if request.client else ""


def user_agent(request: Request) -> str:
    return request.headers.get("user-agent", "")


def request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "") or request.headers.get("x-request-id", "")


def render(request: Request, response: BaseModel) -> JSONResponse:
    """
    Log the outcome and serialise a prepared envelope with its own status code.

    Falls back to a generic 500 envelope when the payload cannot be serialised.
    """
    code = getattr(response, "code", 500)
    log_extra = {
        "status": code,
        "request_id": request_id(request),
        "method": request.method,
        "path": request.url.path,
        "user_agent": user_agent(request),
        "ip": client_ip(request),
    }
    try:
        content = response.model_dump(mode="json", exclude_none=True)
    except (ValueError, TypeError):
        logger.exception("Response serialisation failed", extra=log_extra)
        fallback = ApiResponse.fail(500, GENERIC_ERROR)
        return JSONResponse(status_code=500, content=fallback.model_dump(mode="json", exclude_none=True))

    if code >= 500:
        logger.error("Request failed", extra=log_extra)
    elif code >= 400:
        logger.info("Request rejected", extra=log_extra)
    else:
        logger.info("Request succeeded", extra=log_extra)
    return JSONResponse(status_code=code, content=content)


def read_upload(upload: UploadFile | None, max_bytes: int) -> dict[str, Any] | None:
    """
    Read an uploaded file into a MediaFile-shaped dict, or None when absent.

    At most max_bytes + 1 bytes are read so oversized files are detectable without
    buffering the whole upload.
    """
    if upload is None:
        return None
    return {"filename": upload.filename or "", "content": upload.file.read(max_bytes + 1)}


def get_image_host() -> CloudinaryClient:
    """Dependency: image host client built from the current settings."""
    return CloudinaryClient.from_settings(get_settings())
