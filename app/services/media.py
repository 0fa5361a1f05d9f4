"""Validate uploaded images and push them to the image host."""

import logging

from app.core.errors import AppError
from app.schemas.subforum import MediaFile
from app.services.image_host import CloudinaryClient, ImageHostNotConfiguredError, ImageUploadError
from app.services.images import InvalidImageError, validate_image

logger = logging.getLogger(__name__)

UPLOAD_UNAVAILABLE = "image upload is not available right now, please try again later"


def check_images(files: list[MediaFile], max_bytes: int, action: str, label: str) -> None:
    """Raise AppError(400) unless every file is a decodable JPEG or PNG within max_bytes."""
    for index, media in enumerate(files):
        try:
            validate_image(media.content, max_bytes=max_bytes)
        except InvalidImageError as e:
            logger.info(
                "Rejected upload",
                extra={"label": label, "index": index, "reason": e.message},
            )
            raise AppError(
                400,
                f"{action}, unsupported {label} file type. Only upload jpg or png file",
                e,
            ) from e


def upload_images(
    files: list[MediaFile], host: CloudinaryClient, action: str, label: str
) -> list[str]:
    """
    Upload files in order and return their URLs.

    Raises AppError with 503 when hosting is not configured and 500 when an upload fails.
    """
    urls: list[str] = []
    for media in files:
        try:
            urls.append(host.upload(media.content, media.filename))
        except ImageHostNotConfiguredError as e:
            raise AppError(503, UPLOAD_UNAVAILABLE, e) from e
        except ImageUploadError as e:
            raise AppError(500, f"{action}, failed to upload {label} file", e) from e
    return urls
