"""Upload images to Cloudinary through its SDK and return their public URLs."""

from __future__ import annotations

import io
import logging
import time
from typing import TYPE_CHECKING

import cloudinary.exceptions
import cloudinary.uploader

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


class ImageHostNotConfiguredError(Exception):
    """Raised when an upload is attempted but Cloudinary credentials are missing."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ImageUploadError(Exception):
    """Raised when the image host is unreachable, rejects the upload, or answers unexpectedly."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class CloudinaryClient:
    """Signed image uploads with per-call credentials; no global cloudinary.config() state."""

    def __init__(
        self,
        cloud_name: str | None,
        api_key: str | None,
        api_secret: str | None,
        timeout: float = 30.0,
        folder: str | None = None,
    ) -> None:
        self.cloud_name = (cloud_name or "").strip()
        self.api_key = (api_key or "").strip()
        self._api_secret = (api_secret or "").strip()
        self.timeout = timeout
        self.folder = folder

    @classmethod
    def from_settings(cls, settings: Settings) -> CloudinaryClient:
        return cls(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=(
                settings.CLOUDINARY_API_KEY.get_secret_value()
                if settings.CLOUDINARY_API_KEY is not None
                else None
            ),
            api_secret=(
                settings.CLOUDINARY_API_SECRET.get_secret_value()
                if settings.CLOUDINARY_API_SECRET is not None
                else None
            ),
            timeout=settings.IMAGE_UPLOAD_TIMEOUT_SEC,
            folder=settings.CLOUDINARY_FOLDER,
        )

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self._api_secret)

    def upload(self, content: bytes, filename: str = "upload") -> str:
        """Upload one image and return its secure URL. Raises ImageUploadError on failure."""
        if not self.configured:
            raise ImageHostNotConfiguredError(
                "Image hosting is not configured (CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY, "
                "CLOUDINARY_API_SECRET)."
            )
        stream = io.BytesIO(content)
        stream.name = filename or "upload"
        options = {
            "cloud_name": self.cloud_name,
            "api_key": self.api_key,
            "api_secret": self._api_secret,
            "resource_type": "image",
            "timeout": self.timeout,
        }
        if self.folder:
            options["folder"] = self.folder

        start = time.perf_counter()
        try:
            result = cloudinary.uploader.upload(stream, **options)
        except cloudinary.exceptions.Error as e:
            logger.info(
                "Image upload rejected",
                extra={
                    "upload_latency_seconds": time.perf_counter() - start,
                    "bytes": len(content),
                    "error_type": type(e).__name__,
                },
            )
            raise ImageUploadError(f"Image host rejected the upload: {e}", cause=e) from e
        elapsed = time.perf_counter() - start

        secure_url = result.get("secure_url") if isinstance(result, dict) else None
        if not secure_url:
            raise ImageUploadError("Image host response missing 'secure_url'.")

        logger.info(
            "Image upload completed",
            extra={"upload_latency_seconds": elapsed, "bytes": len(content)},
        )
        return secure_url
