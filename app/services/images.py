"""Image upload validation: binary signature sniffing plus a Pillow decode check."""

import io

from PIL import Image, UnidentifiedImageError

JPEG_SIGNATURE = b"\xff\xd8"
PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


class InvalidImageError(Exception):
    """Raised when uploaded bytes are not a well-formed JPEG or PNG image."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


def detect_image_format(data: bytes) -> str:
    """Return 'jpeg' or 'png' from the leading bytes; raise InvalidImageError otherwise."""
    if data.startswith(JPEG_SIGNATURE):
        return "jpeg"
    if data.startswith(PNG_SIGNATURE):
        return "png"
    raise InvalidImageError("unsupported image format")


def validate_image(data: bytes, max_bytes: int | None = None) -> str:
    """
    Check that data is a JPEG or PNG that Pillow can parse, and return its format.

    Only the header and structure are verified; pixel data is not fully decoded.
    """
    if not data:
        raise InvalidImageError("image is empty")
    if max_bytes is not None and len(data) > max_bytes:
        raise InvalidImageError(f"image is larger than {max_bytes} bytes")
    fmt = detect_image_format(data)
    try:
        with Image.open(io.BytesIO(data)) as img:
            if (img.format or "").lower() != fmt:
                raise InvalidImageError(
                    f"image content ({img.format}) does not match its signature ({fmt})"
                )
            img.verify()
    except InvalidImageError:
        raise
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as e:
        raise InvalidImageError("image could not be decoded", cause=e) from e
    return fmt
