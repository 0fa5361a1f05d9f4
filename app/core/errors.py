"""Application error types and the stable, user-facing messages attached to them."""

from pydantic import ValidationError

VALIDATION_ERROR = "input validation error"
GENERIC_ERROR = "something went wrong, please try again later"


class AppError(Exception):
    """
    Domain failure with an HTTP status and a message that is safe to show the caller.

    The optional cause keeps the low-level exception for logging only.
    """

    def __init__(self, code: int, message: str, cause: Exception | None = None) -> None:
        self.code = code
        self.message = message
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class RepositoryError(Exception):
    """Raised when persistence fails for an infrastructure reason (driver, connection, commit)."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


def validation_details(exc: ValidationError) -> dict[str, str]:
    """Flatten pydantic errors into {field: message}, keeping the first message per field."""
    details: dict[str, str] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ())) or "body"
        details.setdefault(field, error.get("msg", "invalid value"))
    return details
