"""Uniform response envelope shared by every endpoint."""

from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ErrorBody(BaseModel):
    """Safe, user-facing error description."""

    message: str = Field(..., description="Human readable error message.")
    details: dict[str, str] | None = Field(
        default=None,
        description="Per-field validation messages, when the failure is a validation error.",
    )


class ApiResponse(BaseModel, Generic[T]):
    """{status, code, data?, error?} envelope. Serialise with exclude_none."""

    status: Literal["success", "fail"]
    code: int = Field(..., ge=100, le=599, description="HTTP status code of the response.")
    data: T | None = None
    error: ErrorBody | None = None

    @classmethod
    def success(cls, code: int, data: Any) -> "ApiResponse[Any]":
        return cls(status="success", code=code, data=data)

    @classmethod
    def fail(
        cls,
        code: int,
        message: str,
        details: dict[str, str] | None = None,
    ) -> "ApiResponse[Any]":
        return cls(status="fail", code=code, error=ErrorBody(message=message, details=details))

    @property
    def ok(self) -> bool:
        return self.status == "success"
