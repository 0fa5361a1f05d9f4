"""Shared builders for failure envelopes; services are the only place errors become responses."""

from typing import Any

from pydantic import ValidationError

from app.core.errors import GENERIC_ERROR, VALIDATION_ERROR, AppError, validation_details
from app.schemas.response import ApiResponse


def validation_failed(exc: ValidationError) -> ApiResponse[Any]:
    return ApiResponse.fail(400, VALIDATION_ERROR, validation_details(exc))


def domain_failed(exc: AppError) -> ApiResponse[Any]:
    return ApiResponse.fail(exc.code, exc.message)


def internal_failed(message: str = GENERIC_ERROR) -> ApiResponse[Any]:
    return ApiResponse.fail(500, message)
