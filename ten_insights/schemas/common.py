"""
Error envelope models, used to document the `{code, message, details}`
bodies written by the handlers in core/errors.py.
"""
from typing import Any, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    code: str
    message: str
    details: Optional[dict[str, Any]] = None


class FieldError(BaseModel):
    """One entry of `details.errors` on a 422."""
    field: str
    message: str
    type: str


class ValidationErrorDetails(BaseModel):
    errors: list[FieldError]


class ValidationErrorResponse(ErrorResponse):
    details: ValidationErrorDetails


# Shared `responses=` entries for route decorators
SESSION_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Session ended or never existed."}}
INVALID_TIMEZONE = {422: {"model": ErrorResponse, "description": "Unknown `tz` zone name or bad query parameter."}}
