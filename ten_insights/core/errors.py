"""
Custom exception hierarchy for Ten Insights.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages.

Not having enough data is never an error here: the analyzers return
explicit empty-state / locked results instead. Only boundary validation
and persistence failures raise.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class TenInsightsException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidRatingError(TenInsightsException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INVALID_RATING"

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        details: dict[str, Any] = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = repr(value)
        super().__init__(message=message, details=details)


class InvalidTimezoneError(TenInsightsException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INVALID_TIMEZONE"

    def __init__(self, name: str):
        super().__init__(
            message=f"Unknown timezone '{name}'. Use an IANA name such as 'Europe/Madrid'.",
            details={"timezone": name},
        )


class CooldownStoreError(TenInsightsException):
    """
    Reading or writing the persisted check-in cooldown failed.

    Recoverable: the caller may retry later. Readers treat it as
    "still in cooldown" so no prompt is shown twice.
    """
    http_status = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "COOLDOWN_STORE_UNAVAILABLE"
    recoverable = True

    def __init__(self, user_id: str, operation: str):
        super().__init__(
            message=f"Could not {operation} the check-in cooldown for user {user_id}.",
            details={"user_id": user_id, "operation": operation},
        )


class CheckInSessionNotFoundError(TenInsightsException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "CHECKIN_SESSION_NOT_FOUND"

    def __init__(self, session_id: str):
        super().__init__(
            message=f"Check-in session {session_id} does not exist or has ended.",
            details={"session_id": session_id},
        )


class InvalidCheckInTransitionError(TenInsightsException):
    http_status = status.HTTP_409_CONFLICT
    code = "INVALID_CHECKIN_TRANSITION"

    def __init__(self, session_id: str, step: str, action: str):
        super().__init__(
            message=f"Cannot {action} while check-in session is at step '{step}'.",
            details={"session_id": session_id, "step": step, "action": action},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def ten_insights_exception_handler(
    request: Request, exc: TenInsightsException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
