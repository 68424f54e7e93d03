"""
Rating ingest schemas.

POST /ratings → RatingCreate → RatingResponse
"""
from __future__ import annotations

from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RatingCreate(BaseModel):
    """A single self-rating. Out-of-range values are rejected, not clamped."""
    user_id: Annotated[str, Field(min_length=1, max_length=64, examples=["u_123"])]
    value: Annotated[int, Field(ge=1, le=10, description="Self-rating, 1–10.", examples=[7])]
    timestamp: Optional[datetime] = Field(
        default=None,
        description="When the rating was given (ISO-8601 with offset). Defaults to now.",
        examples=["2026-02-20T21:15:00+01:00"],
    )
    note: Optional[str] = Field(default=None, max_length=280)

    @field_validator("value", mode="before")
    @classmethod
    def reject_non_integers(cls, v):
        if isinstance(v, bool) or (isinstance(v, float) and not v.is_integer()):
            raise ValueError("rating value must be a whole number")
        return v

    @field_validator("timestamp")
    @classmethod
    def require_offset(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is not None and v.tzinfo is None:
            raise ValueError("timestamp must include a UTC offset")
        return v


class RatingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    value: int
    timestamp: str
    note: Optional[str] = None
