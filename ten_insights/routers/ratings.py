"""
Ratings router.

POST /ratings: record one self-rating
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ten_insights.core.clock import Clock
from ten_insights.core.dependencies import get_clock, get_rating_repository
from ten_insights.schemas.common import ValidationErrorResponse
from ten_insights.schemas.ratings import RatingCreate, RatingResponse
from ten_insights.services.repositories import SqlRatingRepository, as_utc

router = APIRouter(prefix="/ratings", tags=["ratings"])


@router.post(
    "",
    response_model=RatingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a self-rating",
    responses={
        201: {"description": "Rating stored."},
        422: {"model": ValidationErrorResponse, "description": "Value outside 1–10 or malformed timestamp."},
    },
)
def create_rating(
    payload: RatingCreate,
    repo: SqlRatingRepository = Depends(get_rating_repository),
    clock: Clock = Depends(get_clock),
):
    """
    Store a rating for `user_id`. Ratings are append-only; a later rating
    on the same day does not overwrite an earlier one.
    """
    row = repo.add_rating(
        user_id=payload.user_id,
        value=payload.value,
        at=payload.timestamp or clock.now(),
        note=payload.note,
    )
    return RatingResponse(
        id=row.id,
        user_id=row.user_id,
        value=row.value,
        timestamp=as_utc(row.created_at).isoformat(),
        note=row.note,
    )
