"""
Analytics response schemas.

GET /analytics/{user_id}/days      → DayAggregateListResponse
GET /analytics/{user_id}/trend     → TrendResponse
GET /analytics/{user_id}/patterns  → PatternResponse
"""
from typing import Literal, Optional
from pydantic import BaseModel, Field


class RatingPoint(BaseModel):
    id: str
    value: int
    timestamp: str


class DayAggregateResponse(BaseModel):
    date: str
    weighted_average: Optional[float] = Field(
        description="Time-weighted average for past days, latest value for today, null if no ratings."
    )
    is_today: bool
    entries: list[RatingPoint]


class DayAggregateListResponse(BaseModel):
    timezone: str
    days: list[DayAggregateResponse] = Field(description="One per calendar day, oldest first.")


class TrendResponse(BaseModel):
    status: Literal["ok", "insufficient_data"]
    rating_count: int
    message: str
    current_average: Optional[float] = None
    previous_average: Optional[float] = None
    change: Optional[float] = None
    change_percent: Optional[float] = None
    direction: Optional[Literal["improving", "declining", "steady"]] = None
    comparison_available: Optional[bool] = None
    best_week: Optional[bool] = None
    remaining: Optional[int] = Field(
        default=None, description="Ratings still needed (insufficient_data only)."
    )


class WeekdaySummaryResponse(BaseModel):
    weekday: int = Field(description="1 = Sunday … 7 = Saturday.")
    name: str
    average: float
    sample_count: int
    eligible: bool = Field(description="False for single-sample weekdays (shown, not compared).")


class PatternResponse(BaseModel):
    status: Literal["unlocked", "locked"]
    rating_count: int
    message: str
    summaries: list[WeekdaySummaryResponse]
    progress: Optional[float] = Field(default=None, description="count / 10 while locked.")
    lock_reason: Optional[Literal["not_enough_ratings", "not_enough_weekdays"]] = None
    best_weekday: Optional[int] = None
    worst_weekday: Optional[int] = None
    difference: Optional[float] = None
    tier: Optional[Literal["strong", "moderate", "balanced"]] = None
