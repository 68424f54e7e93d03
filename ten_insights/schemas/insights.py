"""
Insight schemas: the stable JSON contract for the home-screen insights.

Every item has a `type` discriminator. Empty placeholders use
`type="empty_state"` and name the slot they stand in for in `slot`.

GET /analytics/{user_id}/insights → InsightListResponse
"""
from typing import Annotated, Literal, Optional, Union
from pydantic import BaseModel, Field

from ten_insights.schemas.analytics import WeekdaySummaryResponse

SlotName = Literal[
    "week_trend", "friends_activity", "ai_coach", "rating_pattern", "friendship_momentum",
]


class WeekTrendOut(BaseModel):
    type: Literal["week_trend"] = "week_trend"
    current_average: float
    previous_average: float
    change: float
    change_percent: float
    direction: Literal["improving", "declining", "steady"]
    comparison_available: bool
    best_week: bool = Field(description="Improving by 20% or more.")
    message: str


class FriendsActivityOut(BaseModel):
    type: Literal["friends_activity"] = "friends_activity"
    rated_count: int
    total_friends: int
    average_rating: Optional[float] = None
    all_rated: bool
    highlight_friend_id: Optional[str] = None
    highlight_friend_name: Optional[str] = None
    message: str


class AICoachOut(BaseModel):
    type: Literal["ai_coach"] = "ai_coach"
    focus: Literal[
        "milestone_approaching", "milestone_reached", "streak",
        "rough_week", "great_week", "encouragement",
    ]
    message: str
    streak: int
    next_milestone: Optional[int] = None
    days_to_milestone: Optional[int] = None
    recent_average: Optional[float] = None


class RatingPatternOut(BaseModel):
    type: Literal["rating_pattern"] = "rating_pattern"
    best_weekday: int
    worst_weekday: int
    difference: float
    tier: Literal["strong", "moderate", "balanced"]
    message: str
    summaries: list[WeekdaySummaryResponse]


class FriendshipMomentumOut(BaseModel):
    type: Literal["friendship_momentum"] = "friendship_momentum"
    friend_id: str
    friend_name: str
    level: Literal["new friend", "acquaintance", "friend", "close friend", "best friend"]
    score: int
    previous_score: int = Field(description="Estimate for the momentum visual only.")
    total_interactions: int
    message: str


class EmptyStateOut(BaseModel):
    type: Literal["empty_state"] = "empty_state"
    slot: SlotName
    reason: Literal["not_enough_ratings", "not_enough_weekdays", "no_friends", "no_scored_friends"]
    message: str
    progress: Optional[float] = None
    remaining: Optional[int] = None


InsightOut = Annotated[
    Union[
        WeekTrendOut,
        FriendsActivityOut,
        AICoachOut,
        RatingPatternOut,
        FriendshipMomentumOut,
        EmptyStateOut,
    ],
    Field(discriminator="type"),
]


class InsightListResponse(BaseModel):
    user_id: str
    generated_for: str = Field(description="Viewer's calendar date the insights describe.")
    items: list[InsightOut]
