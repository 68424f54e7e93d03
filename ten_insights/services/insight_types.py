"""
Insight records handed to the presentation layer.

One dataclass per insight kind, each carrying only the fields that kind
needs, plus EmptyStateInsight for slots without enough data. No colors,
icons or animations: rendering is the client's business.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import ClassVar, Optional, Union

from ten_insights.services.domain import FriendshipLevel
from ten_insights.services.trend_analyzer import TrendDirection
from ten_insights.services.weekday_patterns import PatternTier, WeekdaySummary


class InsightKind(str, enum.Enum):
    week_trend = "week_trend"
    friends_activity = "friends_activity"
    ai_coach = "ai_coach"
    rating_pattern = "rating_pattern"
    friendship_momentum = "friendship_momentum"


class EmptyReason(str, enum.Enum):
    not_enough_ratings = "not_enough_ratings"
    not_enough_weekdays = "not_enough_weekdays"
    no_friends = "no_friends"
    no_scored_friends = "no_scored_friends"


class CoachFocus(str, enum.Enum):
    milestone_approaching = "milestone_approaching"
    milestone_reached = "milestone_reached"
    streak = "streak"
    rough_week = "rough_week"
    great_week = "great_week"
    encouragement = "encouragement"


@dataclass(frozen=True)
class WeekTrendInsight:
    kind: ClassVar[InsightKind] = InsightKind.week_trend
    current_average: float
    previous_average: float
    change: float
    change_percent: float
    direction: TrendDirection
    comparison_available: bool
    best_week: bool
    message: str


@dataclass(frozen=True)
class FriendsActivityInsight:
    kind: ClassVar[InsightKind] = InsightKind.friends_activity
    rated_count: int
    total_friends: int
    average_rating: Optional[float]
    all_rated: bool
    message: str
    highlight_friend_id: Optional[str] = None
    highlight_friend_name: Optional[str] = None


@dataclass(frozen=True)
class AICoachInsight:
    kind: ClassVar[InsightKind] = InsightKind.ai_coach
    focus: CoachFocus
    message: str
    streak: int = 0
    next_milestone: Optional[int] = None
    days_to_milestone: Optional[int] = None
    recent_average: Optional[float] = None


@dataclass(frozen=True)
class RatingPatternInsight:
    kind: ClassVar[InsightKind] = InsightKind.rating_pattern
    best_weekday: int
    worst_weekday: int
    difference: float
    tier: PatternTier
    message: str
    summaries: list[WeekdaySummary] = field(default_factory=list)


@dataclass(frozen=True)
class FriendshipMomentumInsight:
    kind: ClassVar[InsightKind] = InsightKind.friendship_momentum
    friend_id: str
    friend_name: str
    level: FriendshipLevel
    score: int
    previous_score: int
    total_interactions: int
    message: str


@dataclass(frozen=True)
class EmptyStateInsight:
    kind: InsightKind
    reason: EmptyReason
    message: str
    progress: Optional[float] = None
    remaining: Optional[int] = None


Insight = Union[
    WeekTrendInsight,
    FriendsActivityInsight,
    AICoachInsight,
    RatingPatternInsight,
    FriendshipMomentumInsight,
    EmptyStateInsight,
]
