"""
Analytics router: heatmap, trend, weekday patterns and insights.

GET /analytics/{user_id}/days: per-day weighted averages (heatmap)
GET /analytics/{user_id}/trend: this week vs last week
GET /analytics/{user_id}/patterns: best / worst weekday
GET /analytics/{user_id}/insights: the five home-screen insight slots

All four accept `?tz=<IANA zone>` to pin the viewer's calendar.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from ten_insights.core.config import settings
from ten_insights.core.dependencies import get_analytics_service
from ten_insights.schemas.analytics import (
    DayAggregateListResponse,
    DayAggregateResponse,
    PatternResponse,
    RatingPoint,
    TrendResponse,
    WeekdaySummaryResponse,
)
from ten_insights.schemas.common import INVALID_TIMEZONE
from ten_insights.schemas.insights import (
    AICoachOut,
    EmptyStateOut,
    FriendsActivityOut,
    FriendshipMomentumOut,
    InsightListResponse,
    InsightOut,
    RatingPatternOut,
    WeekTrendOut,
)
from ten_insights.services.analytics import AnalyticsService
from ten_insights.services.daily_aggregator import DayAggregate
from ten_insights.services.insight_types import (
    AICoachInsight,
    EmptyStateInsight,
    FriendsActivityInsight,
    FriendshipMomentumInsight,
    Insight,
    RatingPatternInsight,
    WeekTrendInsight,
)
from ten_insights.services.trend_analyzer import (
    InsufficientTrendData,
    insufficient_trend_message,
    trend_message,
)
from ten_insights.services.weekday_patterns import (
    LockedPattern,
    WeekdaySummary,
    locked_pattern_message,
    pattern_message,
)

router = APIRouter(prefix="/analytics", tags=["analytics"], responses=INVALID_TIMEZONE)


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _day_to_response(d: DayAggregate) -> DayAggregateResponse:
    return DayAggregateResponse(
        date=str(d.day),
        weighted_average=d.weighted_average,
        is_today=d.is_today,
        entries=[
            RatingPoint(id=e.id, value=e.value, timestamp=e.timestamp.isoformat())
            for e in d.entries
        ],
    )


def _summary_to_response(s: WeekdaySummary) -> WeekdaySummaryResponse:
    return WeekdaySummaryResponse(
        weekday=s.weekday,
        name=s.name,
        average=s.average,
        sample_count=s.sample_count,
        eligible=s.eligible,
    )


def _insight_to_response(insight: Insight) -> InsightOut:
    if isinstance(insight, WeekTrendInsight):
        return WeekTrendOut(
            current_average=insight.current_average,
            previous_average=insight.previous_average,
            change=insight.change,
            change_percent=insight.change_percent,
            direction=insight.direction.value,
            comparison_available=insight.comparison_available,
            best_week=insight.best_week,
            message=insight.message,
        )
    if isinstance(insight, FriendsActivityInsight):
        return FriendsActivityOut(
            rated_count=insight.rated_count,
            total_friends=insight.total_friends,
            average_rating=insight.average_rating,
            all_rated=insight.all_rated,
            highlight_friend_id=insight.highlight_friend_id,
            highlight_friend_name=insight.highlight_friend_name,
            message=insight.message,
        )
    if isinstance(insight, AICoachInsight):
        return AICoachOut(
            focus=insight.focus.value,
            message=insight.message,
            streak=insight.streak,
            next_milestone=insight.next_milestone,
            days_to_milestone=insight.days_to_milestone,
            recent_average=insight.recent_average,
        )
    if isinstance(insight, RatingPatternInsight):
        return RatingPatternOut(
            best_weekday=insight.best_weekday,
            worst_weekday=insight.worst_weekday,
            difference=insight.difference,
            tier=insight.tier.value,
            message=insight.message,
            summaries=[_summary_to_response(s) for s in insight.summaries],
        )
    if isinstance(insight, FriendshipMomentumInsight):
        return FriendshipMomentumOut(
            friend_id=insight.friend_id,
            friend_name=insight.friend_name,
            level=insight.level.value,
            score=insight.score,
            previous_score=insight.previous_score,
            total_interactions=insight.total_interactions,
            message=insight.message,
        )
    if isinstance(insight, EmptyStateInsight):
        return EmptyStateOut(
            slot=insight.kind.value,
            reason=insight.reason.value,
            message=insight.message,
            progress=insight.progress,
            remaining=insight.remaining,
        )
    raise TypeError(f"Unknown insight type: {type(insight).__name__}")


# ---------------------------------------------------------------------------
# GET /analytics/{user_id}/days
# ---------------------------------------------------------------------------

@router.get(
    "/{user_id}/days",
    response_model=DayAggregateListResponse,
    summary="Daily rating aggregates (heatmap)",
)
def daily_aggregates(
    user_id: str,
    days: int = Query(
        default=settings.LOOKBACK_DAYS, ge=1, le=90,
        description="Window size in days, today included.",
    ),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """
    One entry per calendar day, oldest first.

    * **today**: the latest rating's value.
    * **past days**: time-weighted average; each rating counts for the hours
      until the next one (or midnight), at least one hour.
    * **no ratings**: `weighted_average` is null.
    """
    result = service.day_aggregates(user_id, days)
    return DayAggregateListResponse(
        timezone=str(service.clock.tz),
        days=[_day_to_response(d) for d in result],
    )


# ---------------------------------------------------------------------------
# GET /analytics/{user_id}/trend
# ---------------------------------------------------------------------------

@router.get(
    "/{user_id}/trend",
    response_model=TrendResponse,
    summary="Weekly rating trend",
)
def trend(user_id: str, service: AnalyticsService = Depends(get_analytics_service)):
    """
    Compare the mean of the 7 most recent ratings with the mean of the 4
    ratings after the 3 most recent. Needs at least 2 ratings; fewer
    returns `status="insufficient_data"`, never an error.
    """
    result = service.trend(user_id)
    if isinstance(result, InsufficientTrendData):
        return TrendResponse(
            status="insufficient_data",
            rating_count=result.rating_count,
            remaining=result.remaining,
            message=insufficient_trend_message(result),
        )
    return TrendResponse(
        status="ok",
        rating_count=result.rating_count,
        message=trend_message(result, service.clock.today()),
        current_average=result.current_average,
        previous_average=result.previous_average,
        change=result.change,
        change_percent=result.change_percent,
        direction=result.direction.value,
        comparison_available=result.comparison_available,
        best_week=result.best_week,
    )


# ---------------------------------------------------------------------------
# GET /analytics/{user_id}/patterns
# ---------------------------------------------------------------------------

@router.get(
    "/{user_id}/patterns",
    response_model=PatternResponse,
    summary="Best and worst weekday",
)
def patterns(user_id: str, service: AnalyticsService = Depends(get_analytics_service)):
    """
    Unlocks with at least 10 ratings spread over at least 3 weekdays that
    each have 2+ ratings. Weekdays: 1 = Sunday … 7 = Saturday.
    """
    result = service.patterns(user_id)
    summaries = [_summary_to_response(s) for s in result.summaries]
    if isinstance(result, LockedPattern):
        return PatternResponse(
            status="locked",
            rating_count=result.rating_count,
            message=locked_pattern_message(result),
            summaries=summaries,
            progress=result.progress,
            lock_reason=result.reason.value,
        )
    return PatternResponse(
        status="unlocked",
        rating_count=sum(s.sample_count for s in result.summaries),
        message=pattern_message(result),
        summaries=summaries,
        best_weekday=result.best.weekday,
        worst_weekday=result.worst.weekday,
        difference=result.difference,
        tier=result.tier.value,
    )


# ---------------------------------------------------------------------------
# GET /analytics/{user_id}/insights
# ---------------------------------------------------------------------------

@router.get(
    "/{user_id}/insights",
    response_model=InsightListResponse,
    summary="Home-screen insights",
)
def insights(user_id: str, service: AnalyticsService = Depends(get_analytics_service)):
    """
    Ordered slots: `week_trend`, `friends_activity`, `ai_coach`,
    `rating_pattern`, `friendship_momentum`.

    Slots without enough data come back as `type="empty_state"`. The
    momentum slot is left out entirely when the user has no friends.
    """
    items = service.insights(user_id)
    return InsightListResponse(
        user_id=user_id,
        generated_for=str(service.clock.today()),
        items=[_insight_to_response(i) for i in items],
    )
