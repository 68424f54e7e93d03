"""
Insight synthesizer: the five insight slots shown on the home screen.

Slots, always in this order
---------------------------
  1. week_trend           TrendAnalyzer
  2. friends_activity     friends' ratings today
  3. ai_coach             streak + recent ratings
  4. rating_pattern       WeekdayPatternAnalyzer
  5. friendship_momentum  FriendshipMomentumAdapter

A slot without enough data becomes an EmptyStateInsight instead of
disappearing. The one exception is friendship_momentum, which is left out
entirely when the viewer has no friends.

Coach priority
--------------
  milestone approaching (1-3 days to 7/30/100/365)
  -> milestone just reached
  -> ongoing streak
  -> rough week  (avg of 7 most recent < 5, at least 3 ratings)
  -> great week  (avg >= 8, at least 3 ratings)
  -> encouragement, rotated by calendar day

Pure: same inputs and same clock give the same list.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Mapping, Optional, Sequence

from ten_insights.core.clock import Clock
from ten_insights.services.domain import (
    FriendProfile,
    FriendshipScore,
    RatingEntry,
    mean,
    newest_first,
)
from ten_insights.services.friends_activity import summarize_friends_activity
from ten_insights.services.friendship_momentum import NoScoredFriends, build_momentum
from ten_insights.services.insight_types import (
    AICoachInsight,
    CoachFocus,
    EmptyReason,
    EmptyStateInsight,
    FriendsActivityInsight,
    FriendshipMomentumInsight,
    Insight,
    InsightKind,
    RatingPatternInsight,
    WeekTrendInsight,
)
from ten_insights.services.trend_analyzer import (
    InsufficientTrendData,
    analyze_trend,
    insufficient_trend_message,
    trend_message,
)
from ten_insights.services.weekday_patterns import (
    LockReason,
    LockedPattern,
    analyze_weekdays,
    locked_pattern_message,
    pattern_message,
)

STREAK_MILESTONES = (7, 30, 100, 365)
MILESTONE_LOOKAHEAD_DAYS = 3
COACH_WINDOW = 7
COACH_MIN_RATINGS = 3
ROUGH_WEEK_BELOW = 5.0
GREAT_WEEK_FROM = 8.0

ENCOURAGEMENTS = [
    "Every check-in is a small win",
    "You showed up today. That matters.",
    "Tracking your vibe builds awareness",
    "Small moments of reflection add up",
]


@dataclass
class InsightInputs:
    ratings: Sequence[RatingEntry] = field(default_factory=list)
    friends: Sequence[FriendProfile] = field(default_factory=list)
    friendship_scores: Mapping[str, FriendshipScore] = field(default_factory=dict)
    streak: int = 0


# ---------------------------------------------------------------------------
# Slot builders
# ---------------------------------------------------------------------------

def trend_insight(ratings: Sequence[RatingEntry], today: date) -> Insight:
    result = analyze_trend(ratings)
    if isinstance(result, InsufficientTrendData):
        return EmptyStateInsight(
            kind=InsightKind.week_trend,
            reason=EmptyReason.not_enough_ratings,
            message=insufficient_trend_message(result),
            progress=result.rating_count / result.required,
            remaining=result.remaining,
        )
    return WeekTrendInsight(
        current_average=result.current_average,
        previous_average=result.previous_average,
        change=result.change,
        change_percent=result.change_percent,
        direction=result.direction,
        comparison_available=result.comparison_available,
        best_week=result.best_week,
        message=trend_message(result, today),
    )


def friends_activity_insight(friends: Sequence[FriendProfile]) -> Insight:
    activity = summarize_friends_activity(friends)
    if activity is None:
        return EmptyStateInsight(
            kind=InsightKind.friends_activity,
            reason=EmptyReason.no_friends,
            message="Add friends to see their vibes",
        )
    return FriendsActivityInsight(
        rated_count=activity.rated_count,
        total_friends=activity.total_friends,
        average_rating=activity.average_rating,
        all_rated=activity.all_rated,
        message=activity.message,
        highlight_friend_id=activity.highlight.id if activity.highlight else None,
        highlight_friend_name=activity.highlight.name if activity.highlight else None,
    )


def _next_milestone(streak: int) -> Optional[int]:
    for milestone in STREAK_MILESTONES:
        if streak < milestone:
            return milestone
    return None


def coach_insight(ratings: Sequence[RatingEntry], streak: int, today: date) -> AICoachInsight:
    if streak > 0:
        upcoming = _next_milestone(streak)
        days_to = upcoming - streak if upcoming else None

        if days_to is not None and 0 < days_to <= MILESTONE_LOOKAHEAD_DAYS:
            return AICoachInsight(
                focus=CoachFocus.milestone_approaching,
                message=f"{days_to} day{'' if days_to == 1 else 's'} until your {upcoming}-day milestone!",
                streak=streak,
                next_milestone=upcoming,
                days_to_milestone=days_to,
            )

        if streak in STREAK_MILESTONES:
            return AICoachInsight(
                focus=CoachFocus.milestone_reached,
                message=f"You hit {streak} days! That's incredible",
                streak=streak,
                next_milestone=upcoming,
                days_to_milestone=days_to,
            )

        if streak < 30:
            message = f"{30 - streak} days to your first month"
        elif upcoming:
            message = f"{days_to} days to hit {upcoming}"
        else:
            message = f"{streak} days and counting"
        return AICoachInsight(
            focus=CoachFocus.streak,
            message=message,
            streak=streak,
            next_milestone=upcoming,
            days_to_milestone=days_to,
        )

    recent = newest_first(ratings)[:COACH_WINDOW]
    avg = mean([r.value for r in recent]) if recent else None

    if avg is not None and len(recent) >= COACH_MIN_RATINGS:
        if avg < ROUGH_WEEK_BELOW:
            return AICoachInsight(
                focus=CoachFocus.rough_week,
                message="It's been a tough week. Be kind to yourself.",
                recent_average=avg,
            )
        if avg >= GREAT_WEEK_FROM:
            return AICoachInsight(
                focus=CoachFocus.great_week,
                message="What a week! You're radiating good energy",
                recent_average=avg,
            )

    return AICoachInsight(
        focus=CoachFocus.encouragement,
        message=ENCOURAGEMENTS[today.toordinal() % len(ENCOURAGEMENTS)],
        recent_average=avg,
    )


def pattern_insight(ratings: Sequence[RatingEntry], clock: Clock) -> Insight:
    result = analyze_weekdays(ratings, clock)
    if isinstance(result, LockedPattern):
        return EmptyStateInsight(
            kind=InsightKind.rating_pattern,
            reason=(
                EmptyReason.not_enough_ratings
                if result.reason is LockReason.not_enough_ratings
                else EmptyReason.not_enough_weekdays
            ),
            message=locked_pattern_message(result),
            progress=result.progress,
            remaining=result.remaining,
        )
    return RatingPatternInsight(
        best_weekday=result.best.weekday,
        worst_weekday=result.worst.weekday,
        difference=result.difference,
        tier=result.tier,
        message=pattern_message(result),
        summaries=list(result.summaries),
    )


def momentum_insight(
    friends: Sequence[FriendProfile],
    scores: Mapping[str, FriendshipScore],
) -> Optional[Insight]:
    result = build_momentum(friends, scores)
    if result is None:
        return None
    if isinstance(result, NoScoredFriends):
        return EmptyStateInsight(
            kind=InsightKind.friendship_momentum,
            reason=EmptyReason.no_scored_friends,
            message=result.message,
        )
    return FriendshipMomentumInsight(
        friend_id=result.friend.id,
        friend_name=result.friend.name,
        level=result.level,
        score=result.score.score,
        previous_score=result.previous_score,
        total_interactions=result.score.total_interactions,
        message=result.message,
    )


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

def synthesize_insights(inputs: InsightInputs, clock: Clock) -> list[Insight]:
    today = clock.today()
    ratings = list(inputs.ratings)

    insights: list[Insight] = [
        trend_insight(ratings, today),
        friends_activity_insight(inputs.friends),
        coach_insight(ratings, inputs.streak, today),
        pattern_insight(ratings, clock),
    ]
    momentum = momentum_insight(inputs.friends, inputs.friendship_scores)
    if momentum is not None:
        insights.append(momentum)
    return insights
