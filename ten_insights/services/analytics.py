"""
Analytics service: loads a user's data through the repositories and runs
the pure analyzers over it. No analyzer ever sees a database session.
"""
from __future__ import annotations

import logging
from datetime import timedelta

from ten_insights.core.clock import Clock
from ten_insights.services.daily_aggregator import DayAggregate, aggregate_days
from ten_insights.services.domain import RatingEntry
from ten_insights.services.friendship_momentum import fresh_scores
from ten_insights.services.insight_synthesizer import InsightInputs, synthesize_insights
from ten_insights.services.insight_types import Insight
from ten_insights.services.repositories import (
    BadgeRepository,
    FriendsRepository,
    FriendshipScoreCache,
    RatingRepository,
)
from ten_insights.services.trend_analyzer import TrendResult, analyze_trend
from ten_insights.services.weekday_patterns import PatternResult, analyze_weekdays

logger = logging.getLogger(__name__)


class AnalyticsService:

    def __init__(
        self,
        ratings: RatingRepository,
        friends: FriendsRepository,
        scores: FriendshipScoreCache,
        badges: BadgeRepository,
        clock: Clock,
        history_days: int = 60,
        score_ttl: timedelta = timedelta(hours=1),
    ):
        self.ratings = ratings
        self.friends = friends
        self.scores = scores
        self.badges = badges
        self.clock = clock
        self.history_days = history_days
        self.score_ttl = score_ttl

    def rating_history(self, user_id: str) -> list[RatingEntry]:
        since = self.clock.now() - timedelta(days=self.history_days)
        return self.ratings.list_ratings(user_id, since=since)

    def day_aggregates(self, user_id: str, days: int) -> list[DayAggregate]:
        # One extra day so the oldest day of the window is fully covered
        since = self.clock.now() - timedelta(days=days + 1)
        return aggregate_days(self.ratings.list_ratings(user_id, since=since), self.clock, days)

    def trend(self, user_id: str) -> TrendResult:
        return analyze_trend(self.rating_history(user_id))

    def patterns(self, user_id: str) -> PatternResult:
        return analyze_weekdays(self.rating_history(user_id), self.clock)

    def insights(self, user_id: str) -> list[Insight]:
        day_start, day_end = self.clock.day_bounds(self.clock.today())
        friends = self.friends.list_friends(user_id, day_start, day_end)
        scores = fresh_scores(self.scores.get_scores(user_id), self.clock.now(), self.score_ttl)
        inputs = InsightInputs(
            ratings=self.rating_history(user_id),
            friends=friends,
            friendship_scores=scores,
            streak=self.badges.current_streak(user_id),
        )
        insights = synthesize_insights(inputs, self.clock)
        logger.debug("Built %d insights for user %s", len(insights), user_id)
        return insights
