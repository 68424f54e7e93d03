"""
Tests for the weekday pattern analyzer.

Weekdays: 1 = Sunday ... 7 = Saturday. 2026-03-15 is a Sunday.
"""
from datetime import datetime, timedelta, timezone

import pytest

from ten_insights.core.clock import Clock
from ten_insights.services.domain import RatingEntry
from ten_insights.services.weekday_patterns import (
    LockReason,
    LockedPattern,
    PatternTier,
    WeekdayPattern,
    analyze_weekdays,
    locked_pattern_message,
    pattern_message,
)

_SUNDAY = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


def _on(weekday: int, value: int, weeks_back: int = 0) -> RatingEntry:
    """Rating at noon UTC on the given weekday (1 = Sunday)."""
    ts = _SUNDAY + timedelta(days=weekday - 1) - timedelta(weeks=weeks_back)
    return RatingEntry(value=value, timestamp=ts)


def _pairs(layout: dict[int, tuple[int, int]]) -> list[RatingEntry]:
    ratings = []
    for weekday, (a, b) in layout.items():
        ratings.append(_on(weekday, a, weeks_back=1))
        ratings.append(_on(weekday, b, weeks_back=2))
    return ratings


class TestNumbering:
    def test_sunday_is_one_saturday_is_seven(self):
        clock = Clock()
        assert clock.weekday(_SUNDAY) == 1
        assert clock.weekday(_SUNDAY + timedelta(days=1)) == 2
        assert clock.weekday(_SUNDAY + timedelta(days=6)) == 7


class TestLocked:
    def test_nine_ratings_locked_at_ninety_percent(self):
        ratings = _pairs({1: (5, 5), 2: (6, 6), 3: (7, 7), 4: (8, 8)})[:8] + [_on(5, 4)]
        result = analyze_weekdays(ratings, Clock())
        assert isinstance(result, LockedPattern)
        assert result.reason is LockReason.not_enough_ratings
        assert result.progress == pytest.approx(0.9)
        assert result.remaining == 1
        assert locked_pattern_message(result) == "1 more rating to unlock your weekly patterns"

    def test_tenth_rating_needs_three_weekdays(self):
        ratings = [_on(2, 6, weeks_back=w) for w in range(5)] + [_on(3, 7, weeks_back=w) for w in range(5)]
        result = analyze_weekdays(ratings, Clock())
        assert isinstance(result, LockedPattern)
        assert result.reason is LockReason.not_enough_weekdays
        assert result.eligible_weekdays == 2

    def test_single_sample_weekdays_not_eligible(self):
        ratings = (
            [_on(2, 6, weeks_back=w) for w in range(4)]
            + [_on(3, 7, weeks_back=w) for w in range(4)]
            + [_on(4, 9), _on(5, 1)]
        )
        result = analyze_weekdays(ratings, Clock())
        assert isinstance(result, LockedPattern)
        assert result.reason is LockReason.not_enough_weekdays
        assert {s.weekday: s.eligible for s in result.summaries} == {2: True, 3: True, 4: False, 5: False}


class TestUnlocked:
    def test_best_and_worst(self):
        ratings = _pairs({1: (5, 5), 2: (9, 9), 3: (6, 6), 4: (3, 3), 5: (6, 6)})
        result = analyze_weekdays(ratings, Clock())
        assert isinstance(result, WeekdayPattern)
        assert result.best.weekday == 2
        assert result.worst.weekday == 4
        assert result.difference == pytest.approx(6.0)
        assert result.tier is PatternTier.strong
        assert pattern_message(result) == "Mondays are your best days"

    def test_tie_break_first_weekday_wins(self):
        # Monday and Tuesday share the best average; Sunday and Thursday the worst
        ratings = _pairs({1: (4, 4), 2: (8, 8), 3: (8, 8), 5: (4, 4), 6: (6, 6)})
        result = analyze_weekdays(ratings, Clock())
        assert result.best.weekday == 2
        assert result.worst.weekday == 1

    def test_moderate_tier(self):
        ratings = _pairs({1: (6, 6), 2: (7, 7), 3: (6, 7), 4: (6, 6), 5: (6, 7)})
        result = analyze_weekdays(ratings, Clock())
        assert result.difference == pytest.approx(1.0)
        assert result.tier is PatternTier.moderate
        assert pattern_message(result) == "You tend to feel best on Mondays"

    def test_balanced_tier(self):
        ratings = _pairs({1: (6, 7), 2: (7, 7), 3: (6, 7), 4: (7, 6), 5: (6, 7)})
        result = analyze_weekdays(ratings, Clock())
        assert result.tier is PatternTier.balanced
        assert pattern_message(result) == "Your week is pretty balanced"

    def test_weekday_follows_viewer_zone(self):
        # Monday 02:00 UTC is still Sunday evening at UTC-5
        clock = Clock(timezone(timedelta(hours=-5)))
        ts = _SUNDAY + timedelta(hours=14)
        assert Clock().weekday(ts) == 2
        assert clock.weekday(ts) == 1
