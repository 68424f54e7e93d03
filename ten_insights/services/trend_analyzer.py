"""
Trend analyzer: "is this week better or worse than last week".

Windows (ratings sorted newest first, N = total)
------------------------------------------------
current   mean of the most recent min(7, N) ratings
previous  mean of up to 4 ratings after skipping the 3 most recent
          (only when N >= 4; otherwise previous = current and there is
          nothing to compare against)

The two windows overlap for short histories. Callers wanting a stricter
split can pass previous_skip=7 so "previous" starts where "current" ends.

Classification
--------------
change = current - previous
  change >  0.3  improving   (best_week when change_percent >= 20)
  change < -0.3  declining
  otherwise      steady

Fewer than 2 ratings is not an error: analyze_trend returns
InsufficientTrendData instead of a snapshot.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Union

from ten_insights.services.domain import RatingEntry, mean, newest_first

MIN_RATINGS = 2
MIN_RATINGS_FOR_COMPARISON = 4
CHANGE_THRESHOLD = 0.3
BEST_WEEK_PERCENT = 20.0
TOUGH_WEEK_PERCENT = 15.0


class TrendDirection(str, enum.Enum):
    improving = "improving"
    declining = "declining"
    steady = "steady"


@dataclass(frozen=True)
class TrendSnapshot:
    current_average: float
    previous_average: float
    change: float
    change_percent: float
    direction: TrendDirection
    comparison_available: bool
    best_week: bool
    rating_count: int


@dataclass(frozen=True)
class InsufficientTrendData:
    rating_count: int
    required: int = MIN_RATINGS

    @property
    def remaining(self) -> int:
        return max(0, self.required - self.rating_count)


TrendResult = Union[TrendSnapshot, InsufficientTrendData]


def analyze_trend(
    ratings: Iterable[RatingEntry],
    recent_window: int = 7,
    previous_skip: int = 3,
    previous_window: int = 4,
) -> TrendResult:
    ordered = newest_first(ratings)
    n = len(ordered)
    if n < MIN_RATINGS:
        return InsufficientTrendData(rating_count=n)

    current = mean([r.value for r in ordered[:recent_window]])

    older = ordered[min(previous_skip, n):][:previous_window]
    comparison_available = n >= MIN_RATINGS_FOR_COMPARISON and bool(older)
    previous = mean([r.value for r in older]) if comparison_available else current

    change = current - previous
    change_percent = abs(change) / max(previous, 1.0) * 100.0

    if change > CHANGE_THRESHOLD:
        direction = TrendDirection.improving
    elif change < -CHANGE_THRESHOLD:
        direction = TrendDirection.declining
    else:
        direction = TrendDirection.steady

    return TrendSnapshot(
        current_average=current,
        previous_average=previous,
        change=change,
        change_percent=change_percent,
        direction=direction,
        comparison_available=comparison_available,
        best_week=direction is TrendDirection.improving and change_percent >= BEST_WEEK_PERCENT,
        rating_count=n,
    )


# ---------------------------------------------------------------------------
# Narrative
# ---------------------------------------------------------------------------

_STEADY_MESSAGES = [
    "Steady vibes. Consistency is underrated",
    "Holding steady. That's its own kind of strength",
    "An even week. Keep checking in",
]


def trend_message(snapshot: TrendSnapshot, today: date) -> str:
    """
    One-line narrative for a snapshot.

    The steady case rotates through a few phrasings by calendar day; the
    rotation never changes the classification.
    """
    pct = f"{snapshot.change_percent:.0f}"
    if snapshot.direction is TrendDirection.improving:
        if snapshot.best_week:
            return "This is your best week yet!"
        return f"You're up {pct}% from last week"
    if snapshot.direction is TrendDirection.declining:
        if snapshot.change_percent >= TOUGH_WEEK_PERCENT:
            return "Tough week? Tomorrow's a fresh start"
        return "Slight dip, but you've got this"
    return _STEADY_MESSAGES[today.toordinal() % len(_STEADY_MESSAGES)]


def insufficient_trend_message(result: InsufficientTrendData) -> str:
    remaining = result.remaining
    return f"{remaining} more rating{'' if remaining == 1 else 's'} to see your first trend"
