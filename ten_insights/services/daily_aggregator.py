"""
Daily aggregator: per-day rating values for the mood heatmap.

Definition
----------
For each calendar day in the window [today - (days-1), today]:

  * no ratings            -> weighted_average is None
  * today                 -> the chronologically last rating's value
                             (a live "current" reading, not an average)
  * any past day          -> time-weighted mean. Each rating is weighted by
                             the hours it stayed "in effect": until the next
                             rating, or until midnight for the last one.
                             Weights are floored at 1 hour.

The 1-hour floor also absorbs identical or out-of-order timestamps, so
a weight is never zero or negative and the result stays inside [1, 10].

Public API
----------
aggregate_days(ratings, clock, days)        -> list[DayAggregate]  (oldest first)
weighted_day_average(entries, day_end)      -> float
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from ten_insights.core.clock import Clock
from ten_insights.services.domain import RatingEntry

DEFAULT_WINDOW_DAYS = 10
MIN_WEIGHT_HOURS = 1.0


@dataclass
class DayAggregate:
    day: date
    weighted_average: Optional[float]
    entries: list[RatingEntry] = field(default_factory=list)
    is_today: bool = False


def weighted_day_average(entries: list[RatingEntry], day_end: datetime) -> float:
    """Time-weighted mean of one past day's ratings (entries sorted ascending)."""
    total_value = 0.0
    total_weight = 0.0
    for idx, entry in enumerate(entries):
        next_ts = entries[idx + 1].timestamp if idx + 1 < len(entries) else day_end
        hours = (next_ts - entry.timestamp).total_seconds() / 3600.0
        weight = max(hours, MIN_WEIGHT_HOURS)
        total_value += entry.value * weight
        total_weight += weight
    return total_value / total_weight


def aggregate_days(
    ratings: Iterable[RatingEntry],
    clock: Clock,
    days: int = DEFAULT_WINDOW_DAYS,
) -> list[DayAggregate]:
    """Build one DayAggregate per day of the window, oldest -> newest."""
    today = clock.today()
    ordered = sorted(ratings, key=lambda r: r.timestamp)

    result: list[DayAggregate] = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        start, end = clock.day_bounds(day)
        day_entries = [r for r in ordered if start <= r.timestamp < end]
        is_today = day == today

        if not day_entries:
            avg = None
        elif is_today:
            avg = float(day_entries[-1].value)
        else:
            avg = weighted_day_average(day_entries, end)

        result.append(DayAggregate(
            day=day,
            weighted_average=avg,
            entries=day_entries,
            is_today=is_today,
        ))
    return result
