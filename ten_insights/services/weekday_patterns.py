"""
Weekday pattern analyzer: best / worst day of the week.

Weekdays are numbered 1 = Sunday ... 7 = Saturday in the viewer's zone.

Unlock rules
------------
  1. At least 10 ratings overall, else LockedPattern(progress = count / 10).
  2. A weekday is eligible for best/worst only with >= 2 samples.
     Single-sample weekdays are still reported in `summaries`.
  3. At least 3 eligible weekdays, else LockedPattern("not_enough_weekdays").

Tie-break: weekdays are scanned 1..7 with strict > / <, so the first
weekday reaching the best (or worst) average wins.

Tiers by difference = best.average - worst.average:
  >= 2.0 strong, >= 1.0 moderate, otherwise balanced.
"""
from __future__ import annotations

import enum
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable, Union

from ten_insights.core.clock import Clock
from ten_insights.services.domain import RatingEntry, mean

MIN_RATINGS = 10
MIN_SAMPLES_PER_WEEKDAY = 2
MIN_ELIGIBLE_WEEKDAYS = 3
STRONG_DIFFERENCE = 2.0
MODERATE_DIFFERENCE = 1.0

WEEKDAY_NAMES = {
    1: "Sunday", 2: "Monday", 3: "Tuesday", 4: "Wednesday",
    5: "Thursday", 6: "Friday", 7: "Saturday",
}


class PatternTier(str, enum.Enum):
    strong = "strong"
    moderate = "moderate"
    balanced = "balanced"


class LockReason(str, enum.Enum):
    not_enough_ratings = "not_enough_ratings"
    not_enough_weekdays = "not_enough_weekdays"


@dataclass(frozen=True)
class WeekdaySummary:
    weekday: int
    average: float
    sample_count: int

    @property
    def eligible(self) -> bool:
        return self.sample_count >= MIN_SAMPLES_PER_WEEKDAY

    @property
    def name(self) -> str:
        return WEEKDAY_NAMES[self.weekday]


@dataclass(frozen=True)
class WeekdayPattern:
    best: WeekdaySummary
    worst: WeekdaySummary
    difference: float
    tier: PatternTier
    summaries: list[WeekdaySummary] = field(default_factory=list)


@dataclass(frozen=True)
class LockedPattern:
    rating_count: int
    reason: LockReason
    eligible_weekdays: int = 0
    required: int = MIN_RATINGS
    summaries: list[WeekdaySummary] = field(default_factory=list)

    @property
    def progress(self) -> float:
        return min(1.0, self.rating_count / self.required)

    @property
    def remaining(self) -> int:
        return max(0, self.required - self.rating_count)


PatternResult = Union[WeekdayPattern, LockedPattern]


def summarize_weekdays(ratings: Iterable[RatingEntry], clock: Clock) -> list[WeekdaySummary]:
    """Per-weekday averages, ordered 1..7, weekdays without ratings left out."""
    buckets: dict[int, list[int]] = defaultdict(list)
    for entry in ratings:
        buckets[clock.weekday(entry.timestamp)].append(entry.value)
    return [
        WeekdaySummary(weekday=day, average=mean(buckets[day]), sample_count=len(buckets[day]))
        for day in range(1, 8)
        if buckets.get(day)
    ]


def _tier(difference: float) -> PatternTier:
    if difference >= STRONG_DIFFERENCE:
        return PatternTier.strong
    if difference >= MODERATE_DIFFERENCE:
        return PatternTier.moderate
    return PatternTier.balanced


def analyze_weekdays(ratings: Iterable[RatingEntry], clock: Clock) -> PatternResult:
    ratings = list(ratings)
    summaries = summarize_weekdays(ratings, clock)
    eligible = [s for s in summaries if s.eligible]

    if len(ratings) < MIN_RATINGS:
        return LockedPattern(
            rating_count=len(ratings),
            reason=LockReason.not_enough_ratings,
            eligible_weekdays=len(eligible),
            summaries=summaries,
        )
    if len(eligible) < MIN_ELIGIBLE_WEEKDAYS:
        return LockedPattern(
            rating_count=len(ratings),
            reason=LockReason.not_enough_weekdays,
            eligible_weekdays=len(eligible),
            summaries=summaries,
        )

    best = worst = eligible[0]
    for summary in eligible[1:]:
        if summary.average > best.average:
            best = summary
        if summary.average < worst.average:
            worst = summary

    difference = best.average - worst.average
    return WeekdayPattern(
        best=best,
        worst=worst,
        difference=difference,
        tier=_tier(difference),
        summaries=summaries,
    )


def pattern_message(pattern: WeekdayPattern) -> str:
    plural = f"{pattern.best.name}s"
    if pattern.tier is PatternTier.strong:
        return f"{plural} are your best days"
    if pattern.tier is PatternTier.moderate:
        return f"You tend to feel best on {plural}"
    return "Your week is pretty balanced"


def locked_pattern_message(locked: LockedPattern) -> str:
    if locked.reason is LockReason.not_enough_ratings:
        remaining = locked.remaining
        return f"{remaining} more rating{'' if remaining == 1 else 's'} to unlock your weekly patterns"
    return "Rate on a few more different days to unlock your weekly patterns"
