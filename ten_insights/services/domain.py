"""
Domain value types shared by the analytics services.

Plain frozen dataclasses: no ORM, no Pydantic. Boundary validation
happens here, at construction, so the aggregation math downstream never
has to re-check its inputs.
"""
from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ten_insights.core.errors import InvalidRatingError

MIN_RATING = 1
MAX_RATING = 10


def clamp_rating(value: int) -> int:
    return max(MIN_RATING, min(MAX_RATING, value))


# ---------------------------------------------------------------------------
# Ratings
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RatingEntry:
    """One self-rating. Integer values are clamped into [1, 10]."""
    value: int
    timestamp: datetime
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self) -> None:
        value = self.value
        if isinstance(value, bool) or not isinstance(value, int):
            # Accept 7.0 but not 7.5 or "7"
            if isinstance(value, float) and value.is_integer():
                value = int(value)
            else:
                raise InvalidRatingError(
                    "Rating value must be an integer.", field="value", value=self.value
                )
        if not isinstance(self.timestamp, datetime):
            raise InvalidRatingError(
                "Rating timestamp must be a datetime.", field="timestamp", value=self.timestamp
            )
        if self.timestamp.tzinfo is None or self.timestamp.utcoffset() is None:
            raise InvalidRatingError(
                "Rating timestamp must be timezone-aware.",
                field="timestamp", value=self.timestamp,
            )
        object.__setattr__(self, "value", clamp_rating(value))


def newest_first(ratings) -> list[RatingEntry]:
    return sorted(ratings, key=lambda r: r.timestamp, reverse=True)


def mean(values: list[int] | list[float]) -> float:
    return sum(values) / len(values)


# ---------------------------------------------------------------------------
# Friendship
# ---------------------------------------------------------------------------

class FriendshipLevel(str, enum.Enum):
    new_friend = "new friend"
    acquaintance = "acquaintance"
    friend = "friend"
    close_friend = "close friend"
    best_friend = "best friend"

    @property
    def min_score(self) -> int:
        return _LEVEL_MIN_SCORE[self]

    @property
    def next_level_score(self) -> Optional[int]:
        levels = list(FriendshipLevel)
        idx = levels.index(self)
        if idx + 1 >= len(levels):
            return None
        return levels[idx + 1].min_score

    @classmethod
    def from_score(cls, score: int) -> "FriendshipLevel":
        for level in reversed(list(cls)):
            if score >= level.min_score:
                return level
        return cls.new_friend


_LEVEL_MIN_SCORE = {
    FriendshipLevel.new_friend: 0,
    FriendshipLevel.acquaintance: 10,
    FriendshipLevel.friend: 30,
    FriendshipLevel.close_friend: 75,
    FriendshipLevel.best_friend: 150,
}


@dataclass(frozen=True)
class FriendshipScore:
    """Externally computed closeness between the viewer and one friend."""
    friend_id: str
    score: int
    total_interactions: int = 0
    friendship_weeks: int = 0
    level: Optional[FriendshipLevel] = None
    last_updated: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.level is None:
            object.__setattr__(self, "level", FriendshipLevel.from_score(self.score))


@dataclass(frozen=True)
class FriendProfile:
    """A friend as the insights need it: a name and today's rating, if any."""
    id: str
    username: str
    display_name: Optional[str] = None
    today_rating: Optional[int] = None

    @property
    def name(self) -> str:
        return self.display_name or self.username or "Friend"

    @property
    def has_rated_today(self) -> bool:
        return self.today_rating is not None
