"""
Friends activity: how many friends rated today and who to highlight.

Highlight priority: someone who may need support (rating <= 4), then
someone having a great day (>= 8), then the first friend who rated.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ten_insights.services.domain import FriendProfile, mean

NEEDS_SUPPORT_MAX = 4
GREAT_DAY_MIN = 8


@dataclass(frozen=True)
class FriendsActivity:
    rated_count: int
    total_friends: int
    average_rating: Optional[float]
    highlight: Optional[FriendProfile]
    message: str

    @property
    def all_rated(self) -> bool:
        return self.total_friends > 0 and self.rated_count == self.total_friends


def pick_highlight(rated: Sequence[FriendProfile]) -> Optional[FriendProfile]:
    for friend in rated:
        if friend.today_rating <= NEEDS_SUPPORT_MAX:
            return friend
    for friend in rated:
        if friend.today_rating >= GREAT_DAY_MIN:
            return friend
    return rated[0] if rated else None


def summarize_friends_activity(friends: Sequence[FriendProfile]) -> Optional[FriendsActivity]:
    """None when there are no friends at all."""
    if not friends:
        return None

    rated = [f for f in friends if f.has_rated_today]
    if not rated:
        return FriendsActivity(
            rated_count=0,
            total_friends=len(friends),
            average_rating=None,
            highlight=None,
            message="Be the first to spark today's vibes",
        )

    avg = mean([f.today_rating for f in rated])
    highlight = pick_highlight(rated)
    if highlight.today_rating >= GREAT_DAY_MIN:
        message = f"{highlight.name} is having a great day"
    elif highlight.today_rating <= NEEDS_SUPPORT_MAX:
        message = f"Maybe check in with {highlight.name}"
    else:
        message = f"{highlight.name} checked in today"

    return FriendsActivity(
        rated_count=len(rated),
        total_friends=len(friends),
        average_rating=avg,
        highlight=highlight,
        message=message,
    )
