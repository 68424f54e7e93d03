"""
Friendship momentum: a narrative around the viewer's closest friend.

Scores are computed elsewhere (interaction logs) and arrive as a sparse
friend_id -> FriendshipScore map. Three outcomes, all distinguishable:

  None               the viewer has no friends: the slot is omitted
  NoScoredFriends    friends exist but none has a fresh score yet
  FriendshipMomentum the top-scored friend plus level-specific narrative

`previous_score` is a rough estimate of last week's score, used only for
the momentum visual, never for any decision.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Mapping, Optional, Sequence, Union

from ten_insights.services.domain import FriendProfile, FriendshipLevel, FriendshipScore


@dataclass(frozen=True)
class FriendshipMomentum:
    friend: FriendProfile
    score: FriendshipScore
    previous_score: int
    message: str

    @property
    def level(self) -> FriendshipLevel:
        return self.score.level


@dataclass(frozen=True)
class NoScoredFriends:
    friend_count: int
    message: str = "Start interacting with your friends to see your connections grow"


MomentumResult = Union[FriendshipMomentum, NoScoredFriends, None]


def estimate_previous_score(score: FriendshipScore) -> int:
    weekly_gain = score.total_interactions // max(1, score.friendship_weeks)
    return max(0, score.score - weekly_gain)


def momentum_message(name: str, score: FriendshipScore) -> str:
    level = score.level
    if level is FriendshipLevel.best_friend:
        return f"{name} is your #1 with {score.total_interactions} interactions!"
    if level is FriendshipLevel.close_friend:
        to_next = max(0, level.next_level_score - score.score)
        return f"{to_next} more points to best friend status with {name}"
    if level is FriendshipLevel.friend:
        return f"Your bond with {name} is growing strong"
    if level is FriendshipLevel.acquaintance:
        return f"Keep engaging with {name} to level up"
    return f"Start your journey with {name}"


def fresh_scores(
    scores: Mapping[str, FriendshipScore],
    now: datetime,
    ttl: timedelta,
) -> dict[str, FriendshipScore]:
    """Drop cached scores older than `ttl`. Scores without a timestamp are kept."""
    return {
        friend_id: score
        for friend_id, score in scores.items()
        if score.last_updated is None or now - score.last_updated <= ttl
    }


def build_momentum(
    friends: Sequence[FriendProfile],
    scores: Mapping[str, FriendshipScore],
) -> MomentumResult:
    if not friends:
        return None

    top: Optional[tuple[FriendProfile, FriendshipScore]] = None
    for friend in friends:
        score = scores.get(friend.id)
        if score is None:
            continue
        if top is None or score.score > top[1].score:
            top = (friend, score)

    if top is None:
        return NoScoredFriends(friend_count=len(friends))

    friend, score = top
    return FriendshipMomentum(
        friend=friend,
        score=score,
        previous_score=estimate_previous_score(score),
        message=momentum_message(friend.name, score),
    )
