"""
Read-side repositories feeding the analytics core.

Each repository is a Protocol so the analytics services can be driven by
anything that returns domain values; the Sql* classes are the SQLAlchemy
implementations used by the API. All timestamps go in and out as UTC.

Public API
----------
SqlRatingRepository.list_ratings(user_id, since)          -> list[RatingEntry]
SqlRatingRepository.add_rating(user_id, value, at, note)  -> Rating
SqlFriendsRepository.list_friends(user_id, start, end)    -> list[FriendProfile]
SqlFriendshipScoreCache.get_scores(user_id)               -> dict[str, FriendshipScore]
SqlBadgeRepository.current_streak(user_id)                -> int
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Protocol

from sqlalchemy.orm import Session

from ten_insights.models.friendship import Friendship, FriendshipScoreRecord
from ten_insights.models.rating import Rating
from ten_insights.models.user_profile import UserProfile
from ten_insights.models.user_stats import UserStats
from ten_insights.services.domain import (
    FriendProfile,
    FriendshipLevel,
    FriendshipScore,
    RatingEntry,
)


def as_utc(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------

class RatingRepository(Protocol):
    def list_ratings(self, user_id: str, since: Optional[datetime] = None) -> list[RatingEntry]: ...


class FriendsRepository(Protocol):
    def list_friends(self, user_id: str, day_start: datetime, day_end: datetime) -> list[FriendProfile]: ...


class FriendshipScoreCache(Protocol):
    def get_scores(self, user_id: str) -> dict[str, FriendshipScore]: ...


class BadgeRepository(Protocol):
    def current_streak(self, user_id: str) -> int: ...


# ---------------------------------------------------------------------------
# SQLAlchemy implementations
# ---------------------------------------------------------------------------

def _to_entry(row: Rating) -> RatingEntry:
    return RatingEntry(id=row.id, value=row.value, timestamp=as_utc(row.created_at))


class SqlRatingRepository:

    def __init__(self, db: Session):
        self.db = db

    def list_ratings(self, user_id: str, since: Optional[datetime] = None) -> list[RatingEntry]:
        q = self.db.query(Rating).filter(Rating.user_id == user_id)
        if since is not None:
            q = q.filter(Rating.created_at >= as_utc(since))
        return [_to_entry(row) for row in q.all()]

    def add_rating(
        self,
        user_id: str,
        value: int,
        at: datetime,
        note: Optional[str] = None,
    ) -> Rating:
        # Validates and clamps before anything touches the database
        entry = RatingEntry(value=value, timestamp=at)
        row = Rating(
            id=entry.id,
            user_id=user_id,
            value=entry.value,
            note=note,
            created_at=as_utc(entry.timestamp),
        )
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row


class SqlFriendsRepository:

    def __init__(self, db: Session):
        self.db = db

    def list_friends(self, user_id: str, day_start: datetime, day_end: datetime) -> list[FriendProfile]:
        friend_ids = [
            row.friend_id
            for row in (
                self.db.query(Friendship.friend_id)
                .filter(Friendship.user_id == user_id)
                .order_by(Friendship.id)
                .all()
            )
        ]
        if not friend_ids:
            return []

        profiles = {
            p.id: p
            for p in self.db.query(UserProfile).filter(UserProfile.id.in_(friend_ids)).all()
        }

        # Latest rating of each friend inside the viewer's "today"
        today_rating: dict[str, int] = {}
        rows = (
            self.db.query(Rating.user_id, Rating.value)
            .filter(
                Rating.user_id.in_(friend_ids),
                Rating.created_at >= as_utc(day_start),
                Rating.created_at < as_utc(day_end),
            )
            .order_by(Rating.created_at.asc())
            .all()
        )
        for row in rows:
            today_rating[row.user_id] = row.value

        friends = []
        for friend_id in friend_ids:
            profile = profiles.get(friend_id)
            friends.append(FriendProfile(
                id=friend_id,
                username=profile.username if profile else friend_id,
                display_name=profile.display_name if profile else None,
                today_rating=today_rating.get(friend_id),
            ))
        return friends


class SqlFriendshipScoreCache:

    def __init__(self, db: Session):
        self.db = db

    def get_scores(self, user_id: str) -> dict[str, FriendshipScore]:
        rows = (
            self.db.query(FriendshipScoreRecord)
            .filter(FriendshipScoreRecord.user_id == user_id)
            .all()
        )
        scores = {}
        for row in rows:
            scores[row.friend_id] = FriendshipScore(
                friend_id=row.friend_id,
                score=row.score,
                total_interactions=row.total_interactions,
                friendship_weeks=row.friendship_weeks,
                level=FriendshipLevel(row.level) if row.level else None,
                last_updated=as_utc(row.updated_at) if row.updated_at else None,
            )
        return scores


class SqlBadgeRepository:

    def __init__(self, db: Session):
        self.db = db

    def current_streak(self, user_id: str) -> int:
        stats = self.db.get(UserStats, user_id)
        return stats.current_streak if stats else 0
