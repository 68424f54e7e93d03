"""
FastAPI dependency wiring.

Services are built here from settings and handed to routers explicitly;
tests swap any of them through `app.dependency_overrides`.
"""
from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Query
from sqlalchemy.orm import Session

from ten_insights.core.clock import Clock, resolve_timezone
from ten_insights.core.config import settings
from ten_insights.db.base import SessionLocal, get_db
from ten_insights.services.analytics import AnalyticsService
from ten_insights.services.checkin_engine import CheckInTriggerEngine
from ten_insights.services.cooldown_store import InMemoryCooldownStore, SqlCooldownStore
from ten_insights.services.repositories import (
    SqlBadgeRepository,
    SqlFriendsRepository,
    SqlFriendshipScoreCache,
    SqlRatingRepository,
)


def get_clock(
    tz: Optional[str] = Query(
        default=None,
        description="Viewer's IANA timezone, e.g. 'America/New_York'. Defaults to the server setting.",
        examples=["Europe/Madrid"],
    ),
) -> Clock:
    return Clock(resolve_timezone(tz or settings.TIMEZONE))


@lru_cache(maxsize=1)
def get_checkin_engine() -> CheckInTriggerEngine:
    """Process-wide engine: per-user locks and open sessions live here."""
    if settings.COOLDOWN_BACKEND == "memory":
        store = InMemoryCooldownStore()
    else:
        store = SqlCooldownStore(SessionLocal)
    return CheckInTriggerEngine(
        store=store,
        clock=Clock(resolve_timezone(settings.TIMEZONE)),
        cooldown=timedelta(hours=settings.CHECKIN_COOLDOWN_HOURS),
    )


def get_rating_repository(db: Session = Depends(get_db)) -> SqlRatingRepository:
    return SqlRatingRepository(db)


def get_analytics_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> AnalyticsService:
    return AnalyticsService(
        ratings=SqlRatingRepository(db),
        friends=SqlFriendsRepository(db),
        scores=SqlFriendshipScoreCache(db),
        badges=SqlBadgeRepository(db),
        clock=clock,
        history_days=settings.RATING_HISTORY_DAYS,
        score_ttl=timedelta(seconds=settings.FRIENDSHIP_SCORE_TTL_SECONDS),
    )
