"""
Persisted check-in cooldown: one `last_triggered_at` per user.

Both implementations raise CooldownStoreError on failure; the trigger
engine decides what a failure means (reads fail closed).
"""
from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ten_insights.core.errors import CooldownStoreError
from ten_insights.models.checkin_cooldown import CheckInCooldown

logger = logging.getLogger(__name__)


class CooldownStore(Protocol):
    def get_last_triggered(self, user_id: str) -> Optional[datetime]: ...

    def set_last_triggered(self, user_id: str, ts: datetime) -> None: ...

    def clear(self, user_id: str) -> None: ...


def _as_aware(ts: Optional[datetime]) -> Optional[datetime]:
    # SQLite drops tzinfo; everything is stored in UTC
    if ts is not None and ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


class SqlCooldownStore:
    """Cooldown rows in `checkin_cooldowns`, shared by every worker."""

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def get_last_triggered(self, user_id: str) -> Optional[datetime]:
        try:
            with self._session_factory() as db:
                row = db.get(CheckInCooldown, user_id)
                return _as_aware(row.last_triggered_at) if row else None
        except SQLAlchemyError as exc:
            logger.error("Cooldown read failed for user %s: %s", user_id, exc)
            raise CooldownStoreError(user_id, "read") from exc

    def set_last_triggered(self, user_id: str, ts: datetime) -> None:
        ts = ts.astimezone(timezone.utc)
        try:
            with self._session_factory() as db:
                row = db.get(CheckInCooldown, user_id)
                if row is None:
                    db.add(CheckInCooldown(user_id=user_id, last_triggered_at=ts))
                else:
                    row.last_triggered_at = ts
                db.commit()
        except SQLAlchemyError as exc:
            logger.error("Cooldown write failed for user %s: %s", user_id, exc)
            raise CooldownStoreError(user_id, "write") from exc

    def clear(self, user_id: str) -> None:
        try:
            with self._session_factory() as db:
                row = db.get(CheckInCooldown, user_id)
                if row is not None:
                    row.last_triggered_at = None
                    db.commit()
        except SQLAlchemyError as exc:
            logger.error("Cooldown reset failed for user %s: %s", user_id, exc)
            raise CooldownStoreError(user_id, "reset") from exc


class InMemoryCooldownStore:
    """Process-local store. Only consistent for a single worker."""

    def __init__(self) -> None:
        self._values: dict[str, datetime] = {}
        self._lock = threading.Lock()

    def get_last_triggered(self, user_id: str) -> Optional[datetime]:
        with self._lock:
            return self._values.get(user_id)

    def set_last_triggered(self, user_id: str, ts: datetime) -> None:
        with self._lock:
            self._values[user_id] = ts

    def clear(self, user_id: str) -> None:
        with self._lock:
            self._values.pop(user_id, None)
