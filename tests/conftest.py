"""
Shared pytest fixtures.

Uses a file-based SQLite database so no Postgres is required for tests.
Time is pinned: every request sees NOW (Wednesday 2026-03-18 12:00 UTC)
unless it passes `?tz=`.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_ten_insights.db")

import random
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest
from fastapi import Query
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from ten_insights.core.clock import Clock, FixedClock, resolve_timezone
from ten_insights.core.errors import CooldownStoreError
from ten_insights.core.dependencies import get_checkin_engine, get_clock
from ten_insights.db.base import Base, get_db
from ten_insights.main import app
from ten_insights.services.checkin_engine import CheckInTriggerEngine
from ten_insights.services.cooldown_store import InMemoryCooldownStore
from ten_insights.services.domain import RatingEntry

SQLITE_URL = os.environ["DATABASE_URL"]
NOW = datetime(2026, 3, 18, 12, 0, tzinfo=timezone.utc)

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def override_get_clock(tz: Optional[str] = Query(default=None)) -> Clock:
    return FixedClock(NOW, resolve_timezone(tz or "UTC"))


class BrokenStore(InMemoryCooldownStore):
    """Cooldown store whose reads and/or writes fail."""

    def __init__(self, fail_reads: bool = False, fail_writes: bool = False):
        super().__init__()
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes

    def get_last_triggered(self, user_id):
        if self.fail_reads:
            raise CooldownStoreError(user_id, "read")
        return super().get_last_triggered(user_id)

    def set_last_triggered(self, user_id, ts):
        if self.fail_writes:
            raise CooldownStoreError(user_id, "write")
        super().set_last_triggered(user_id, ts)


def ratings_by_day(values: list[int], end: datetime = NOW) -> list[RatingEntry]:
    """One rating per day, oldest first, the last one at `end`."""
    n = len(values)
    return [
        RatingEntry(value=v, timestamp=end - timedelta(days=n - 1 - i))
        for i, v in enumerate(values)
    ]


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def clock():
    return FixedClock(NOW)


@pytest.fixture()
def checkin_engine(clock):
    return CheckInTriggerEngine(
        store=InMemoryCooldownStore(),
        clock=clock,
        rng=random.Random(7),
    )


@pytest.fixture()
def user_id():
    # Tests share one database file; a fresh user keeps them independent
    return f"u_{uuid.uuid4().hex[:12]}"


@pytest.fixture()
def client(db, checkin_engine):
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = override_get_clock
    app.dependency_overrides[get_checkin_engine] = lambda: checkin_engine
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
