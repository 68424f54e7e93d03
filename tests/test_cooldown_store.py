"""
Tests for the persisted check-in cooldown (SQLite-backed).
"""
import uuid
from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError

from conftest import NOW, TestingSessionLocal
from ten_insights.core.errors import CooldownStoreError
from ten_insights.services.cooldown_store import InMemoryCooldownStore, SqlCooldownStore


def _user() -> str:
    return f"cd_{uuid.uuid4().hex[:10]}"


def _broken_factory():
    raise OperationalError("SELECT 1", {}, Exception("database is locked"))


class TestSqlCooldownStore:
    def test_unknown_user_has_no_cooldown(self):
        assert SqlCooldownStore(TestingSessionLocal).get_last_triggered(_user()) is None

    def test_round_trip_is_timezone_aware(self):
        store = SqlCooldownStore(TestingSessionLocal)
        user = _user()
        store.set_last_triggered(user, NOW)
        stored = store.get_last_triggered(user)
        assert stored == NOW
        assert stored.tzinfo is not None

    def test_overwrite_and_clear(self):
        store = SqlCooldownStore(TestingSessionLocal)
        user = _user()
        store.set_last_triggered(user, NOW - timedelta(days=3))
        store.set_last_triggered(user, NOW)
        assert store.get_last_triggered(user) == NOW
        store.clear(user)
        assert store.get_last_triggered(user) is None

    def test_shared_between_store_instances(self):
        user = _user()
        SqlCooldownStore(TestingSessionLocal).set_last_triggered(user, NOW)
        assert SqlCooldownStore(TestingSessionLocal).get_last_triggered(user) == NOW

    @pytest.mark.parametrize("call,operation", [
        (lambda s: s.get_last_triggered("u1"), "read"),
        (lambda s: s.set_last_triggered("u1", NOW), "write"),
        (lambda s: s.clear("u1"), "reset"),
    ])
    def test_database_errors_become_cooldown_errors(self, call, operation):
        with pytest.raises(CooldownStoreError) as exc_info:
            call(SqlCooldownStore(_broken_factory))
        assert exc_info.value.details["operation"] == operation


class TestInMemoryCooldownStore:
    def test_set_get_clear(self):
        store = InMemoryCooldownStore()
        store.set_last_triggered("u1", NOW)
        assert store.get_last_triggered("u1") == NOW
        store.clear("u1")
        assert store.get_last_triggered("u1") is None
