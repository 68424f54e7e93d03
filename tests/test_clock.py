"""
Tests for the clock / calendar abstraction.
"""
from datetime import date, datetime, timedelta, timezone

import pytest

from conftest import NOW
from ten_insights.core.clock import Clock, FixedClock, resolve_timezone

_MINUS_FIVE = timezone(timedelta(hours=-5))


class TestResolveTimezone:
    @pytest.mark.parametrize("name", [None, "", "UTC", "utc"])
    def test_utc_aliases(self, name):
        assert resolve_timezone(name) is timezone.utc


class TestFixedClock:
    def test_requires_aware_instant(self):
        with pytest.raises(ValueError):
            FixedClock(datetime(2026, 3, 18, 12, 0))

    def test_today_depends_on_zone(self):
        late = datetime(2026, 3, 18, 2, 0, tzinfo=timezone.utc)
        assert FixedClock(late).today() == date(2026, 3, 18)
        assert FixedClock(late, _MINUS_FIVE).today() == date(2026, 3, 17)

    def test_advance(self):
        clock = FixedClock(NOW)
        clock.advance(timedelta(hours=13))
        assert clock.today() == date(2026, 3, 19)

    def test_viewer_zone_keeps_instant(self):
        clock = FixedClock(NOW, _MINUS_FIVE)
        assert clock.now() == NOW
        assert clock.now().utcoffset() == timedelta(hours=-5)


class TestDayBounds:
    def test_half_open_day(self):
        start, end = Clock(_MINUS_FIVE).day_bounds(date(2026, 3, 17))
        assert start == datetime(2026, 3, 17, 5, 0, tzinfo=timezone.utc)
        assert end - start == timedelta(days=1)
