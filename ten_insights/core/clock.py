"""
Clock / calendar abstraction.

Everything that asks "what is now" or "which calendar day is this" goes
through a Clock so tests can pin today and results don't depend on the
server's local timezone.
"""
from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ten_insights.core.errors import InvalidTimezoneError


def resolve_timezone(name: Optional[str]) -> tzinfo:
    """Map an IANA zone name to a tzinfo. Empty / "UTC" never touches tzdata."""
    if not name or name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise InvalidTimezoneError(name)


class Clock:
    """Wall clock bound to the viewer's calendar."""

    def __init__(self, tz: tzinfo = timezone.utc):
        self.tz = tz

    def now(self) -> datetime:
        return datetime.now(tz=self.tz)

    def today(self) -> date:
        return self.local_date(self.now())

    def local_date(self, ts: datetime) -> date:
        return ts.astimezone(self.tz).date()

    def day_bounds(self, day: date) -> tuple[datetime, datetime]:
        """[start, end) of a calendar day in the viewer's zone."""
        start = datetime.combine(day, time.min, tzinfo=self.tz)
        end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=self.tz)
        return start, end

    def weekday(self, ts: datetime) -> int:
        """1 = Sunday ... 7 = Saturday."""
        return self.local_date(ts).isoweekday() % 7 + 1


class FixedClock(Clock):
    """A clock frozen at a given instant."""

    def __init__(self, instant: datetime, tz: Optional[tzinfo] = None):
        if instant.tzinfo is None:
            raise ValueError("FixedClock needs a timezone-aware instant")
        super().__init__(tz or instant.tzinfo)
        self.instant = instant

    def now(self) -> datetime:
        return self.instant.astimezone(self.tz)

    def advance(self, delta: timedelta) -> None:
        self.instant = self.instant + delta
