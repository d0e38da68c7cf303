"""Wall-clock <-> instant conversions in a location's timezone.

Persisted instants are naive UTC; everything a human chose (camp days,
"16:00" session times, closure dates) is a wall-clock value in the
location's zone. These helpers are the only place the two meet.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo

from scheduler.core.errors import InvalidTimeOfDayError

_TIME_OF_DAY = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")


def parse_time_of_day(value: str) -> time:
    """Parse a 24h ``"HH:MM"`` string."""
    match = _TIME_OF_DAY.match((value or "").strip())
    if not match:
        raise InvalidTimeOfDayError(value)
    return time(hour=int(match.group(1)), minute=int(match.group(2)))


def build_zoned_datetime(day: date, time_of_day: str, tz_name: str) -> datetime:
    """Return the aware instant for ``time_of_day`` on ``day`` in ``tz_name``."""
    return datetime.combine(day, parse_time_of_day(time_of_day), tzinfo=ZoneInfo(tz_name))


def to_utc_naive(value: datetime) -> datetime:
    """Normalise an instant for storage. Naive input is taken to be UTC already."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def from_utc_naive(value: datetime, tz_name: str) -> datetime:
    """Inverse of ``to_utc_naive``: stored instant -> aware local time."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(ZoneInfo(tz_name))


def local_date(value: datetime, tz_name: str) -> date:
    """Calendar date of an instant as seen at the location."""
    return from_utc_naive(value, tz_name).date()


def day_of_week(day: date) -> int:
    """Weekday number with Sunday = 0 ... Saturday = 6."""
    return (day.weekday() + 1) % 7
