from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Iterable, Optional

from scheduler.integrations.closures.base import ClosureDate

logger = logging.getLogger(__name__)


RECURRING_CLOSURE_DATES: tuple[ClosureDate, ...] = (
    # Christmas/New Year period
    ClosureDate("Christmas Day", "Closed for Christmas", recurring=True, month=12, day=25),
    ClosureDate("Boxing Day", "Closed for Boxing Day", recurring=True, month=12, day=26),
    ClosureDate("Christmas Closure - Day 3", "Closed during the Christmas period", recurring=True, month=12, day=27),
    ClosureDate("Christmas Closure - Day 4", "Closed during the Christmas period", recurring=True, month=12, day=28),
    ClosureDate("Christmas Closure - Day 5", "Closed during the Christmas period", recurring=True, month=12, day=29),
    ClosureDate("Christmas Closure - Day 6", "Closed during the Christmas period", recurring=True, month=12, day=30),
    ClosureDate("New Year's Day", "Closed for New Year's Day", recurring=True, month=1, day=1),
    ClosureDate("Australia Day", "Closed for Australia Day", recurring=True, month=1, day=26),
)

# One-off closures (facility maintenance, special events). Extra entries can
# be supplied through the CLOSURE_DATES environment variable.
SPECIFIC_CLOSURE_DATES: tuple[ClosureDate, ...] = ()

BOOKING_LOOKAHEAD_DAYS = 90


def parse_closure_dates(raw: str) -> list[ClosureDate]:
    """Parse ``"YYYY-MM-DD=Name;YYYY-MM-DD=Name"`` into one-off closures."""
    closures: list[ClosureDate] = []
    for chunk in (raw or "").split(";"):
        chunk = chunk.strip()
        if not chunk:
            continue
        day_str, _, name = chunk.partition("=")
        try:
            specific = date.fromisoformat(day_str.strip())
        except ValueError:
            logger.warning("Ignoring malformed closure date", extra={"value": chunk})
            continue
        closures.append(ClosureDate(name=name.strip() or "Business closure", specific_date=specific))
    return closures


class StaticClosureCalendar:
    """Closure calendar backed by the configured closure lists."""

    name = "static"

    def __init__(
        self,
        recurring: Iterable[ClosureDate] = RECURRING_CLOSURE_DATES,
        specific: Iterable[ClosureDate] = SPECIFIC_CLOSURE_DATES,
    ) -> None:
        self.recurring = tuple(recurring)
        self.specific = tuple(specific)

    def is_closure_date(self, value: date) -> bool:
        return self.closure_info(value) is not None

    def closure_info(self, value: date) -> Optional[ClosureDate]:
        # Recurring closures win when a one-off lands on the same day
        for closure in self.recurring:
            if closure.matches(value):
                return closure
        for closure in self.specific:
            if closure.matches(value):
                return closure
        return None

    def closure_dates_for_year(self, year: int) -> list[date]:
        dates = [date(year, c.month, c.day) for c in self.recurring if c.month and c.day]
        dates.extend(
            c.specific_date
            for c in self.specific
            if c.specific_date and c.specific_date.year == year
        )
        return sorted(set(dates))

    def closure_dates_in_range(self, start: date, end: date) -> list[date]:
        """All closure dates between start and end, both inclusive."""
        dates = []
        current = start
        while current <= end:
            if self.is_closure_date(current):
                dates.append(current)
            current += timedelta(days=1)
        return dates

    def is_date_available_for_booking(self, value: date, today: Optional[date] = None) -> bool:
        """Not in the past, not a weekend and not a closure date."""
        today = today or date.today()
        if value < today:
            return False
        if value.weekday() >= 5:
            return False
        return not self.is_closure_date(value)

    def next_available_date(self, from_date: Optional[date] = None) -> date:
        start = from_date or date.today()
        current = start
        for _ in range(BOOKING_LOOKAHEAD_DAYS):
            if self.is_date_available_for_booking(current, today=start):
                return current
            current += timedelta(days=1)
        return start + timedelta(days=BOOKING_LOOKAHEAD_DAYS)
