from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Protocol


@dataclass(frozen=True)
class ClosureDate:
    """A day the business is closed.

    Recurring closures carry ``month``/``day`` and apply every year;
    one-off closures carry ``specific_date``.
    """

    name: str
    description: Optional[str] = None
    recurring: bool = False
    month: Optional[int] = None  # 1-12
    day: Optional[int] = None  # 1-31
    specific_date: Optional[date] = None

    def matches(self, value: date) -> bool:
        if self.recurring:
            return self.month == value.month and self.day == value.day
        return self.specific_date == value


class ClosureCalendar(Protocol):
    name: str

    def is_closure_date(self, value: date) -> bool:
        ...

    def closure_info(self, value: date) -> Optional[ClosureDate]:
        ...

    def closure_dates_for_year(self, year: int) -> list[date]:
        ...

    def closure_dates_in_range(self, start: date, end: date) -> list[date]:
        ...

    def is_date_available_for_booking(self, value: date, today: Optional[date] = None) -> bool:
        ...

    def next_available_date(self, from_date: Optional[date] = None) -> date:
        ...
