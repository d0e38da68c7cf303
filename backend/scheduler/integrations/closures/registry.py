from __future__ import annotations

from typing import Optional

from scheduler.core import config
from scheduler.integrations.closures.base import ClosureCalendar
from scheduler.integrations.closures.static import (
    SPECIFIC_CLOSURE_DATES,
    StaticClosureCalendar,
    parse_closure_dates,
)


_calendar: Optional[ClosureCalendar] = None


def get_closure_calendar() -> ClosureCalendar:
    """Return the shared closure calendar, built once from configuration."""
    global _calendar
    if _calendar is None:
        _calendar = StaticClosureCalendar(
            specific=SPECIFIC_CLOSURE_DATES + tuple(parse_closure_dates(config.CLOSURE_DATES)),
        )
    return _calendar
