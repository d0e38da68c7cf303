from scheduler.integrations.closures.base import ClosureCalendar, ClosureDate
from scheduler.integrations.closures.registry import get_closure_calendar
from scheduler.integrations.closures.static import (
    RECURRING_CLOSURE_DATES,
    SPECIFIC_CLOSURE_DATES,
    StaticClosureCalendar,
    parse_closure_dates,
)

__all__ = [
    "ClosureCalendar",
    "ClosureDate",
    "RECURRING_CLOSURE_DATES",
    "SPECIFIC_CLOSURE_DATES",
    "StaticClosureCalendar",
    "get_closure_calendar",
    "parse_closure_dates",
]
