from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, HTTPException

from scheduler.integrations.closures import get_closure_calendar

router = APIRouter()

MAX_RANGE = timedelta(days=366)


def _serialize_closure(calendar, day: date) -> dict:
    info = calendar.closure_info(day)
    return {
        "date": day.isoformat(),
        "name": info.name if info else None,
        "description": info.description if info else None,
    }


@router.get("/closures")
async def list_closures(
    year: Optional[int] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
):
    """Closure dates for a year, or for an inclusive start/end range"""
    calendar = get_closure_calendar()
    if start is not None or end is not None:
        if start is None or end is None:
            raise HTTPException(status_code=400, detail="Both start and end are required")
        if end < start:
            raise HTTPException(status_code=400, detail="End date must not be before start date")
        if end - start > MAX_RANGE:
            raise HTTPException(status_code=400, detail="Range is limited to one year")
        days = calendar.closure_dates_in_range(start, end)
    else:
        days = calendar.closure_dates_for_year(year or date.today().year)

    return {
        "total": len(days),
        "closures": [_serialize_closure(calendar, d) for d in days],
    }


@router.get("/closures/availability")
async def check_availability(day: date, today: Optional[date] = None):
    """Whether a day can be booked, and the next day that can"""
    calendar = get_closure_calendar()
    info = calendar.closure_info(day)
    return {
        "date": day.isoformat(),
        "available": calendar.is_date_available_for_booking(day, today=today),
        "closure": info.name if info else None,
        "next_available_date": calendar.next_available_date(max(day, today or date.today())).isoformat(),
    }
