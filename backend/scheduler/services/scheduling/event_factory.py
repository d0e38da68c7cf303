from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from scheduler.core.errors import (
    ClosureViolationError,
    InvalidEventWindowError,
    MissingLocationError,
    WeekendViolationError,
)
from scheduler.integrations.closures import ClosureCalendar
from scheduler.models import Event
from scheduler.models.enums import EventStatus, EventType
from scheduler.services.db_service import DBService
from scheduler.services.scheduling.datetime_builder import local_date, to_utc_naive

logger = logging.getLogger(__name__)


DEFAULT_CAPACITY = 10
TYPE_CAPACITY = {
    EventType.CAMP: 15,
    EventType.BIRTHDAY: 12,
}


@dataclass
class CreateEventParams:
    title: str
    event_type: EventType
    start_datetime: datetime
    end_datetime: datetime
    location_id: Union[str, uuid.UUID, None]
    description: Optional[str] = None
    max_capacity: Optional[int] = None
    age_min: Optional[int] = None
    age_max: Optional[int] = None
    is_recurring: bool = False
    recurring_template_id: Optional[uuid.UUID] = None
    instructor_notes: Optional[str] = None


def default_capacity_for(event_type: EventType) -> int:
    return TYPE_CAPACITY.get(EventType(event_type), DEFAULT_CAPACITY)


class EventFactory:
    """Creates exactly one Event after checking the calendar rules.

    Capacity conflicts are *not* checked here; callers that need them
    (template expansion) ask the CapacityChecker first.
    """

    def __init__(self, db: DBService, closures: ClosureCalendar):
        self.db = db
        self.closures = closures

    async def create_event(self, params: CreateEventParams) -> Event:
        if not params.location_id:
            raise MissingLocationError()
        location = await self.db.get_location(params.location_id)
        if location is None:
            raise MissingLocationError(str(params.location_id))

        start = to_utc_naive(params.start_datetime)
        end = to_utc_naive(params.end_datetime)
        if start >= end:
            raise InvalidEventWindowError()

        # Calendar rules apply to the day as seen at the venue
        day = local_date(start, location.timezone)
        if self.closures.is_closure_date(day):
            info = self.closures.closure_info(day)
            raise ClosureViolationError(day, info.name if info else None)

        event_type = EventType(params.event_type)
        if event_type == EventType.CAMP and day.weekday() >= 5:
            raise WeekendViolationError(day)

        event = await self.db.create_event(
            {
                "title": params.title,
                "description": params.description,
                "event_type": event_type.value,
                "status": EventStatus.SCHEDULED.value,
                "start_datetime": start,
                "end_datetime": end,
                "location_id": location.id,
                "max_capacity": params.max_capacity or default_capacity_for(event_type),
                "current_count": 0,
                "age_min": params.age_min,
                "age_max": params.age_max,
                "is_recurring": params.is_recurring,
                "recurring_template_id": params.recurring_template_id,
                "instructor_notes": params.instructor_notes,
            }
        )
        logger.info(
            "Created event",
            extra={"event_id": str(event.id), "event_type": event_type.value, "day": day.isoformat()},
        )
        return event
