from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional, Union

from scheduler.core.errors import InvalidTemplateError, MissingLocationError
from scheduler.integrations.closures import ClosureCalendar
from scheduler.models import Event, RecurringTemplate
from scheduler.models.enums import EventType
from scheduler.services.db_service import DBService
from scheduler.services.scheduling.capacity import CapacityChecker
from scheduler.services.scheduling.datetime_builder import (
    build_zoned_datetime,
    day_of_week,
    parse_time_of_day,
)
from scheduler.services.scheduling.event_factory import CreateEventParams, EventFactory

logger = logging.getLogger(__name__)


DEFAULT_HORIZON = timedelta(weeks=12)


@dataclass
class CreateRecurringTemplateParams:
    name: str
    start_time: str  # HH:MM
    end_time: str  # HH:MM
    days_of_week: List[int]  # 0=Sunday ... 6=Saturday
    start_date: date
    location_id: Union[str, uuid.UUID, None]
    event_type: EventType = EventType.RECURRING_SESSION
    duration: int = 60
    description: Optional[str] = None
    end_date: Optional[date] = None
    max_capacity: int = 10
    age_min: Optional[int] = None
    age_max: Optional[int] = None
    is_active: bool = True


def validate_template_params(params: CreateRecurringTemplateParams) -> None:
    """Reject rules that could never expand into sensible events."""
    if not params.days_of_week:
        raise InvalidTemplateError("At least one day must be selected")
    if any(not isinstance(d, int) or d < 0 or d > 6 for d in params.days_of_week):
        raise InvalidTemplateError("Days of week must be between 0 (Sunday) and 6 (Saturday)")
    if parse_time_of_day(params.end_time) <= parse_time_of_day(params.start_time):
        raise InvalidTemplateError("End time must be after start time")
    if params.end_date is not None and params.end_date < params.start_date:
        raise InvalidTemplateError("End date must be after start date")
    if params.max_capacity is not None and params.max_capacity < 1:
        raise InvalidTemplateError("Capacity must be at least 1")


def candidate_dates(template: RecurringTemplate) -> List[date]:
    """Days in the template window that fall on one of its weekdays.

    The window starts at start_date and stops *before* end_date (12 weeks
    when the template is open-ended).
    """
    current = template.start_date
    end = template.end_date or current + DEFAULT_HORIZON
    wanted = set(template.days_of_week or [])
    dates = []
    while current < end:
        if day_of_week(current) in wanted:
            dates.append(current)
        current += timedelta(days=1)
    return dates


class TemplateExpander:
    """Turns a weekly RecurringTemplate into concrete Events."""

    def __init__(
        self,
        db: DBService,
        closures: ClosureCalendar,
        factory: EventFactory,
        capacity: CapacityChecker,
    ):
        self.db = db
        self.closures = closures
        self.factory = factory
        self.capacity = capacity

    async def create_template(self, params: CreateRecurringTemplateParams) -> RecurringTemplate:
        validate_template_params(params)
        if not params.location_id:
            raise MissingLocationError()
        location = await self.db.get_location(params.location_id)
        if location is None:
            raise MissingLocationError(str(params.location_id))

        return await self.db.create_template(
            {
                "name": params.name,
                "description": params.description,
                "event_type": EventType(params.event_type).value,
                "start_time": params.start_time,
                "end_time": params.end_time,
                "duration": params.duration,
                "days_of_week": sorted(set(params.days_of_week)),
                "start_date": params.start_date,
                "end_date": params.end_date,
                "max_capacity": params.max_capacity,
                "location_id": location.id,
                "age_min": params.age_min,
                "age_max": params.age_max,
                "is_active": params.is_active,
            }
        )

    async def generate(self, template_id: Union[str, uuid.UUID]) -> List[Event]:
        template = await self.db.get_template(template_id)
        if template is None or not template.is_active:
            logger.info("Template missing or inactive; nothing to generate", extra={"template_id": str(template_id)})
            return []

        location = await self.db.get_location(template.location_id)
        if location is None:
            raise MissingLocationError(str(template.location_id))

        events: List[Event] = []
        for day in candidate_dates(template):
            if self.closures.is_closure_date(day):
                info = self.closures.closure_info(day)
                logger.info(
                    "Skipping recurring session on closure date",
                    extra={"template_id": str(template.id), "day": day.isoformat(), "closure": info.name if info else None},
                )
                continue

            start = build_zoned_datetime(day, template.start_time, location.timezone)
            end = build_zoned_datetime(day, template.end_time, location.timezone)

            # Silent skip: a partial schedule is an expected outcome
            if await self.capacity.has_conflict(start, end, template.location_id):
                logger.info(
                    "Skipping recurring session; location at capacity",
                    extra={"template_id": str(template.id), "day": day.isoformat()},
                )
                continue

            event = await self.factory.create_event(
                CreateEventParams(
                    title=template.name,
                    description=template.description,
                    event_type=EventType(template.event_type),
                    start_datetime=start,
                    end_datetime=end,
                    location_id=template.location_id,
                    max_capacity=template.max_capacity,
                    age_min=template.age_min,
                    age_max=template.age_max,
                    is_recurring=True,
                    recurring_template_id=template.id,
                )
            )
            events.append(event)

        logger.info(
            "Generated recurring events",
            extra={"template_id": str(template.id), "events_created": len(events)},
        )
        return events
