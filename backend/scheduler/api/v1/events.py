from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, field_validator, model_validator
from sqlalchemy.ext.asyncio import AsyncSession

from scheduler.core.database import get_db
from scheduler.core.errors import DomainError
from scheduler.models.enums import EventStatus, EventType
from scheduler.services.db_service import DBService
from scheduler.services.scheduling import (
    CreateEventParams,
    CreateRecurringTemplateParams,
    EventCreationService,
)
from scheduler.services.scheduling.datetime_builder import to_utc_naive
from scheduler.api.v1.errors import http_error
from scheduler.api.v1.serializers import serialize_event, serialize_template

router = APIRouter()

TIME_PATTERN = r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$"


def _minutes(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


class CreateEventPayload(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    type: EventType
    start_datetime: datetime
    end_datetime: datetime
    location_id: str = Field(..., min_length=1)
    max_capacity: Optional[int] = Field(None, ge=1, le=50)
    age_min: Optional[int] = Field(None, ge=3, le=18)
    age_max: Optional[int] = Field(None, ge=3, le=18)
    instructor_notes: Optional[str] = None

    @model_validator(mode="after")
    def _check_window(self):
        if to_utc_naive(self.end_datetime) <= to_utc_naive(self.start_datetime):
            raise ValueError("End time must be after start time")
        return self


class UpdateEventPayload(BaseModel):
    status: EventStatus


class CreateTemplatePayload(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    type: EventType = EventType.RECURRING_SESSION
    start_time: str = Field(..., pattern=TIME_PATTERN)
    end_time: str = Field(..., pattern=TIME_PATTERN)
    duration: int = Field(..., ge=15, le=480)  # minutes
    days_of_week: list[int] = Field(..., min_length=1)
    start_date: date
    end_date: Optional[date] = None
    max_capacity: int = Field(10, ge=1, le=50)
    location_id: str = Field(..., min_length=1)
    age_min: Optional[int] = Field(None, ge=3, le=18)
    age_max: Optional[int] = Field(None, ge=3, le=18)

    @field_validator("days_of_week")
    @classmethod
    def _check_days(cls, value: list[int]) -> list[int]:
        if any(d < 0 or d > 6 for d in value):
            raise ValueError("Days of week must be between 0 (Sunday) and 6 (Saturday)")
        return value

    @model_validator(mode="after")
    def _check_ranges(self):
        if _minutes(self.end_time) <= _minutes(self.start_time):
            raise ValueError("End time must be after start time")
        if self.end_date is not None and self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        return self


# Template routes are registered before /{event_id} so "templates" is not
# captured as an id.

@router.get("/events/templates")
async def list_templates(
    active: Optional[bool] = None,
    type: Optional[EventType] = None,
    location_id: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    """List recurring templates, newest first"""
    templates = await DBService(db).list_templates(
        is_active=active,
        event_type=type.value if type else None,
        location_id=location_id,
    )
    return {
        "total": len(templates),
        "templates": [serialize_template(t) for t in templates],
    }


@router.post("/events/templates", status_code=201)
async def create_template(
    payload: CreateTemplatePayload,
    generate_events: bool = False,
    db: AsyncSession = Depends(get_db),
):
    """Create a recurring template, optionally expanding it straight away"""
    service = EventCreationService(db)
    try:
        template = await service.create_recurring_template(
            CreateRecurringTemplateParams(
                name=payload.name,
                description=payload.description,
                event_type=payload.type,
                start_time=payload.start_time,
                end_time=payload.end_time,
                duration=payload.duration,
                days_of_week=payload.days_of_week,
                start_date=payload.start_date,
                end_date=payload.end_date,
                max_capacity=payload.max_capacity,
                location_id=payload.location_id,
                age_min=payload.age_min,
                age_max=payload.age_max,
            )
        )
        events = await service.generate_recurring_events(template.id) if generate_events else []
    except DomainError as e:
        raise http_error(e)

    return {
        "template": serialize_template(template),
        "events_generated": len(events),
        "events": [serialize_event(e) for e in events] if generate_events else None,
    }


@router.post("/events/templates/{template_id}/generate")
async def generate_template_events(template_id: str, db: AsyncSession = Depends(get_db)):
    """Expand an existing template into events. Unknown or inactive templates yield none."""
    try:
        events = await EventCreationService(db).generate_recurring_events(template_id)
    except DomainError as e:
        raise http_error(e)

    return {
        "message": f"Generated {len(events)} events from template",
        "events_created": len(events),
        "events": [serialize_event(e) for e in events],
    }


@router.get("/events")
async def list_events(
    location_id: Optional[str] = None,
    status: Optional[EventStatus] = None,
    type: Optional[EventType] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    limit: int = 100,
    db: AsyncSession = Depends(get_db),
):
    """List events in a window, ordered by start time"""
    events = await DBService(db).list_events(
        location_id=location_id,
        status=status.value if status else None,
        event_type=type.value if type else None,
        start=to_utc_naive(start) if start else None,
        end=to_utc_naive(end) if end else None,
        limit=limit,
    )
    return {
        "total": len(events),
        "events": [serialize_event(e) for e in events],
    }


@router.post("/events", status_code=201)
async def create_event(payload: CreateEventPayload, db: AsyncSession = Depends(get_db)):
    """Create a single event"""
    try:
        event = await EventCreationService(db).create_event(
            CreateEventParams(
                title=payload.title,
                description=payload.description,
                event_type=payload.type,
                start_datetime=payload.start_datetime,
                end_datetime=payload.end_datetime,
                location_id=payload.location_id,
                max_capacity=payload.max_capacity,
                age_min=payload.age_min,
                age_max=payload.age_max,
                instructor_notes=payload.instructor_notes,
            )
        )
    except DomainError as e:
        raise http_error(e)
    return serialize_event(event)


@router.get("/events/{event_id}")
async def get_event(event_id: str, db: AsyncSession = Depends(get_db)):
    event = await DBService(db).get_event(event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return serialize_event(event)


@router.put("/events/{event_id}")
async def update_event(event_id: str, payload: UpdateEventPayload, db: AsyncSession = Depends(get_db)):
    """Change an event's status"""
    try:
        event = await EventCreationService(db).update_event_status(event_id, payload.status)
    except DomainError as e:
        raise http_error(e)
    return serialize_event(event)


@router.delete("/events/{event_id}")
async def cancel_event(event_id: str, db: AsyncSession = Depends(get_db)):
    """Cancel an event and its bookings. Events are never deleted."""
    try:
        event = await EventCreationService(db).cancel_event(event_id)
    except DomainError as e:
        raise http_error(e)
    return serialize_event(event)
