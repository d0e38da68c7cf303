from __future__ import annotations

from typing import Any, Dict

from scheduler.models import Event, RecurringTemplate


def _iso(value):
    return value.isoformat() if value else None


def serialize_event(event: Event) -> Dict[str, Any]:
    return {
        "id": str(event.id),
        "title": event.title,
        "description": event.description,
        "type": event.event_type,
        "status": event.status,
        "start_datetime": _iso(event.start_datetime),
        "end_datetime": _iso(event.end_datetime),
        "location_id": str(event.location_id),
        "max_capacity": event.max_capacity,
        "current_count": event.current_count,
        "age_min": event.age_min,
        "age_max": event.age_max,
        "is_recurring": event.is_recurring,
        "recurring_template_id": str(event.recurring_template_id) if event.recurring_template_id else None,
    }


def serialize_template(template: RecurringTemplate) -> Dict[str, Any]:
    return {
        "id": str(template.id),
        "name": template.name,
        "description": template.description,
        "type": template.event_type,
        "start_time": template.start_time,
        "end_time": template.end_time,
        "duration": template.duration,
        "days_of_week": template.days_of_week,
        "start_date": _iso(template.start_date),
        "end_date": _iso(template.end_date),
        "max_capacity": template.max_capacity,
        "location_id": str(template.location_id),
        "age_min": template.age_min,
        "age_max": template.age_max,
        "is_active": template.is_active,
    }
