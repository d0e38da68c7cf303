from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from scheduler.core import config
from scheduler.core.database import get_db
from scheduler.core.errors import DomainError
from scheduler.services.retry import retry_operation
from scheduler.services.scheduling import EventCreationService
from scheduler.api.v1.serializers import serialize_event

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/orders/{order_id}/materialize")
async def materialize_order(
    order_id: str,
    location_id: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    """Turn a paid order into calendar events.

    Called from the payment webhook. Always acknowledges: failures are logged
    and reported in the body so the gateway does not keep redelivering.
    """
    service = EventCreationService(db)
    try:
        events = await retry_operation(
            lambda: service.create_events_from_order(order_id, location_id),
            max_retries=config.MATERIALIZE_MAX_RETRIES,
            delay=config.MATERIALIZE_RETRY_DELAY,
        )
    except DomainError as e:
        logger.exception("Failed to create calendar events", extra={"order_id": order_id})
        return {"ok": False, "order_id": order_id, "error": {"code": e.code.value, "message": e.message}}
    except Exception:
        logger.exception("Failed to create calendar events after retries", extra={"order_id": order_id})
        return {"ok": False, "order_id": order_id, "error": {"code": "INTERNAL", "message": "Calendar events could not be created"}}

    logger.info(
        "Created calendar events for order",
        extra={"order_id": order_id, "events": len(events)},
    )
    return {
        "ok": True,
        "order_id": order_id,
        "events_created": len(events),
        "events": [serialize_event(e) for e in events],
    }
