from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager
from typing import List, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from scheduler.core.errors import EventNotCancellableError, EventNotFoundError
from scheduler.integrations.closures import ClosureCalendar, get_closure_calendar
from scheduler.models import Event, RecurringTemplate
from scheduler.models.enums import EventStatus
from scheduler.services.db_service import DBService
from scheduler.services.scheduling.booking_linker import BookingLinker
from scheduler.services.scheduling.capacity import CapacityChecker
from scheduler.services.scheduling.event_factory import CreateEventParams, EventFactory
from scheduler.services.scheduling.materializer import OrderMaterializer
from scheduler.services.scheduling.template_expander import (
    CreateRecurringTemplateParams,
    TemplateExpander,
)

logger = logging.getLogger(__name__)

Identifier = Union[str, uuid.UUID]

_UNCANCELLABLE = {EventStatus.COMPLETED.value, EventStatus.IN_PROGRESS.value}


class EventCreationService:
    """Entry points of the scheduling engine.

    Every public method is one unit of work on the given session: it commits
    when it finishes and rolls back everything it wrote if it raises.
    """

    def __init__(
        self,
        session: AsyncSession,
        closures: Optional[ClosureCalendar] = None,
        default_location_id: Optional[str] = None,
    ):
        self.session = session
        self.db = DBService(session)
        self.closures = closures or get_closure_calendar()
        self.capacity = CapacityChecker(self.db)
        self.factory = EventFactory(self.db, self.closures)
        self.expander = TemplateExpander(self.db, self.closures, self.factory, self.capacity)
        self.linker = BookingLinker(self.db)
        self.materializer = OrderMaterializer(
            self.db,
            self.factory,
            self.expander,
            self.linker,
            default_location_id=default_location_id,
        )

    @asynccontextmanager
    async def _unit_of_work(self):
        try:
            yield
        except Exception:
            await self.session.rollback()
            raise
        else:
            await self.session.commit()

    async def create_event(self, params: CreateEventParams) -> Event:
        async with self._unit_of_work():
            return await self.factory.create_event(params)

    async def create_events_from_order(
        self,
        order_id: Identifier,
        location_id: Optional[Identifier] = None,
    ) -> List[Event]:
        async with self._unit_of_work():
            return await self.materializer.materialize(order_id, location_id)

    async def create_recurring_template(self, params: CreateRecurringTemplateParams) -> RecurringTemplate:
        async with self._unit_of_work():
            return await self.expander.create_template(params)

    async def generate_recurring_events(self, template_id: Identifier) -> List[Event]:
        async with self._unit_of_work():
            return await self.expander.generate(template_id)

    async def cancel_event(self, event_id: Identifier) -> Event:
        """Mark an event and its bookings cancelled. Events are never deleted."""
        async with self._unit_of_work():
            event = await self._get_event(event_id)
            return await self._cancel(event)

    async def update_event_status(self, event_id: Identifier, status: EventStatus) -> Event:
        """Move an event through its lifecycle.

        Cancelling goes through the same path as ``cancel_event`` so bookings
        and occupancy are released with it.
        """
        status = EventStatus(status)
        async with self._unit_of_work():
            event = await self._get_event(event_id)
            if status == EventStatus.CANCELLED:
                return await self._cancel(event)

            previous = event.status
            event = await self.db.update_event(event, {"status": status.value})
            logger.info(
                "Updated event status",
                extra={"event_id": str(event.id), "from": previous, "to": status.value},
            )
            return event

    async def _get_event(self, event_id: Identifier) -> Event:
        event = await self.db.get_event(event_id)
        if event is None:
            raise EventNotFoundError(str(event_id))
        return event

    async def _cancel(self, event: Event) -> Event:
        if event.status in _UNCANCELLABLE:
            raise EventNotCancellableError(str(event.id), event.status)

        cancelled = await self.db.cancel_event_bookings(event.id)
        event = await self.db.update_event(
            event,
            {"status": EventStatus.CANCELLED.value, "current_count": 0},
        )
        logger.info(
            "Cancelled event",
            extra={"event_id": str(event.id), "bookings_cancelled": cancelled},
        )
        return event
