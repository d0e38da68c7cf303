from __future__ import annotations

import logging

from scheduler.core.errors import EventFullError
from scheduler.models import Booking, Event, OrderItem
from scheduler.models.enums import BookingStatus
from scheduler.services.db_service import DBService

logger = logging.getLogger(__name__)


class BookingLinker:
    """Attaches the Booking for an order item to the Event that fulfils it.

    Not idempotent: every call takes one more seat on the event, so callers
    must link each (order item, event) pair at most once.
    """

    def __init__(self, db: DBService):
        self.db = db

    async def link(self, order_item: OrderItem, event: Event) -> Booking:
        booking = await self.db.find_unlinked_booking(
            order_item.student_id,
            order_item.product_id,
            order_item.booking_date,
        )

        if booking is not None:
            booking = await self.db.update_booking(
                booking,
                {"event_id": event.id, "status": BookingStatus.CONFIRMED.value},
            )
        else:
            # Checkout normally creates the booking; this is the fallback
            length = event.end_datetime - event.start_datetime
            booking = await self.db.create_booking(
                {
                    "student_id": order_item.student_id,
                    "product_id": order_item.product_id,
                    "location_id": event.location_id,
                    "event_id": event.id,
                    "start_date": order_item.booking_date,
                    "end_date": order_item.booking_date + length,
                    "status": BookingStatus.CONFIRMED.value,
                    "total_price": order_item.price,
                    "notes": f"Auto-created from event linking - Order: {order_item.order_id}",
                }
            )
            logger.info(
                "Created fallback booking",
                extra={"booking_id": str(booking.id), "order_id": str(order_item.order_id)},
            )

        if not await self.db.reserve_seat(event):
            raise EventFullError(str(event.id))

        return booking
