from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from scheduler.models import (
    Booking,
    Event,
    Location,
    Order,
    OrderItem,
    OrderMaterialization,
    RecurringTemplate,
)
from scheduler.models.enums import BookingStatus, EventStatus
from typing import Optional, List, Sequence, Union
from datetime import datetime
import uuid

Identifier = Union[str, uuid.UUID]


def _as_uuid(value: Identifier) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


class DBService:
    """
    Service for database operations.

    Writes are flushed, not committed: the caller owns the transaction so a
    whole order (or template expansion) lands or rolls back together.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _add(self, instance):
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    # ==================== LOCATIONS ====================

    async def get_location(self, location_id: Identifier) -> Optional[Location]:
        """Get location by ID"""
        l_uuid = _as_uuid(location_id)
        if l_uuid is None:
            return None

        result = await self.session.execute(
            select(Location).where(Location.id == l_uuid)
        )
        return result.scalar_one_or_none()

    async def get_location_by_name(self, name: str) -> Optional[Location]:
        result = await self.session.execute(
            select(Location).where(Location.name == name).limit(1)
        )
        return result.scalars().first()

    async def create_location(self, data: dict) -> Location:
        """Create new location"""
        return await self._add(Location(**data))

    # ==================== ORDERS ====================

    async def get_order_with_items(self, order_id: Identifier) -> Optional[Order]:
        """Get order by ID with items, products and students eagerly loaded"""
        o_uuid = _as_uuid(order_id)
        if o_uuid is None:
            return None

        result = await self.session.execute(
            select(Order)
            .where(Order.id == o_uuid)
            .options(
                selectinload(Order.items).selectinload(OrderItem.product),
                selectinload(Order.items).selectinload(OrderItem.student),
            )
        )
        return result.scalar_one_or_none()

    async def get_materialization(self, order_id: Identifier) -> Optional[OrderMaterialization]:
        o_uuid = _as_uuid(order_id)
        if o_uuid is None:
            return None

        result = await self.session.execute(
            select(OrderMaterialization).where(OrderMaterialization.order_id == o_uuid)
        )
        return result.scalar_one_or_none()

    async def create_materialization(self, data: dict) -> OrderMaterialization:
        return await self._add(OrderMaterialization(**data))

    # ==================== EVENTS ====================

    async def create_event(self, data: dict) -> Event:
        """Create new event"""
        return await self._add(Event(**data))

    async def get_event(self, event_id: Identifier) -> Optional[Event]:
        """Get event by ID"""
        e_uuid = _as_uuid(event_id)
        if e_uuid is None:
            return None

        result = await self.session.execute(
            select(Event).where(Event.id == e_uuid)
        )
        return result.scalar_one_or_none()

    async def get_events_by_ids(self, event_ids: Sequence[Identifier]) -> List[Event]:
        """Get events by ID, in the order the ids were given"""
        uuids = [u for u in (_as_uuid(e) for e in event_ids) if u is not None]
        if not uuids:
            return []

        result = await self.session.execute(
            select(Event).where(Event.id.in_(uuids))
        )
        by_id = {event.id: event for event in result.scalars().all()}
        return [by_id[u] for u in uuids if u in by_id]

    async def list_events(
        self,
        location_id: Optional[Identifier] = None,
        status: Optional[str] = None,
        event_type: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: int = 100,
    ) -> List[Event]:
        """List events, optionally filtered, ordered by start time"""
        query = select(Event)
        if location_id is not None:
            l_uuid = _as_uuid(location_id)
            if l_uuid is None:
                return []
            query = query.where(Event.location_id == l_uuid)
        if status:
            query = query.where(Event.status == status)
        if event_type:
            query = query.where(Event.event_type == event_type)
        if start is not None:
            query = query.where(Event.end_datetime > start)
        if end is not None:
            query = query.where(Event.start_datetime < end)
        query = query.order_by(Event.start_datetime.asc()).limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def sum_overlapping_capacity(
        self,
        location_id: uuid.UUID,
        start: datetime,
        end: datetime,
    ) -> int:
        """Sum declared capacity of live events at a location intersecting [start, end)."""
        result = await self.session.execute(
            select(func.coalesce(func.sum(Event.max_capacity), 0)).where(
                Event.location_id == location_id,
                Event.status != EventStatus.CANCELLED.value,
                Event.start_datetime < end,
                Event.end_datetime > start,
            )
        )
        return int(result.scalar_one())

    async def reserve_seat(self, event: Event) -> bool:
        """Atomically add one to an event's occupancy if it has room.

        Returns False when the event is already full.
        """
        result = await self.session.execute(
            update(Event)
            .where(Event.id == event.id, Event.current_count < Event.max_capacity)
            .values(current_count=Event.current_count + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            return False
        await self.session.refresh(event, ["current_count", "updated_at"])
        return True

    async def update_event(self, event: Event, data: dict) -> Event:
        """Update event fields"""
        for key, value in data.items():
            setattr(event, key, value)
        await self.session.flush()
        await self.session.refresh(event)
        return event

    # ==================== TEMPLATES ====================

    async def create_template(self, data: dict) -> RecurringTemplate:
        """Create new recurring template"""
        return await self._add(RecurringTemplate(**data))

    async def get_template(self, template_id: Identifier) -> Optional[RecurringTemplate]:
        """Get template by ID"""
        t_uuid = _as_uuid(template_id)
        if t_uuid is None:
            return None

        result = await self.session.execute(
            select(RecurringTemplate).where(RecurringTemplate.id == t_uuid)
        )
        return result.scalar_one_or_none()

    async def list_templates(
        self,
        is_active: Optional[bool] = None,
        event_type: Optional[str] = None,
        location_id: Optional[Identifier] = None,
    ) -> List[RecurringTemplate]:
        """List templates, newest first"""
        query = select(RecurringTemplate)
        if is_active is not None:
            query = query.where(RecurringTemplate.is_active == is_active)
        if event_type:
            query = query.where(RecurringTemplate.event_type == event_type)
        if location_id is not None:
            l_uuid = _as_uuid(location_id)
            if l_uuid is None:
                return []
            query = query.where(RecurringTemplate.location_id == l_uuid)
        query = query.order_by(RecurringTemplate.created_at.desc())

        result = await self.session.execute(query)
        return list(result.scalars().all())

    # ==================== BOOKINGS ====================

    async def create_booking(self, data: dict) -> Booking:
        """Create new booking"""
        return await self._add(Booking(**data))

    async def find_unlinked_booking(
        self,
        student_id: uuid.UUID,
        product_id: uuid.UUID,
        start_date: datetime,
    ) -> Optional[Booking]:
        """Find a booking for this purchase that is not yet attached to an event"""
        result = await self.session.execute(
            select(Booking)
            .where(
                Booking.student_id == student_id,
                Booking.product_id == product_id,
                Booking.start_date == start_date,
                Booking.event_id.is_(None),
            )
            .order_by(Booking.created_at.asc())
            .limit(1)
        )
        return result.scalars().first()

    async def update_booking(self, booking: Booking, data: dict) -> Booking:
        """Update booking"""
        for key, value in data.items():
            setattr(booking, key, value)
        await self.session.flush()
        await self.session.refresh(booking)
        return booking

    async def cancel_event_bookings(self, event_id: uuid.UUID) -> int:
        """Mark every booking attached to an event as cancelled"""
        result = await self.session.execute(
            update(Booking)
            .where(Booking.event_id == event_id)
            .values(status=BookingStatus.CANCELLED.value)
        )
        return result.rowcount
