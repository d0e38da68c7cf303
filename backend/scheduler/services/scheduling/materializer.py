from __future__ import annotations

import hashlib
import logging
import uuid
from datetime import timedelta
from typing import Dict, List, Optional, Protocol, Union

from sqlalchemy.exc import IntegrityError

from scheduler.core import config
from scheduler.core.errors import (
    MissingLocationError,
    OrderAlreadyMaterializedError,
    OrderNotFoundError,
    OrderNotPaidError,
    UnsupportedProductCategoryError,
)
from scheduler.models import Event, Location, Order, OrderItem, Student
from scheduler.models.enums import EventType, OrderStatus, ProductCategory
from scheduler.services.db_service import DBService
from scheduler.services.scheduling.booking_linker import BookingLinker
from scheduler.services.scheduling.datetime_builder import (
    build_zoned_datetime,
    from_utc_naive,
    local_date,
)
from scheduler.services.scheduling.event_factory import CreateEventParams, EventFactory
from scheduler.services.scheduling.template_expander import (
    CreateRecurringTemplateParams,
    TemplateExpander,
)

logger = logging.getLogger(__name__)


# Business constants
DAY_CAMP_TIMES = ("09:00", "15:00")
ALL_DAY_CAMP_TIMES = ("09:00", "17:00")
ALL_DAY_THRESHOLD_MINUTES = 360
CAMP_CAPACITY = 15

BIRTHDAY_DURATION_MINUTES = 120
BIRTHDAY_CAPACITY = 12

SUBSCRIPTION_DEFAULT_MONTHS = 3
SUBSCRIPTION_WEEKS_PER_MONTH = 4
SUBSCRIPTION_DAYS_OF_WEEK = [3]  # Wednesday
SUBSCRIPTION_TIMES = ("16:00", "17:00")  # after school
SUBSCRIPTION_SESSION_MINUTES = 60
SUBSCRIPTION_CAPACITY = 8


def describe_student(student: Student) -> str:
    """Care notes appended to event descriptions for instructors."""
    notes = []
    if student.allergies:
        notes.append(f"Allergies: {student.allergies}")
    if student.medical_notes:
        notes.append(f"Medical: {student.medical_notes}")
    return " ".join(notes)


def _with_notes(text: str, student: Student) -> str:
    notes = describe_student(student)
    return f"{text} {notes}" if notes else text


def idempotency_key(order: Order) -> str:
    """Order id plus a content hash of its items."""
    parts = sorted(
        f"{item.id}|{item.product_id}|{item.student_id}|{item.booking_date.isoformat()}"
        for item in order.items
    )
    digest = hashlib.sha256("\n".join(parts).encode("utf-8")).hexdigest()
    return f"{order.id}:{digest}"


class CategoryStrategy(Protocol):
    """How one product category turns into events."""

    category: ProductCategory

    async def materialize(self, item: OrderItem, location: Location) -> List[Event]:
        ...


class CampStrategy:
    """Single day camp: 9am-3pm, or 9am-5pm for products longer than six hours."""

    category = ProductCategory.CAMP

    def __init__(self, factory: EventFactory, linker: BookingLinker):
        self.factory = factory
        self.linker = linker

    async def materialize(self, item: OrderItem, location: Location) -> List[Event]:
        product, student = item.product, item.student
        is_all_day = bool(product.duration and product.duration > ALL_DAY_THRESHOLD_MINUTES)
        start_time, end_time = ALL_DAY_CAMP_TIMES if is_all_day else DAY_CAMP_TIMES

        day = local_date(item.booking_date, location.timezone)
        event = await self.factory.create_event(
            CreateEventParams(
                title=f"{product.name} - {student.name}",
                description=_with_notes(f"Camp session for {student.name}.", student),
                event_type=EventType.CAMP,
                start_datetime=build_zoned_datetime(day, start_time, location.timezone),
                end_datetime=build_zoned_datetime(day, end_time, location.timezone),
                location_id=location.id,
                max_capacity=CAMP_CAPACITY,
                age_min=product.age_min,
                age_max=product.age_max,
            )
        )
        await self.linker.link(item, event)
        return [event]


class BirthdayStrategy:
    """Two hour party starting at the booked time."""

    category = ProductCategory.BIRTHDAY

    def __init__(self, factory: EventFactory, linker: BookingLinker):
        self.factory = factory
        self.linker = linker

    async def materialize(self, item: OrderItem, location: Location) -> List[Event]:
        product, student = item.product, item.student
        start = from_utc_naive(item.booking_date, location.timezone)

        event = await self.factory.create_event(
            CreateEventParams(
                title=f"🎂 {student.name}'s Birthday Party",
                description=_with_notes(f"Birthday party for {student.name}.", student),
                event_type=EventType.BIRTHDAY,
                start_datetime=start,
                end_datetime=start + timedelta(minutes=BIRTHDAY_DURATION_MINUTES),
                location_id=location.id,
                max_capacity=BIRTHDAY_CAPACITY,
                age_min=product.age_min,
                age_max=product.age_max,
            )
        )
        await self.linker.link(item, event)
        return [event]


class SubscriptionStrategy:
    """Weekly after-school sessions for the length of the subscription.

    Only the first session gets a booking link; the rest are tracked through
    the template and their capacity.
    """

    category = ProductCategory.SUBSCRIPTION

    def __init__(self, expander: TemplateExpander, linker: BookingLinker):
        self.expander = expander
        self.linker = linker

    async def materialize(self, item: OrderItem, location: Location) -> List[Event]:
        product, student = item.product, item.student
        months = product.duration or SUBSCRIPTION_DEFAULT_MONTHS
        start_date = local_date(item.booking_date, location.timezone)
        end_date = start_date + timedelta(weeks=months * SUBSCRIPTION_WEEKS_PER_MONTH)

        template = await self.expander.create_template(
            CreateRecurringTemplateParams(
                name=f"{product.name} - {student.name}",
                description=_with_notes(f"Weekly {product.name} sessions for {student.name}.", student),
                event_type=EventType.RECURRING_SESSION,
                start_time=SUBSCRIPTION_TIMES[0],
                end_time=SUBSCRIPTION_TIMES[1],
                duration=SUBSCRIPTION_SESSION_MINUTES,
                days_of_week=list(SUBSCRIPTION_DAYS_OF_WEEK),
                start_date=start_date,
                end_date=end_date,
                max_capacity=SUBSCRIPTION_CAPACITY,
                location_id=location.id,
                age_min=product.age_min,
                age_max=product.age_max,
            )
        )
        events = await self.expander.generate(template.id)

        if events:
            await self.linker.link(item, events[0])
        else:
            logger.warning(
                "Subscription produced no sessions",
                extra={"order_id": str(item.order_id), "template_id": str(template.id)},
            )
        return events


class OrderMaterializer:
    """Turns a paid order into events and bookings.

    Writes go through the caller's session; the caller commits once for the
    whole order.
    """

    def __init__(
        self,
        db: DBService,
        factory: EventFactory,
        expander: TemplateExpander,
        linker: BookingLinker,
        default_location_id: Optional[str] = None,
    ):
        self.db = db
        self.default_location_id = default_location_id or config.DEFAULT_LOCATION_ID
        self.strategies: Dict[ProductCategory, CategoryStrategy] = {
            ProductCategory.CAMP: CampStrategy(factory, linker),
            ProductCategory.BIRTHDAY: BirthdayStrategy(factory, linker),
            ProductCategory.SUBSCRIPTION: SubscriptionStrategy(expander, linker),
        }
        missing = set(ProductCategory) - set(self.strategies)
        if missing:
            raise RuntimeError(f"No scheduling strategy for: {sorted(c.value for c in missing)}")

    def strategy_for(self, category: str) -> CategoryStrategy:
        try:
            return self.strategies[ProductCategory(category)]
        except ValueError:
            raise UnsupportedProductCategoryError(str(category)) from None

    async def resolve_location(
        self,
        order: Order,
        location_id: Union[str, uuid.UUID, None] = None,
    ) -> Location:
        chosen = location_id or order.location_id or self.default_location_id
        if not chosen:
            raise MissingLocationError()
        location = await self.db.get_location(chosen)
        if location is None:
            raise MissingLocationError(str(chosen))
        return location

    async def materialize(
        self,
        order_id: Union[str, uuid.UUID],
        location_id: Union[str, uuid.UUID, None] = None,
    ) -> List[Event]:
        order = await self.db.get_order_with_items(order_id)
        if order is None:
            raise OrderNotFoundError(str(order_id))
        if order.status != OrderStatus.PAID.value:
            raise OrderNotPaidError(str(order.id), order.status)

        key = idempotency_key(order)
        existing = await self.db.get_materialization(order.id)
        if existing is not None:
            if existing.idempotency_key != key:
                raise OrderAlreadyMaterializedError(str(order.id))
            logger.info(
                "Order already scheduled; returning recorded events",
                extra={"order_id": str(order.id)},
            )
            return await self.db.get_events_by_ids(existing.event_ids)

        location = await self.resolve_location(order, location_id)

        events: List[Event] = []
        for item in order.items:
            strategy = self.strategy_for(item.product.category)
            events.extend(await strategy.materialize(item, location))

        try:
            await self.db.create_materialization(
                {
                    "order_id": order.id,
                    "idempotency_key": key,
                    "event_ids": [str(event.id) for event in events],
                }
            )
        except IntegrityError as exc:
            # A concurrent delivery of the same order committed first
            raise OrderAlreadyMaterializedError(str(order.id)) from exc

        logger.info(
            "Scheduled order",
            extra={"order_id": str(order.id), "events": len(events), "items": len(order.items)},
        )
        return events
