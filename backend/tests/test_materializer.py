"""Tests for turning paid orders into events and bookings."""

import uuid
from datetime import date, datetime, timedelta

import pytest
from sqlalchemy import func, select

from scheduler.core.errors import (
    ClosureViolationError,
    MissingLocationError,
    OrderAlreadyMaterializedError,
    OrderNotFoundError,
    OrderNotPaidError,
    UnsupportedProductCategoryError,
    WeekendViolationError,
)
from scheduler.models import Booking, Event, OrderMaterialization
from scheduler.models.enums import BookingStatus, EventType, ProductCategory
from scheduler.services.scheduling import EventCreationService
from scheduler.services.scheduling.datetime_builder import from_utc_naive, local_date
from scheduler.services.scheduling.materializer import (
    describe_student,
    idempotency_key,
)

from conftest import SYDNEY, local_instant


async def count(session, model) -> int:
    return (await session.execute(select(func.count(model.id)))).scalar_one()


class TestCampOrders:
    async def test_all_day_camp(self, service, session, seed):
        """A 360+ minute camp runs 9am to 5pm local on the booked day."""
        location = await seed.location()
        product = await seed.product(ProductCategory.CAMP.value, duration=480, name="Winter Camp")
        student = await seed.student("Ava")
        order = await seed.order([(product, student, local_instant(date(2026, 6, 2)))], location=location)

        events = await service.create_events_from_order(order.id)

        assert len(events) == 1
        event = events[0]
        assert event.title == "Winter Camp - Ava"
        assert event.event_type == EventType.CAMP.value
        assert event.max_capacity == 15
        assert event.current_count == 1
        assert from_utc_naive(event.start_datetime, SYDNEY).strftime("%Y-%m-%d %H:%M") == "2026-06-02 09:00"
        assert from_utc_naive(event.end_datetime, SYDNEY).strftime("%H:%M") == "17:00"

        booking = (await session.execute(select(Booking).where(Booking.event_id == event.id))).scalar_one()
        assert booking.status == BookingStatus.CONFIRMED.value

    async def test_short_camp_ends_at_three(self, service, seed):
        location = await seed.location()
        product = await seed.product(ProductCategory.CAMP.value, duration=360)
        student = await seed.student()
        order = await seed.order([(product, student, local_instant(date(2026, 6, 2)))], location=location)

        [event] = await service.create_events_from_order(order.id)

        assert from_utc_naive(event.end_datetime, SYDNEY).strftime("%H:%M") == "15:00"

    async def test_student_care_notes_reach_the_description(self, service, seed):
        location = await seed.location()
        product = await seed.product(ProductCategory.CAMP.value)
        student = await seed.student("Noah", allergies="Peanuts")
        order = await seed.order([(product, student, local_instant(date(2026, 6, 2)))], location=location)

        [event] = await service.create_events_from_order(order.id)

        assert "Allergies: Peanuts" in event.description

    async def test_camp_on_closure_date_schedules_nothing(self, service, session, seed):
        location = await seed.location()
        product = await seed.product(ProductCategory.CAMP.value)
        student = await seed.student()
        order = await seed.order([(product, student, local_instant(date(2027, 1, 26)))], location=location)
        order_id = order.id

        with pytest.raises(ClosureViolationError):
            await service.create_events_from_order(order_id)

        assert await count(session, Event) == 0
        assert await count(session, Booking) == 0
        assert await count(session, OrderMaterialization) == 0

    async def test_failing_item_rolls_back_the_whole_order(self, service, session, seed):
        """The weekday camp is not kept when the Saturday camp in the same order fails."""
        location = await seed.location()
        product = await seed.product(ProductCategory.CAMP.value)
        student = await seed.student()
        order = await seed.order(
            [
                (product, student, local_instant(date(2026, 6, 5))),
                (product, student, local_instant(date(2026, 6, 6))),
            ],
            location=location,
        )
        order_id = order.id

        with pytest.raises(WeekendViolationError):
            await service.create_events_from_order(order_id)

        assert await count(session, Event) == 0
        assert await count(session, Booking) == 0


class TestBirthdayOrders:
    async def test_party_starts_at_booked_time_for_two_hours(self, service, seed):
        location = await seed.location()
        product = await seed.product(ProductCategory.BIRTHDAY.value)
        student = await seed.student("Mia")
        booked = local_instant(date(2026, 6, 6), "10:30")
        order = await seed.order([(product, student, booked)], location=location)

        [event] = await service.create_events_from_order(order.id)

        assert event.title == "🎂 Mia's Birthday Party"
        assert event.start_datetime == booked
        assert event.end_datetime - event.start_datetime == timedelta(minutes=120)
        assert event.max_capacity == 12
        assert event.current_count == 1


class TestSubscriptionOrders:
    async def test_three_month_subscription(self, service, session, seed):
        """Twelve Wednesday sessions at 4pm; only the first holds a booking."""
        location = await seed.location()
        product = await seed.product(ProductCategory.SUBSCRIPTION.value, duration=3, name="Art Club")
        student = await seed.student("Leo")
        order = await seed.order([(product, student, local_instant(date(2026, 6, 3)))], location=location)

        events = await service.create_events_from_order(order.id)

        assert len(events) == 12
        days = [local_date(e.start_datetime, SYDNEY) for e in events]
        assert days[0] == date(2026, 6, 3)
        assert days[-1] == date(2026, 8, 19)
        assert all(d.weekday() == 2 for d in days)
        assert {from_utc_naive(e.start_datetime, SYDNEY).strftime("%H:%M") for e in events} == {"16:00"}
        assert all(e.is_recurring and e.max_capacity == 8 for e in events)
        assert [e.current_count for e in events] == [1] + [0] * 11

        bookings = (await session.execute(select(Booking))).scalars().all()
        assert len(bookings) == 1
        assert bookings[0].event_id == events[0].id

    async def test_subscription_skips_closures(self, service, seed):
        """A December subscription loses the 30th to the Christmas closure."""
        location = await seed.location()
        product = await seed.product(ProductCategory.SUBSCRIPTION.value, duration=1)
        student = await seed.student()
        order = await seed.order([(product, student, local_instant(date(2026, 12, 9)))], location=location)

        events = await service.create_events_from_order(order.id)

        days = [local_date(e.start_datetime, SYDNEY) for e in events]
        assert days == [date(2026, 12, 9), date(2026, 12, 16), date(2026, 12, 23)]


class TestOrderChecks:
    async def test_unknown_order(self, service):
        with pytest.raises(OrderNotFoundError):
            await service.create_events_from_order(uuid.uuid4())

        with pytest.raises(OrderNotFoundError):
            await service.create_events_from_order("not-a-uuid")

    async def test_unpaid_order(self, service, seed):
        location = await seed.location()
        product = await seed.product(ProductCategory.CAMP.value)
        student = await seed.student()
        order = await seed.order(
            [(product, student, local_instant(date(2026, 6, 2)))], status="pending", location=location
        )

        with pytest.raises(OrderNotPaidError):
            await service.create_events_from_order(order.id)

    async def test_missing_location_is_an_error(self, service, session, seed):
        product = await seed.product(ProductCategory.CAMP.value)
        student = await seed.student()
        order = await seed.order([(product, student, local_instant(date(2026, 6, 2)))])
        order_id = order.id

        with pytest.raises(MissingLocationError):
            await service.create_events_from_order(order_id)
        with pytest.raises(MissingLocationError):
            await service.create_events_from_order(order_id, location_id=uuid.uuid4())

        assert await count(session, Event) == 0

    async def test_location_argument_and_default(self, session, seed):
        location = await seed.location()
        product = await seed.product(ProductCategory.CAMP.value)
        student = await seed.student()
        first = await seed.order([(product, student, local_instant(date(2026, 6, 2)))])
        second = await seed.order([(product, student, local_instant(date(2026, 6, 3)))])
        location_id = location.id

        service = EventCreationService(session, default_location_id=str(location_id))
        [by_default] = await service.create_events_from_order(first.id)
        [by_argument] = await EventCreationService(session).create_events_from_order(
            second.id, location_id=location_id
        )

        assert by_default.location_id == location_id
        assert by_argument.location_id == location_id

    async def test_unsupported_category(self, service, seed):
        location = await seed.location()
        product = await seed.product("GIFT_CARD")
        student = await seed.student()
        order = await seed.order([(product, student, local_instant(date(2026, 6, 2)))], location=location)

        with pytest.raises(UnsupportedProductCategoryError):
            await service.create_events_from_order(order.id)


class TestIdempotency:
    async def test_replay_returns_the_same_events(self, service, session, seed):
        location = await seed.location()
        product = await seed.product(ProductCategory.CAMP.value)
        student = await seed.student()
        order = await seed.order([(product, student, local_instant(date(2026, 6, 2)))], location=location)

        first = await service.create_events_from_order(order.id)
        second = await service.create_events_from_order(order.id)

        assert [e.id for e in second] == [e.id for e in first]
        assert await count(session, Event) == 1
        assert await count(session, Booking) == 1
        assert second[0].current_count == 1

    async def test_replay_keeps_item_order(self, service, seed):
        """Events come back in order-item order, not date order."""
        location = await seed.location()
        product = await seed.product(ProductCategory.CAMP.value)
        student = await seed.student()
        order = await seed.order(
            [
                (product, student, local_instant(date(2026, 6, 5))),
                (product, student, local_instant(date(2026, 6, 2))),
            ],
            location=location,
        )
        order_id = order.id

        first = await service.create_events_from_order(order_id)
        second = await service.create_events_from_order(order_id)

        assert first[0].start_datetime > first[1].start_datetime
        assert [e.id for e in second] == [e.id for e in first]

    async def test_replay_of_subscription_returns_all_sessions(self, service, session, seed):
        location = await seed.location()
        product = await seed.product(ProductCategory.SUBSCRIPTION.value, duration=1)
        student = await seed.student()
        order = await seed.order([(product, student, local_instant(date(2026, 6, 3)))], location=location)

        first = await service.create_events_from_order(order.id)
        second = await service.create_events_from_order(order.id)

        assert [e.id for e in second] == [e.id for e in first]
        assert await count(session, Event) == 4

    async def test_changed_items_are_rejected(self, service, session, seed):
        location = await seed.location()
        product = await seed.product(ProductCategory.CAMP.value)
        student = await seed.student()
        order = await seed.order([(product, student, local_instant(date(2026, 6, 2)))], location=location)
        order_id = order.id
        await service.create_events_from_order(order_id)

        record = (
            await session.execute(select(OrderMaterialization).where(OrderMaterialization.order_id == order_id))
        ).scalar_one()
        record.idempotency_key = f"{order_id}:stale"
        await session.commit()

        with pytest.raises(OrderAlreadyMaterializedError):
            await service.create_events_from_order(order_id)
        assert await count(session, Event) == 1

    def test_key_depends_on_items(self):
        class Item:
            def __init__(self, item_id, booking_date):
                self.id = item_id
                self.product_id = "p"
                self.student_id = "s"
                self.booking_date = booking_date

        class Order:
            def __init__(self, items):
                self.id = "order-1"
                self.items = items

        a = Item("1", datetime(2026, 6, 1, 14))
        b = Item("2", datetime(2026, 6, 2, 14))
        assert idempotency_key(Order([a, b])) == idempotency_key(Order([b, a]))
        assert idempotency_key(Order([a])) != idempotency_key(Order([a, b]))
        assert idempotency_key(Order([a])).startswith("order-1:")


class TestStrategies:
    async def test_every_category_has_a_strategy(self, service):
        assert set(service.materializer.strategies) == set(ProductCategory)

    async def test_unknown_category_is_rejected(self, service):
        with pytest.raises(UnsupportedProductCategoryError):
            service.materializer.strategy_for("GIFT_CARD")

    def test_describe_student(self):
        class Student:
            allergies = "Dairy"
            medical_notes = "Asthma puffer in bag"

        assert describe_student(Student()) == "Allergies: Dairy Medical: Asthma puffer in bag"
