"""Pytest configuration and shared fixtures."""

from datetime import date
from decimal import Decimal
from typing import Optional

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from scheduler.core.database import Base
from scheduler.integrations.closures import StaticClosureCalendar
from scheduler.models import (
    Booking,
    Event,
    Location,
    Order,
    OrderItem,
    Product,
    Student,
)
from scheduler.services.scheduling import EventCreationService
from scheduler.services.scheduling.datetime_builder import build_zoned_datetime, to_utc_naive

SYDNEY = "Australia/Sydney"


def local_instant(day: date, time_of_day: str = "00:00", tz: str = SYDNEY):
    """Naive UTC instant for a Sydney wall-clock time, as stored in the DB."""
    return to_utc_naive(build_zoned_datetime(day, time_of_day, tz))


class Seed:
    """Builds collaborator rows (locations, orders...) the engine only reads."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _save(self, instance):
        self.session.add(instance)
        await self.session.commit()
        return instance

    async def location(self, capacity: int = 20, name: str = "Neutral Bay", timezone: str = SYDNEY) -> Location:
        return await self._save(Location(name=name, capacity=capacity, timezone=timezone))

    async def product(self, category: str, duration: Optional[int] = None, name: Optional[str] = None) -> Product:
        return await self._save(
            Product(
                name=name or f"{category.title()} Product",
                category=category,
                duration=duration,
                age_min=5,
                age_max=12,
                price=Decimal("95.00"),
            )
        )

    async def student(self, name: str = "Ava", allergies: Optional[str] = None) -> Student:
        return await self._save(Student(name=name, allergies=allergies))

    async def order(self, items, status: str = "paid", location: Optional[Location] = None) -> Order:
        """items: iterable of (product, student, booking_date) tuples."""
        order = Order(
            customer_name="Sam Parent",
            customer_email="sam@example.com",
            status=status,
            location_id=location.id if location else None,
            items=[
                OrderItem(
                    product=product,
                    product_id=product.id,
                    student=student,
                    student_id=student.id,
                    booking_date=booking_date,
                    price=Decimal("95.00"),
                )
                for product, student, booking_date in items
            ],
        )
        return await self._save(order)

    async def event(
        self,
        location: Location,
        day: date,
        start: str,
        end: str,
        max_capacity: int = 8,
        status: str = "SCHEDULED",
        event_type: str = "RECURRING_SESSION",
        current_count: int = 0,
    ) -> Event:
        return await self._save(
            Event(
                title="Existing session",
                event_type=event_type,
                status=status,
                start_datetime=local_instant(day, start, location.timezone),
                end_datetime=local_instant(day, end, location.timezone),
                location_id=location.id,
                max_capacity=max_capacity,
                current_count=current_count,
            )
        )

    async def booking(self, product: Product, student: Student, start, status: str = "pending") -> Booking:
        return await self._save(
            Booking(
                student_id=student.id,
                product_id=product.id,
                start_date=start,
                end_date=start,
                status=status,
                total_price=Decimal("95.00"),
                notes="Webhook confirmation",
            )
        )


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def seed(session) -> Seed:
    return Seed(session)


@pytest.fixture
def closures() -> StaticClosureCalendar:
    return StaticClosureCalendar()


@pytest.fixture
def service(session, closures) -> EventCreationService:
    return EventCreationService(session, closures=closures)
