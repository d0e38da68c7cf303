"""Tests for the location overbooking guard."""

import uuid
from datetime import date

from scheduler.services.db_service import DBService
from scheduler.services.scheduling import CapacityChecker

from conftest import local_instant

WEDNESDAY = date(2026, 6, 10)


def window(start="16:00", end="17:00"):
    return local_instant(WEDNESDAY, start), local_instant(WEDNESDAY, end)


class TestCapacityChecker:
    async def test_empty_location_has_no_conflict(self, session, seed):
        location = await seed.location(capacity=16)
        checker = CapacityChecker(DBService(session))

        assert not await checker.has_conflict(*window(), location.id)

    async def test_declared_capacity_counts_not_attendance(self, session, seed):
        """Two empty 8-seat sessions fill a 16-seat venue."""
        location = await seed.location(capacity=16)
        await seed.event(location, WEDNESDAY, "16:00", "17:00", max_capacity=8)
        checker = CapacityChecker(DBService(session))
        assert not await checker.has_conflict(*window(), location.id)

        await seed.event(location, WEDNESDAY, "16:30", "17:30", max_capacity=8)
        assert await checker.has_conflict(*window(), location.id)

    async def test_partial_overlaps_count(self, session, seed):
        location = await seed.location(capacity=10)
        await seed.event(location, WEDNESDAY, "15:30", "16:15", max_capacity=5)
        await seed.event(location, WEDNESDAY, "16:45", "18:00", max_capacity=5)
        checker = CapacityChecker(DBService(session))

        assert await checker.has_conflict(*window(), location.id)

    async def test_touching_windows_do_not_overlap(self, session, seed):
        location = await seed.location(capacity=10)
        await seed.event(location, WEDNESDAY, "15:00", "16:00", max_capacity=10)
        await seed.event(location, WEDNESDAY, "17:00", "18:00", max_capacity=10)
        checker = CapacityChecker(DBService(session))

        assert not await checker.has_conflict(*window(), location.id)

    async def test_cancelled_events_are_ignored(self, session, seed):
        location = await seed.location(capacity=10)
        await seed.event(location, WEDNESDAY, "16:00", "17:00", max_capacity=10, status="CANCELLED")
        checker = CapacityChecker(DBService(session))

        assert not await checker.has_conflict(*window(), location.id)

    async def test_other_locations_are_ignored(self, session, seed):
        location = await seed.location(capacity=10)
        elsewhere = await seed.location(capacity=10, name="Mosman")
        await seed.event(elsewhere, WEDNESDAY, "16:00", "17:00", max_capacity=10)
        checker = CapacityChecker(DBService(session))

        assert not await checker.has_conflict(*window(), location.id)

    async def test_unknown_location_falls_back_to_default_limit(self, session):
        checker = CapacityChecker(DBService(session), default_capacity=20)

        assert await checker.location_capacity(uuid.uuid4()) == 20
        assert not await checker.has_conflict(*window(), uuid.uuid4())
