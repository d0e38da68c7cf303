from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Union

from scheduler.core import config
from scheduler.services.db_service import DBService
from scheduler.services.scheduling.datetime_builder import to_utc_naive

logger = logging.getLogger(__name__)


class CapacityChecker:
    """Overbooking guard for a location.

    Compares the *declared* capacity of every live event overlapping a window
    against the venue's limit, so under-subscribed sessions still count in
    full.
    """

    def __init__(self, db: DBService, default_capacity: int = config.DEFAULT_LOCATION_CAPACITY):
        self.db = db
        self.default_capacity = default_capacity

    async def location_capacity(self, location_id: Union[str, uuid.UUID]) -> int:
        location = await self.db.get_location(location_id)
        if location is None or not location.capacity:
            return self.default_capacity
        return location.capacity

    async def has_conflict(
        self,
        start: datetime,
        end: datetime,
        location_id: Union[str, uuid.UUID],
    ) -> bool:
        """True when overlapping declared capacity already reaches the location's limit."""
        location_uuid = location_id if isinstance(location_id, uuid.UUID) else uuid.UUID(str(location_id))
        booked = await self.db.sum_overlapping_capacity(
            location_uuid, to_utc_naive(start), to_utc_naive(end)
        )
        limit = await self.location_capacity(location_uuid)
        if booked >= limit:
            logger.debug(
                "Capacity conflict",
                extra={"location_id": str(location_uuid), "booked": booked, "limit": limit},
            )
            return True
        return False
