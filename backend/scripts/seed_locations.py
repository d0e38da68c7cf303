"""Create the default venue so the engine has a location to schedule into.

The scheduling engine never creates locations itself. Run this once per
environment and put the printed id in DEFAULT_LOCATION_ID.
"""

from __future__ import annotations

import argparse
import asyncio

from scheduler.core import config
from scheduler.core.database import AsyncSessionLocal
from scheduler.services.db_service import DBService


async def seed_location(name: str, address: str, capacity: int, timezone: str) -> None:
    async with AsyncSessionLocal() as session:
        db_service = DBService(session)
        location = await db_service.get_location_by_name(name)
        if location:
            print(f"Location '{name}' already exists: {location.id}")
            return

        location = await db_service.create_location(
            {
                "name": name,
                "address": address,
                "capacity": capacity,
                "timezone": timezone,
            }
        )
        await session.commit()
        print(f"Created location '{name}': {location.id}")
        print(f"Set DEFAULT_LOCATION_ID={location.id}")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed the default scheduling location.")
    parser.add_argument("--name", default="Neutral Bay", help="Location name")
    parser.add_argument(
        "--address",
        default="123 Neutral Bay Road, Neutral Bay NSW 2089",
        help="Street address",
    )
    parser.add_argument(
        "--capacity",
        type=int,
        default=config.DEFAULT_LOCATION_CAPACITY,
        help="Max concurrent declared capacity",
    )
    parser.add_argument("--timezone", default=config.LOCATION_TIMEZONE, help="IANA timezone")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    asyncio.run(seed_location(args.name, args.address, args.capacity, args.timezone))


if __name__ == "__main__":
    main()
