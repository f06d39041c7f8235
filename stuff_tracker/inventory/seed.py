# (c) Nelen & Schuurmans

"""Deterministic sample data: 3 locations with 4 rooms each and 200 items.

Item names mix prefixes, categories and casing so that the case-insensitive
filters have something to work with; quantities come from a fixed random seed.
"""

import logging
import random
from datetime import datetime
from datetime import timedelta

from stuff_tracker import now

from .domain import ItemRepository
from .domain import LocationRepository
from .domain import RoomRepository

__all__ = ["seed", "ROOM_NAMES", "ITEM_COUNT"]


logger = logging.getLogger(__name__)


ITEM_COUNT = 200

ROOM_NAMES = {
    "Home": ["Garage", "Basement", "Attic", "Office"],
    "Rental 101 Howards Ave": ["Living Room", "Kitchen", "Bedroom", "Bathroom"],
    "Flip 3231 Gooseneck Rd": ["Workshop", "Storage", "Main Floor", "Garage"],
}

PREFIXES = [
    "Electronics-",
    "electronics-",
    "ELECTRONICS-",
    "Furniture-",
    "furniture-",
    "Kitchen-",
    "kitchen-",
    "Tools-",
    "tools-",
    "Office Supplies-",
    "Office supplies-",
    "office_supplies-",
]

SUBSTRINGS = [
    "lamp",
    "chair",
    "box",
    "table",
    "desk",
    "shelf",
    "cabinet",
    "drawer",
    "couch",
    "TV",
    "radio",
    "speaker",
    "microwave",
    "oven",
    "refrigerator",
    "fan",
    "clock",
    "mirror",
    "picture",
    "book",
    "tool",
    "hammer",
    "screwdriver",
    "wrench",
]

CATEGORIES = [
    "Electronics-TV",
    "electronics-Radio",
    "ELECTRONICS-Speaker",
    "Furniture-Chair",
    "furniture-Table",
    "Kitchen-Microwave",
    "kitchen-Oven",
    "Tools-Hammer",
    "tools-Screwdriver",
    "Office Supplies-Pen",
    "Office supplies-Notebook",
    "office_supplies-Stapler",
]


def item_name(index: int) -> str:
    if index % 3 == 0:
        name = PREFIXES[index % len(PREFIXES)] + SUBSTRINGS[index % len(SUBSTRINGS)]
    elif index % 3 == 1:
        name = CATEGORIES[index % len(CATEGORIES)]
    else:
        name = SUBSTRINGS[index % len(SUBSTRINGS)]
    if index > 50:
        name = f"{name} {index}"
    return name


async def seed(
    locations: LocationRepository,
    rooms: RoomRepository,
    items: ItemRepository,
    timestamp: datetime | None = None,
) -> None:
    if timestamp is None:
        timestamp = now()
    room_ids = []
    for location_name, room_names in ROOM_NAMES.items():
        location = await locations.add(
            {"name": location_name, "created_at": timestamp}
        )
        for room_name in room_names:
            room = await rooms.add(
                {
                    "name": room_name,
                    "location_id": location.id,
                    "created_at": timestamp,
                }
            )
            room_ids.append(room.id)

    rng = random.Random(42)
    per_room, remainder = divmod(ITEM_COUNT, len(room_ids))
    index = 0
    for room_index, room_id in enumerate(room_ids):
        for _ in range(per_room + (1 if room_index < remainder else 0)):
            await items.add(
                {
                    "name": item_name(index),
                    "quantity": rng.randint(0, 50),
                    "room_id": room_id,
                    "created_at": timestamp + timedelta(seconds=index),
                }
            )
            index += 1
    logger.info(
        "seeded %d locations, %d rooms and %d items",
        len(ROOM_NAMES),
        len(room_ids),
        index,
    )
