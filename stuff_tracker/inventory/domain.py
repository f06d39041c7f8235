# (c) Nelen & Schuurmans

from pydantic import Field

from stuff_tracker import Id
from stuff_tracker import Repository
from stuff_tracker import RootEntity

__all__ = [
    "Item",
    "ItemRepository",
    "Location",
    "LocationRepository",
    "Room",
    "RoomRepository",
]


class Location(RootEntity):
    name: str


class Room(RootEntity):
    name: str
    location_id: Id


class Item(RootEntity):
    name: str
    quantity: int = Field(ge=0)
    room_id: Id


class LocationRepository(Repository[Location]):
    sortable = frozenset({"id", "name", "created_at"})


class RoomRepository(Repository[Room]):
    sortable = frozenset({"id", "name", "location_id", "created_at"})


class ItemRepository(Repository[Item]):
    sortable = frozenset({"id", "name", "quantity", "room_id", "created_at"})
