# (c) Nelen & Schuurmans

import asyncio
import logging
from collections.abc import Sequence

from stuff_tracker import ComparisonFilter
from stuff_tracker import Connection
from stuff_tracker import DoesNotExist
from stuff_tracker import Filter
from stuff_tracker import Id
from stuff_tracker import Manage
from stuff_tracker import PaginationArguments
from stuff_tracker import SortField

from .domain import Item
from .domain import ItemRepository
from .domain import Location
from .domain import LocationRepository
from .domain import Room
from .domain import RoomRepository

__all__ = ["ManageItem", "ManageLocation", "ManageRoom"]


logger = logging.getLogger(__name__)


async def _ensure_exists(
    repo: LocationRepository | RoomRepository, kind: str, id: Id
) -> None:
    if not await repo.exists([Filter.for_id(id)]):
        raise DoesNotExist(kind, id)


class ManageLocation(Manage[Location]):
    async def add_location(self, name: str) -> Location:
        location = await self.create({"name": name})
        logger.info("added location %s", location.id)
        return location


class ManageRoom(Manage[Room]):
    def __init__(self, repo: RoomRepository, locations: LocationRepository):
        super().__init__(repo)
        self.locations = locations

    async def add_room(self, name: str, location_id: Id) -> Room:
        await _ensure_exists(self.locations, "Location", location_id)
        room = await self.create({"name": name, "location_id": location_id})
        logger.info("added room %s to location %s", room.id, location_id)
        return room


class ManageItem(Manage[Item]):
    """Items live in rooms; every mutation checks that the room exists."""

    def __init__(self, repo: ItemRepository, rooms: RoomRepository):
        super().__init__(repo)
        self.rooms = rooms

    async def search(
        self,
        search: str | None,
        filters: list[Filter],
        args: PaginationArguments,
        order: Sequence[SortField] = (),
        cancel: asyncio.Event | None = None,
    ) -> Connection[Item]:
        """Paginate items, optionally narrowed to names containing `search`.

        The match is case-insensitive. A blank search term is ignored.
        """
        if search is not None and search.strip():
            filters = [*filters, ComparisonFilter.contains("name", search)]
        return await self.paginate(filters, args, order=order, cancel=cancel)

    async def add_item(self, name: str, quantity: int, room_id: Id) -> Item:
        await _ensure_exists(self.rooms, "Room", room_id)
        item = await self.create(
            {"name": name, "quantity": quantity, "room_id": room_id}
        )
        logger.info("added item %s to room %s", item.id, room_id)
        return item

    async def move_item(self, item_id: Id, new_room_id: Id) -> Item:
        item = await self.retrieve(item_id)
        await _ensure_exists(self.rooms, "Room", new_room_id)
        moved = await self.update(item_id, {"room_id": new_room_id})
        logger.info(
            "moved item %s from room %s to room %s",
            item_id,
            item.room_id,
            new_room_id,
        )
        return moved

    async def delete_item(self, item_id: Id) -> bool:
        if not await self.destroy(item_id):
            raise DoesNotExist("Item", item_id)
        logger.info("deleted item %s", item_id)
        return True
