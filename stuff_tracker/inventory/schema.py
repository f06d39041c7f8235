# (c) Nelen & Schuurmans

from dataclasses import dataclass
from datetime import datetime

import strawberry
from strawberry.fastapi import BaseContext
from strawberry.types import Info

from stuff_tracker import DoesNotExist
from stuff_tracker import PaginationArguments
from stuff_tracker.graphql import Connection
from stuff_tracker.graphql import DateTimeOperationFilterInput
from stuff_tracker.graphql import graphql_errors
from stuff_tracker.graphql import IntOperationFilterInput
from stuff_tracker.graphql import SortEnumType
from stuff_tracker.graphql import StringOperationFilterInput
from stuff_tracker.graphql import to_filters
from stuff_tracker.graphql import to_sort_fields

from . import domain
from .application import ManageItem
from .application import ManageLocation
from .application import ManageRoom

__all__ = ["InventoryContext", "schema"]


@dataclass
class InventoryContext(BaseContext):
    locations: ManageLocation
    rooms: ManageRoom
    items: ManageItem


@strawberry.type(name="Location")
class LocationType:
    id: int
    name: str
    created_at: datetime

    @classmethod
    def from_entity(cls, entity: domain.Location) -> "LocationType":
        return cls(id=entity.id, name=entity.name, created_at=entity.created_at)


async def _find_location(
    info: Info[InventoryContext, None], id: int
) -> LocationType | None:
    try:
        location = await info.context.locations.retrieve(id)
    except DoesNotExist:
        return None
    return LocationType.from_entity(location)


@strawberry.type(name="Room")
class RoomType:
    id: int
    name: str
    location_id: int
    created_at: datetime

    @strawberry.field
    async def location(self, info: Info[InventoryContext, None]) -> LocationType | None:
        return await _find_location(info, self.location_id)

    @classmethod
    def from_entity(cls, entity: domain.Room) -> "RoomType":
        return cls(
            id=entity.id,
            name=entity.name,
            location_id=entity.location_id,
            created_at=entity.created_at,
        )


@strawberry.type(name="Item")
class ItemType:
    id: int
    name: str
    quantity: int
    room_id: int
    created_at: datetime

    @strawberry.field
    async def room(self, info: Info[InventoryContext, None]) -> RoomType | None:
        try:
            room = await info.context.rooms.retrieve(self.room_id)
        except DoesNotExist:
            return None
        return RoomType.from_entity(room)

    @classmethod
    def from_entity(cls, entity: domain.Item) -> "ItemType":
        return cls(
            id=entity.id,
            name=entity.name,
            quantity=entity.quantity,
            room_id=entity.room_id,
            created_at=entity.created_at,
        )


@strawberry.input
class LocationFilterInput:
    id: IntOperationFilterInput | None = None
    name: StringOperationFilterInput | None = None
    created_at: DateTimeOperationFilterInput | None = None


@strawberry.input
class RoomFilterInput:
    id: IntOperationFilterInput | None = None
    name: StringOperationFilterInput | None = None
    location_id: IntOperationFilterInput | None = None
    created_at: DateTimeOperationFilterInput | None = None


@strawberry.input
class ItemFilterInput:
    id: IntOperationFilterInput | None = None
    name: StringOperationFilterInput | None = None
    quantity: IntOperationFilterInput | None = None
    room_id: IntOperationFilterInput | None = None
    created_at: DateTimeOperationFilterInput | None = None


@strawberry.input
class LocationSortInput:
    id: SortEnumType | None = None
    name: SortEnumType | None = None
    created_at: SortEnumType | None = None


@strawberry.input
class RoomSortInput:
    id: SortEnumType | None = None
    name: SortEnumType | None = None
    location_id: SortEnumType | None = None
    created_at: SortEnumType | None = None


@strawberry.input
class ItemSortInput:
    id: SortEnumType | None = None
    name: SortEnumType | None = None
    quantity: SortEnumType | None = None
    room_id: SortEnumType | None = None
    created_at: SortEnumType | None = None


@strawberry.type
class Query:
    @strawberry.field
    async def locations(
        self,
        info: Info[InventoryContext, None],
        first: int | None = None,
        last: int | None = None,
        after: str | None = None,
        before: str | None = None,
        where: LocationFilterInput | None = None,
        order: list[LocationSortInput] | None = None,
    ) -> Connection[LocationType] | None:
        with graphql_errors():
            connection = await info.context.locations.paginate(
                to_filters(where),
                PaginationArguments(first=first, last=last, after=after, before=before),
                order=to_sort_fields(order),
            )
        return Connection.from_domain(connection, LocationType.from_entity)

    @strawberry.field
    async def location(
        self, info: Info[InventoryContext, None], id: int
    ) -> LocationType | None:
        return await _find_location(info, id)

    @strawberry.field
    async def rooms(
        self,
        info: Info[InventoryContext, None],
        first: int | None = None,
        last: int | None = None,
        after: str | None = None,
        before: str | None = None,
        where: RoomFilterInput | None = None,
        order: list[RoomSortInput] | None = None,
    ) -> Connection[RoomType] | None:
        with graphql_errors():
            connection = await info.context.rooms.paginate(
                to_filters(where),
                PaginationArguments(first=first, last=last, after=after, before=before),
                order=to_sort_fields(order),
            )
        return Connection.from_domain(connection, RoomType.from_entity)

    @strawberry.field(description="Items, optionally narrowed by a name search.")
    async def items(
        self,
        info: Info[InventoryContext, None],
        search: str | None = None,
        first: int | None = None,
        last: int | None = None,
        after: str | None = None,
        before: str | None = None,
        where: ItemFilterInput | None = None,
        order: list[ItemSortInput] | None = None,
    ) -> Connection[ItemType] | None:
        with graphql_errors():
            connection = await info.context.items.search(
                search,
                to_filters(where),
                PaginationArguments(first=first, last=last, after=after, before=before),
                order=to_sort_fields(order),
            )
        return Connection.from_domain(connection, ItemType.from_entity)


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def add_location(
        self, info: Info[InventoryContext, None], name: str
    ) -> LocationType:
        with graphql_errors():
            location = await info.context.locations.add_location(name)
        return LocationType.from_entity(location)

    @strawberry.mutation
    async def add_room(
        self, info: Info[InventoryContext, None], name: str, location_id: int
    ) -> RoomType:
        with graphql_errors():
            room = await info.context.rooms.add_room(name, location_id)
        return RoomType.from_entity(room)

    @strawberry.mutation
    async def add_item(
        self, info: Info[InventoryContext, None], name: str, quantity: int, room_id: int
    ) -> ItemType:
        with graphql_errors():
            item = await info.context.items.add_item(name, quantity, room_id)
        return ItemType.from_entity(item)

    @strawberry.mutation
    async def move_item(
        self, info: Info[InventoryContext, None], item_id: int, new_room_id: int
    ) -> ItemType:
        with graphql_errors():
            item = await info.context.items.move_item(item_id, new_room_id)
        return ItemType.from_entity(item)

    @strawberry.mutation
    async def delete_item(
        self, info: Info[InventoryContext, None], item_id: int
    ) -> bool:
        with graphql_errors():
            return await info.context.items.delete_item(item_id)


schema = strawberry.Schema(query=Query, mutation=Mutation)
