# (c) Nelen & Schuurmans

import logging
import socket

import inject
from fastapi import FastAPI

from stuff_tracker import Gateway
from stuff_tracker import InMemoryGateway
from stuff_tracker import LoggingGateway
from stuff_tracker import PaginationConfig
from stuff_tracker.fastapi import Service
from stuff_tracker.sql import SQLAlchemyAsyncSQLDatabase
from stuff_tracker.sql import SQLDatabase

from .application import ManageItem
from .application import ManageLocation
from .application import ManageRoom
from .config import InventoryConfig
from .domain import ItemRepository
from .domain import LocationRepository
from .domain import RoomRepository
from .schema import InventoryContext
from .schema import schema
from .seed import seed
from .sql_gateway import ItemSQLGateway
from .sql_gateway import LocationSQLGateway
from .sql_gateway import RoomSQLGateway
from .sql_model import metadata

__all__ = ["Inventory", "create_app"]


logger = logging.getLogger(__name__)


class Inventory:
    def __init__(
        self,
        locations: Gateway,
        rooms: Gateway,
        items: Gateway,
        config: PaginationConfig | None = None,
    ):
        self.locations = LocationRepository(locations, config)
        self.rooms = RoomRepository(rooms, config)
        self.items = ItemRepository(items, config)

    @classmethod
    def in_memory(cls, config: PaginationConfig | None = None) -> "Inventory":
        return cls(
            InMemoryGateway([]), InMemoryGateway([]), InMemoryGateway([]), config
        )

    @classmethod
    def sql(cls, config: PaginationConfig | None = None) -> "Inventory":
        return cls(LocationSQLGateway(), RoomSQLGateway(), ItemSQLGateway(), config)

    def context(self) -> InventoryContext:
        return InventoryContext(
            locations=ManageLocation(self.locations),
            rooms=ManageRoom(self.rooms, self.locations),
            items=ManageItem(self.items, self.rooms),
        )

    async def seed(self) -> None:
        if await self.locations.exists([]):
            logger.info("inventory already has data, skipping seed")
            return
        await seed(self.locations, self.rooms, self.items)


def create_app(config: InventoryConfig | None = None) -> FastAPI:
    """Create the GraphQL app; without a database url, records live in memory."""
    if config is None:
        config = InventoryConfig()

    database: SQLDatabase | None = None
    if config.database_url is None:
        inventory = Inventory.in_memory(config.pagination)
    else:
        database = SQLAlchemyAsyncSQLDatabase(config.database_url)
        inject.clear_and_configure(lambda binder: binder.bind(SQLDatabase, database))
        inventory = Inventory.sql(config.pagination)

    async def startup() -> None:
        if database is not None:
            await database.create_tables(metadata)
        if config.seed:
            await inventory.seed()

    async def shutdown() -> None:
        if database is not None:
            await database.dispose()

    async def get_context() -> InventoryContext:
        return inventory.context()

    return Service(schema, context_getter=get_context).create_app(
        title=config.title,
        description="Locations, rooms and items with keyset pagination",
        hostname=socket.gethostname(),
        on_startup=[startup],
        on_shutdown=[shutdown],
        access_logger_gateway=LoggingGateway(),
    )
