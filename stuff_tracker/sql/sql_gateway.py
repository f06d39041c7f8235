# (c) Nelen & Schuurmans

import logging
from collections.abc import AsyncIterator
from collections.abc import Callable
from collections.abc import Sequence
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any
from typing import TypeVar

import inject
from sqlalchemy import Table
from sqlalchemy.sql import Executable

from stuff_tracker import Conflict
from stuff_tracker import DoesNotExist
from stuff_tracker import Filter
from stuff_tracker import Gateway
from stuff_tracker import Id
from stuff_tracker import Json
from stuff_tracker import SortKey

from .sql_builder import SQLBuilder
from .sql_provider import SQLDatabase
from .sql_provider import SQLProvider

__all__ = ["SQLGateway"]


logger = logging.getLogger(__name__)


T = TypeVar("T", bound="SQLGateway")


class SQLGateway(Gateway):
    """A gateway to one table, using the SQLDatabase that is configured with inject.

    Subclass with the table as keyword argument:

    >>> class ItemSQLGateway(SQLGateway, table=item_table):
    ...     pass
    """

    table: Table

    def __init__(
        self,
        provider_override: SQLProvider | None = None,
        nested: bool = False,
    ):
        self.provider_override = provider_override
        self.nested = nested
        self.builder = SQLBuilder(self.table)

    @property
    def provider(self):
        return self.provider_override or inject.instance(SQLDatabase)

    def __init_subclass__(cls, table: Table) -> None:
        cls.table = table
        super().__init_subclass__()

    @asynccontextmanager
    async def transaction(self: T) -> AsyncIterator[T]:
        if self.nested:
            yield self
        else:
            async with self.provider.transaction() as provider:
                yield self.__class__(provider, nested=True)

    @asynccontextmanager
    async def snapshot(self: T) -> AsyncIterator[T]:
        async with self.transaction() as transaction:
            yield transaction

    async def execute(self, query: Executable) -> list[Json]:
        return await self.provider.execute(query)

    async def add(self, item: Json) -> Json:
        (result,) = await self.execute(self.builder.insert(item))
        return result

    async def update(
        self, item: Json, if_unmodified_since: datetime | None = None
    ) -> Json:
        id_ = item.get("id")
        if id_ is None:
            raise DoesNotExist("record", id_)
        result = await self.execute(self.builder.update(id_, item, if_unmodified_since))
        if not result:
            if if_unmodified_since is not None:
                if await self.exists([Filter.for_id(id_)]):
                    raise Conflict()
            raise DoesNotExist("record", id_)
        return result[0]

    async def _select_for_update(self, id: Id) -> Json:
        query = self.builder.select([Filter.for_id(id)], for_update=True)
        result = await self.execute(query)
        if not result:
            raise DoesNotExist("record", id)
        return result[0]

    async def update_transactional(self, id: Id, func: Callable[[Json], Json]) -> Json:
        async with self.transaction() as transaction:
            existing = await transaction._select_for_update(id)
            return await transaction.update(func(existing))

    async def remove(self, id: Id) -> bool:
        return bool(await self.execute(self.builder.delete(id)))

    async def filter(self, filters: list[Filter]) -> list[Json]:
        return await self.execute(self.builder.select(filters))

    async def seek(
        self,
        filters: list[Filter],
        sort_key: SortKey,
        after: Sequence[Any] | None = None,
        limit: int | None = None,
    ) -> list[Json]:
        logger.debug(
            "seek on %s ordered by %s (limit %s)", self.table.name, sort_key, limit
        )
        return await self.execute(self.builder.seek(filters, sort_key, after, limit))

    async def count(self, filters: list[Filter]) -> int:
        return (await self.execute(self.builder.count(filters)))[0]["count"]

    async def exists(self, filters: list[Filter]) -> bool:
        return len(await self.execute(self.builder.exists(filters))) > 0
