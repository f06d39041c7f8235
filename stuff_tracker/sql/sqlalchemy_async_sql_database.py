# (c) Nelen & Schuurmans

import logging
import re
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import MetaData
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncConnection
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.sql import Executable

from stuff_tracker import AlreadyExists
from stuff_tracker import Conflict
from stuff_tracker import Json

from .sql_provider import SQLDatabase
from .sql_provider import SQLProvider

__all__ = ["SQLAlchemyAsyncSQLDatabase"]


logger = logging.getLogger(__name__)


UNIQUE_VIOLATION_DETAIL_REGEX = re.compile(
    r"DETAIL:\s*Key\s\((?P<key>.*)\)=\((?P<value>.*)\)\s+already exists"
)


def maybe_raise_conflict(e: DBAPIError) -> None:
    # https://www.postgresql.org/docs/current/errcodes-appendix.html
    if getattr(e.orig, "pgcode", None) == "40001":  # serialization_failure
        raise Conflict("could not execute query due to concurrent update")


def maybe_raise_already_exists(e: DBAPIError) -> None:
    if getattr(e.orig, "pgcode", None) != "23505":  # unique_violation
        return
    lines = str(e.orig.args[0]).split("\n")
    match = UNIQUE_VIOLATION_DETAIL_REGEX.match(lines[1]) if len(lines) > 1 else None
    if match:
        raise AlreadyExists(key=match["key"], value=match["value"])
    raise AlreadyExists()


class SQLAlchemyAsyncSQLDatabase(SQLDatabase):
    """A postgres database accessed through SQLAlchemy and asyncpg.

    Transactions run with REPEATABLE READ isolation, so that all reads within
    one transaction (for instance the queries that make up one page) see the
    same snapshot.
    """

    engine: AsyncEngine

    def __init__(self, url: str, **kwargs):
        kwargs.setdefault("isolation_level", "REPEATABLE READ")
        if "://" not in url:
            url = f"postgresql+asyncpg://{url}"
        self.engine = create_async_engine(url, **kwargs)

    async def dispose(self) -> None:
        await self.engine.dispose()

    async def execute(
        self, query: Executable, bind_params: dict[str, Any] | None = None
    ) -> list[Json]:
        async with self.transaction() as transaction:
            return await transaction.execute(query, bind_params)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[SQLProvider]:  # type: ignore
        async with self.engine.connect() as connection:
            async with connection.begin():
                yield SQLAlchemyAsyncSQLTransaction(connection)

    @asynccontextmanager
    async def testing_transaction(self) -> AsyncIterator[SQLProvider]:  # type: ignore
        async with self.engine.connect() as connection:
            async with connection.begin() as transaction:
                yield SQLAlchemyAsyncSQLTransaction(connection)
                await transaction.rollback()

    async def execute_autocommit(self, query: Executable) -> None:
        engine = self.engine.execution_options(isolation_level="AUTOCOMMIT")
        async with engine.connect() as connection:
            await connection.execute(query)

    async def create_tables(self, metadata: MetaData) -> None:
        async with self.engine.begin() as connection:
            await connection.run_sync(metadata.create_all)
        logger.info("created tables %s", ", ".join(metadata.tables))


class SQLAlchemyAsyncSQLTransaction(SQLProvider):
    def __init__(self, connection: AsyncConnection):
        self.connection = connection

    async def execute(
        self, query: Executable, bind_params: dict[str, Any] | None = None
    ) -> list[Json]:
        try:
            result = await self.connection.execute(query, bind_params)
        except DBAPIError as e:
            maybe_raise_conflict(e)
            maybe_raise_already_exists(e)
            raise e
        return [x._asdict() for x in result.fetchall()]

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[SQLProvider]:  # type: ignore
        async with self.connection.begin_nested():
            yield self
