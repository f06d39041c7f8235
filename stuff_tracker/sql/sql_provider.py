# (c) Nelen & Schuurmans

from collections.abc import AsyncIterator
from collections.abc import Sequence
from typing import Any

from sqlalchemy import MetaData
from sqlalchemy import text
from sqlalchemy.sql import Executable

from stuff_tracker import Json

__all__ = ["SQLProvider", "SQLDatabase"]


class SQLProvider:
    async def execute(
        self, query: Executable, bind_params: dict[str, Any] | None = None
    ) -> list[Json]:
        raise NotImplementedError()

    async def transaction(self) -> AsyncIterator["SQLProvider"]:
        raise NotImplementedError()
        yield

    async def testing_transaction(self) -> AsyncIterator["SQLProvider"]:
        raise NotImplementedError()
        yield


class SQLDatabase(SQLProvider):
    async def execute_autocommit(self, query: Executable) -> None:
        pass

    async def create_tables(self, metadata: MetaData) -> None:
        raise NotImplementedError()

    async def truncate_tables(self, names: Sequence[str]) -> None:
        quoted = [f'"{x}"' for x in names]
        await self.execute_autocommit(
            text(f"TRUNCATE TABLE {', '.join(quoted)} RESTART IDENTITY CASCADE")
        )

    async def dispose(self) -> None:
        pass
