# (c) Nelen & Schuurmans

from abc import ABC
from collections.abc import AsyncIterator
from collections.abc import Sequence
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any
from typing import Callable
from typing import List
from typing import Optional

from .exceptions import DoesNotExist
from .filter import Filter
from .sort import SortKey
from .types import Id
from .types import Json

__all__ = ["Gateway"]


class Gateway(ABC):
    async def filter(self, filters: List[Filter]) -> List[Json]:
        raise NotImplementedError()

    async def seek(
        self,
        filters: List[Filter],
        sort_key: SortKey,
        after: Optional[Sequence[Any]] = None,
        limit: Optional[int] = None,
    ) -> List[Json]:
        """Return matching records strictly after `after`, ordered by `sort_key`.

        Override this to push the ordering and boundary down to the store.
        """
        return sort_key.seek(await self.filter(filters), after=after, limit=limit)

    async def exists_after(
        self, filters: List[Filter], sort_key: SortKey, after: Sequence[Any]
    ) -> bool:
        return len(await self.seek(filters, sort_key, after=after, limit=1)) > 0

    @asynccontextmanager
    async def snapshot(self) -> AsyncIterator["Gateway"]:
        """Yield a gateway that reads one consistent state of the records."""
        yield self

    async def count(self, filters: List[Filter]) -> int:
        return len(await self.filter(filters))

    async def exists(self, filters: List[Filter]) -> bool:
        return len(await self.seek(filters, SortKey.default(), limit=1)) > 0

    async def get(self, id: Id) -> Optional[Json]:
        result = await self.filter([Filter.for_id(id)])
        return result[0] if result else None

    async def add(self, item: Json) -> Json:
        raise NotImplementedError()

    async def update(
        self, item: Json, if_unmodified_since: Optional[datetime] = None
    ) -> Json:
        raise NotImplementedError()

    async def update_transactional(self, id: Id, func: Callable[[Json], Json]) -> Json:
        existing = await self.get(id)
        if existing is None:
            raise DoesNotExist("record", id)
        return await self.update(
            func(existing), if_unmodified_since=existing["updated_at"]
        )

    async def remove(self, id: Id) -> bool:
        raise NotImplementedError()
