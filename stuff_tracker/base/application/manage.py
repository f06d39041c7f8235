# (c) Nelen & Schuurmans

import asyncio
from collections.abc import Sequence
from typing import Generic
from typing import List
from typing import Optional
from typing import Type
from typing import TypeVar

import backoff

from stuff_tracker.base.domain import Conflict
from stuff_tracker.base.domain import Connection
from stuff_tracker.base.domain import Filter
from stuff_tracker.base.domain import Id
from stuff_tracker.base.domain import Json
from stuff_tracker.base.domain import PaginationArguments
from stuff_tracker.base.domain import Repository
from stuff_tracker.base.domain import RootEntity
from stuff_tracker.base.domain import SortField

T = TypeVar("T", bound=RootEntity)

__all__ = ["Manage"]


class Manage(Generic[T]):
    repo: Repository[T]
    entity: Type[T]

    def __init__(self, repo: Optional[Repository[T]] = None):
        assert repo is not None
        self.repo = repo

    def __init_subclass__(cls) -> None:
        (base,) = cls.__orig_bases__  # type: ignore
        (entity,) = base.__args__
        assert issubclass(entity, RootEntity)
        super().__init_subclass__()
        cls.entity = entity

    async def retrieve(self, id: Id) -> T:
        return await self.repo.get(id)

    async def create(self, values: Json) -> T:
        return await self.repo.add(values)

    async def update(self, id: Id, values: Json, retry_on_conflict: bool = True) -> T:
        """This update has a built-in retry function that can be switched off.

        Gateways may raise Conflict when the record was modified concurrently
        (see Gateway.update_transactional). The backoff strategy assumes that
        we can retry immediately, with a constant 200 ms between attempts.

        If the repo.update is not idempotent (which is atypical), retries should be
        switched off.
        """
        if retry_on_conflict:
            return await self._update_with_retries(id, values)
        else:
            return await self.repo.update(id, values)

    @backoff.on_exception(backoff.constant, Conflict, max_tries=10, interval=0.2)
    async def _update_with_retries(self, id: Id, values: Json) -> T:
        return await self.repo.update(id, values)

    async def destroy(self, id: Id) -> bool:
        return await self.repo.remove(id)

    async def filter(self, filters: List[Filter]) -> List[T]:
        return await self.repo.filter(filters)

    async def paginate(
        self,
        filters: List[Filter],
        args: PaginationArguments,
        order: Sequence[SortField] = (),
        cancel: Optional[asyncio.Event] = None,
    ) -> Connection[T]:
        return await self.repo.paginate(filters, args, order=order, cancel=cancel)

    async def count(self, filters: List[Filter]) -> int:
        return await self.repo.count(filters)

    async def exists(self, filters: List[Filter]) -> bool:
        return await self.repo.exists(filters)
