# (c) Nelen & Schuurmans

import asyncio
from collections.abc import Sequence
from typing import ClassVar
from typing import FrozenSet
from typing import Generic
from typing import List
from typing import Optional
from typing import Tuple
from typing import Type
from typing import TypeVar
from typing import Union

from .cursor import CursorCodec
from .exceptions import DoesNotExist
from .filter import Filter
from .gateway import Gateway
from .keyset import PageSlicer
from .pagination import Connection
from .pagination import PaginationArguments
from .pagination import PaginationConfig
from .root_entity import RootEntity
from .sort import build_sort_key
from .sort import SortDirection
from .sort import SortField
from .types import Id
from .types import Json

__all__ = ["Repository"]

T = TypeVar("T", bound=RootEntity)


class Repository(Generic[T]):
    entity: Type[T]
    # Fields a client may sort on; defaults to all fields of the entity
    sortable: ClassVar[FrozenSet[str]]

    def __init__(self, gateway: Gateway, config: Optional[PaginationConfig] = None):
        self.gateway = gateway
        self.config = config or PaginationConfig()
        self.codec = CursorCodec(
            {name: x.annotation for name, x in self.entity.model_fields.items()}
        )

    def __init_subclass__(cls) -> None:
        (base,) = cls.__orig_bases__  # type: ignore
        (entity,) = base.__args__
        super().__init_subclass__()
        cls.entity = entity
        if "sortable" not in cls.__dict__:
            cls.sortable = frozenset(entity.model_fields)

    async def filter(self, filters: List[Filter]) -> List[T]:
        return [self.entity(**x) for x in await self.gateway.filter(filters)]

    async def paginate(
        self,
        filters: List[Filter],
        args: PaginationArguments,
        order: Sequence[Union[SortField, Tuple[str, SortDirection]]] = (),
        cancel: Optional[asyncio.Event] = None,
    ) -> Connection[T]:
        sort_key = build_sort_key(order, self.sortable)
        request = args.to_page_request(self.config)
        return await PageSlicer(self.gateway, self.config, self.codec).paginate(
            filters, sort_key, request, to_node=self.entity, cancel=cancel
        )

    async def get(self, id: Id) -> T:
        res = await self.gateway.get(id)
        if res is None:
            raise DoesNotExist(self.entity.__name__, id)
        else:
            return self.entity(**res)

    async def add(self, item: Union[T, Json]) -> T:
        if isinstance(item, dict):
            item = self.entity.create(**item)
        created = await self.gateway.add(item.model_dump())
        return self.entity(**created)

    async def update(self, id: Id, values: Json) -> T:
        if not values:
            return await self.get(id)
        updated = await self.gateway.update_transactional(
            id, lambda x: self.entity(**x).update(**values).model_dump()
        )
        return self.entity(**updated)

    async def remove(self, id: Id) -> bool:
        return await self.gateway.remove(id)

    async def count(self, filters: List[Filter]) -> int:
        return await self.gateway.count(filters)

    async def exists(self, filters: List[Filter]) -> bool:
        return await self.gateway.exists(filters)
