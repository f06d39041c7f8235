# (c) Nelen & Schuurmans

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from copy import deepcopy
from datetime import datetime
from typing import Any
from typing import List
from typing import Optional

from stuff_tracker.base.domain import AlreadyExists
from stuff_tracker.base.domain import ComparisonFilter
from stuff_tracker.base.domain import ComparisonOperator
from stuff_tracker.base.domain import Conflict
from stuff_tracker.base.domain import DoesNotExist
from stuff_tracker.base.domain import Filter
from stuff_tracker.base.domain import Gateway
from stuff_tracker.base.domain import Json

__all__ = ["InMemoryGateway"]


def _compare(value: Any, operator: ComparisonOperator, other: Any) -> bool:
    if operator is ComparisonOperator.EQ:
        return value == other
    if operator is ComparisonOperator.NE:
        return value != other
    if value is None:
        return False
    if operator is ComparisonOperator.CONTAINS:
        return isinstance(value, str) and other.casefold() in value.casefold()
    if operator is ComparisonOperator.STARTS_WITH:
        return isinstance(value, str) and value.casefold().startswith(other.casefold())
    try:
        if operator is ComparisonOperator.LT:
            return value < other
        if operator is ComparisonOperator.LE:
            return value <= other
        if operator is ComparisonOperator.GT:
            return value > other
        if operator is ComparisonOperator.GE:
            return value >= other
    except TypeError:
        return False
    raise ValueError(f"unknown operator {operator}")


def matches(record: Json, filter: Filter) -> bool:
    if filter.field not in record:
        return False
    value = record[filter.field]
    if isinstance(filter, ComparisonFilter):
        return _compare(value, filter.operator, filter.values[0])
    return value in filter.values


class InMemoryGateway(Gateway):
    """A gateway that keeps its records in a dictionary.

    Ids are assigned by autoincrement and never reused, also not after the
    record with the highest id is removed.
    """

    def __init__(self, data: List[Json]):
        self.data = {x["id"]: deepcopy(x) for x in data}
        self._last_id = max(self.data, default=0)

    def _get_next_id(self) -> int:
        self._last_id = max(self._last_id, max(self.data, default=0)) + 1
        return self._last_id

    @asynccontextmanager
    async def snapshot(self) -> AsyncIterator["InMemoryGateway"]:
        # a copy, so that concurrent writers do not affect the reads
        yield InMemoryGateway(list(self.data.values()))

    async def filter(self, filters: List[Filter]) -> List[Json]:
        result = []
        for x in self.data.values():
            if all(matches(x, filter) for filter in filters):
                result.append(deepcopy(x))
        return result

    async def add(self, item: Json) -> Json:
        item = item.copy()
        id_ = item.pop("id", None)
        # autoincrement (like SQL does)
        if id_ is None:
            id_ = self._get_next_id()
        elif id_ in self.data:
            raise AlreadyExists(id_)
        else:
            self._last_id = max(self._last_id, id_)

        self.data[id_] = {"id": id_, **item}
        return deepcopy(self.data[id_])

    async def update(
        self, item: Json, if_unmodified_since: Optional[datetime] = None
    ) -> Json:
        _id = item.get("id")
        if _id is None or _id not in self.data:
            raise DoesNotExist("record", _id)
        existing = self.data[_id]
        if if_unmodified_since and existing.get("updated_at") != if_unmodified_since:
            raise Conflict()
        existing.update(item)
        return deepcopy(existing)

    async def remove(self, id: int) -> bool:
        if id not in self.data:
            return False
        del self.data[id]
        return True
