# (c) Nelen & Schuurmans

import zlib
from collections.abc import Collection
from collections.abc import Iterable
from collections.abc import Sequence
from enum import Enum
from functools import cmp_to_key
from typing import Any

from .exceptions import InvalidSort
from .types import Json
from .value_object import ValueObject

__all__ = ["SortDirection", "SortField", "SortKey", "build_sort_key", "ID_FIELD"]


ID_FIELD = "id"


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"

    def reverse(self) -> "SortDirection":
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


class SortField(ValueObject):
    field: str
    direction: SortDirection = SortDirection.ASC

    @property
    def ascending(self) -> bool:
        return self.direction is SortDirection.ASC

    def reverse(self) -> "SortField":
        return SortField(field=self.field, direction=self.direction.reverse())


def _compare(x: Any, y: Any) -> int:
    # None sorts after any value, like NULLS LAST on an ascending index
    if x == y:
        return 0
    if x is None:
        return 1
    if y is None:
        return -1
    return -1 if x < y else 1


class SortKey(ValueObject):
    """An ordered list of (field, direction) pairs.

    When built with ``build_sort_key`` it always contains the id field, so that
    it defines a total order over records: no two records compare equal.
    """

    fields: tuple[SortField, ...]

    @classmethod
    def default(cls) -> "SortKey":
        return cls(fields=(SortField(field=ID_FIELD),))

    @property
    def names(self) -> list[str]:
        return [x.field for x in self.fields]

    @property
    def directions(self) -> list[SortDirection]:
        return [x.direction for x in self.fields]

    @property
    def fingerprint(self) -> int:
        text = ",".join(f"{x.field}:{x.direction.value}" for x in self.fields)
        return zlib.crc32(text.encode())

    def reversed(self) -> "SortKey":
        return SortKey(fields=tuple(x.reverse() for x in self.fields))

    def values(self, record: Json) -> tuple[Any, ...]:
        return tuple(record.get(x.field) for x in self.fields)

    def compare_values(self, a: Sequence[Any], b: Sequence[Any]) -> int:
        for sort_field, x, y in zip(self.fields, a, b):
            result = _compare(x, y)
            if result != 0:
                return result if sort_field.ascending else -result
        return 0

    def compare(self, a: Json, b: Json) -> int:
        return self.compare_values(self.values(a), self.values(b))

    def sort(self, records: Iterable[Json]) -> list[Json]:
        return sorted(records, key=cmp_to_key(self.compare))

    def is_after(self, record: Json, boundary: Sequence[Any]) -> bool:
        return self.compare_values(self.values(record), boundary) > 0

    def seek(
        self,
        records: Iterable[Json],
        after: Sequence[Any] | None = None,
        limit: int | None = None,
    ) -> list[Json]:
        """Order records and keep those strictly after the boundary values.

        This is the in-memory version of the seek that SQL gateways push down
        to the database.
        """
        if after is not None:
            records = [x for x in records if self.is_after(x, after)]
        result = self.sort(records)
        return result if limit is None else result[:limit]


def _as_sort_field(value: SortField | tuple[str, SortDirection | str]) -> SortField:
    if isinstance(value, SortField):
        return value
    field, direction = value
    if not isinstance(direction, SortDirection):
        try:
            direction = SortDirection(direction.upper())
        except (AttributeError, ValueError):
            raise InvalidSort(field, f"invalid sort direction for '{field}'")
    return SortField(field=field, direction=direction)


def build_sort_key(
    requested: Sequence[SortField | tuple[str, SortDirection | str]],
    sortable: Collection[str],
) -> SortKey:
    """Merge a client-requested sort with the id tiebreaker.

    The first pair is the primary key. Fields that are not in `sortable`
    raise InvalidSort, as do fields that are requested more than once.
    """
    fields: list[SortField] = []
    for value in requested:
        sort_field = _as_sort_field(value)
        if sort_field.field not in sortable and sort_field.field != ID_FIELD:
            raise InvalidSort(sort_field.field)
        if sort_field.field in (x.field for x in fields):
            raise InvalidSort(
                sort_field.field, f"cannot sort on '{sort_field.field}' twice"
            )
        fields.append(sort_field)
    if ID_FIELD not in (x.field for x in fields):
        fields.append(SortField(field=ID_FIELD))
    return SortKey(fields=tuple(fields))
