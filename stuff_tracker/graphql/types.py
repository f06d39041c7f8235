# (c) Nelen & Schuurmans

from collections.abc import Callable
from collections.abc import Sequence
from datetime import datetime
from enum import Enum
from typing import Any
from typing import Generic
from typing import TypeVar

import strawberry

from stuff_tracker import ComparisonFilter
from stuff_tracker import ComparisonOperator
from stuff_tracker import Connection as DomainConnection
from stuff_tracker import Filter
from stuff_tracker import PageInfo as DomainPageInfo
from stuff_tracker import SortDirection
from stuff_tracker import SortField

__all__ = [
    "Connection",
    "DateTimeOperationFilterInput",
    "Edge",
    "IntOperationFilterInput",
    "PageInfo",
    "SortEnumType",
    "StringOperationFilterInput",
    "to_filters",
    "to_sort_fields",
]


T = TypeVar("T")


@strawberry.type(description="Information about pagination in a connection.")
class PageInfo:
    has_next_page: bool
    has_previous_page: bool
    start_cursor: str | None = None
    end_cursor: str | None = None

    @classmethod
    def from_domain(cls, page_info: DomainPageInfo) -> "PageInfo":
        return cls(**page_info.model_dump())


@strawberry.type
class Edge(Generic[T]):
    node: T
    cursor: str


@strawberry.type
class Connection(Generic[T]):
    edges: list[Edge[T]]
    nodes: list[T]
    page_info: PageInfo
    total_count: int | None = None

    @classmethod
    def from_domain(
        cls, connection: DomainConnection[Any], to_node: Callable[[Any], T]
    ) -> "Connection[T]":
        edges = [Edge(node=to_node(x.node), cursor=x.cursor) for x in connection.edges]
        return cls(
            edges=edges,
            nodes=[x.node for x in edges],
            page_info=PageInfo.from_domain(connection.page_info),
            total_count=connection.total_count,
        )


@strawberry.enum
class SortEnumType(Enum):
    ASC = "ASC"
    DESC = "DESC"


def _comparisons(field: str, **values: Any) -> list[Filter]:
    return [
        ComparisonFilter(
            field=field, values=[value], operator=ComparisonOperator(operator)
        )
        for operator, value in values.items()
        if value is not None
    ]


@strawberry.input
class StringOperationFilterInput:
    eq: str | None = None
    contains: str | None = None
    starts_with: str | None = None

    def to_filters(self, field: str) -> list[Filter]:
        return _comparisons(
            field, eq=self.eq, contains=self.contains, starts_with=self.starts_with
        )


@strawberry.input
class IntOperationFilterInput:
    eq: int | None = None
    gte: int | None = None
    lte: int | None = None

    def to_filters(self, field: str) -> list[Filter]:
        return _comparisons(field, eq=self.eq, ge=self.gte, le=self.lte)


@strawberry.input
class DateTimeOperationFilterInput:
    eq: datetime | None = None
    gte: datetime | None = None
    lte: datetime | None = None

    def to_filters(self, field: str) -> list[Filter]:
        return _comparisons(field, eq=self.eq, ge=self.gte, le=self.lte)


def to_filters(where: Any | None) -> list[Filter]:
    """Convert a `where` input into filters; the fields are ANDed.

    The attribute names of the input are the record field names.
    """
    if where is None:
        return []
    result: list[Filter] = []
    for field, operation in vars(where).items():
        if operation is not None:
            result.extend(operation.to_filters(field))
    return result


def to_sort_fields(order: Sequence[Any] | None) -> list[SortField]:
    """Flatten a list of `{field: ASC|DESC}` inputs into sort fields.

    Fields within one input object are taken in declaration order.
    """
    result: list[SortField] = []
    for item in order or ():
        for field, direction in vars(item).items():
            if direction is not None:
                result.append(
                    SortField(field=field, direction=SortDirection(direction.value))
                )
    return result
