# (c) Nelen & Schuurmans

import logging
from collections.abc import Sequence
from enum import Enum
from typing import Generic
from typing import TypeVar

from pydantic import BaseModel
from pydantic import Field

from .exceptions import ConflictingPaginationArguments
from .exceptions import PageSizeOutOfRange
from .value_object import ValueObject

__all__ = [
    "Connection",
    "Direction",
    "Edge",
    "PageInfo",
    "PageRequest",
    "PaginationArguments",
    "PaginationConfig",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PaginationConfig(ValueObject):
    default_page_size: int = Field(default=50, ge=1)
    max_page_size: int = Field(default=1000, ge=1)
    include_total_count: bool = True


class Direction(str, Enum):
    FORWARD = "forward"
    BACKWARD = "backward"


class PageRequest(ValueObject):
    direction: Direction = Direction.FORWARD
    count: int = Field(ge=1)
    cursor: str | None = None

    @property
    def forward(self) -> bool:
        return self.direction is Direction.FORWARD


class PaginationArguments(ValueObject):
    """The relay-style arguments of a paginated field."""

    first: int | None = None
    last: int | None = None
    after: str | None = None
    before: str | None = None

    def to_page_request(self, config: PaginationConfig) -> PageRequest:
        if self.first is not None and self.last is not None:
            raise ConflictingPaginationArguments("cannot combine 'first' and 'last'")
        if self.after is not None and self.before is not None:
            raise ConflictingPaginationArguments(
                "cannot combine 'after' and 'before'"
            )
        if self.first is not None and self.before is not None:
            raise ConflictingPaginationArguments(
                "cannot combine 'first' and 'before'"
            )
        if self.last is not None and self.after is not None:
            raise ConflictingPaginationArguments("cannot combine 'last' and 'after'")
        if self.last is not None or self.before is not None:
            direction = Direction.BACKWARD
            name, count, cursor = "last", self.last, self.before
        else:
            direction = Direction.FORWARD
            name, count, cursor = "first", self.first, self.after
        if count is None:
            count = config.default_page_size
        elif count <= 0:
            raise PageSizeOutOfRange(name, count)
        if count > config.max_page_size:
            logger.debug(
                "clamped '%s' from %d to %d", name, count, config.max_page_size
            )
            count = config.max_page_size
        return PageRequest(direction=direction, count=count, cursor=cursor)


class PageInfo(BaseModel):
    has_next_page: bool
    has_previous_page: bool
    start_cursor: str | None = None
    end_cursor: str | None = None


class Edge(BaseModel, Generic[T]):
    node: T
    cursor: str


class Connection(BaseModel, Generic[T]):
    edges: Sequence[Edge[T]]
    page_info: PageInfo
    total_count: int | None = None

    @property
    def nodes(self) -> list[T]:
        return [x.node for x in self.edges]
