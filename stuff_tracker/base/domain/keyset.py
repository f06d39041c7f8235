# (c) Nelen & Schuurmans

"""Keyset (cursor) pagination over a Gateway.

The slicer never uses offsets: a page is everything strictly after (or
before) a boundary under the effective sort key. Backward pages walk the
reversed sort key, so a gateway only has to implement one seek primitive:
"strictly before under K" is "strictly after under reversed(K)".
"""

import asyncio
import logging
from collections.abc import Callable
from collections.abc import Sequence
from typing import Any
from typing import TypeVar

from pydantic import BaseModel

from .cursor import CursorCodec
from .filter import Filter
from .gateway import Gateway
from .pagination import Connection
from .pagination import Edge
from .pagination import PageInfo
from .pagination import PageRequest
from .pagination import PaginationConfig
from .sort import SortKey
from .types import Json

__all__ = ["Slice", "PageSlicer", "assemble"]

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Slice(BaseModel):
    records: list[Json]
    has_next_page: bool
    has_previous_page: bool
    total_count: int | None = None


def _check_cancelled(cancel: asyncio.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        raise asyncio.CancelledError()


async def _exists_beyond(
    gateway: Gateway,
    filters: list[Filter],
    sort_key: SortKey,
    anchor: Sequence[Any] | None,
) -> bool:
    if anchor is None:
        return False
    return await gateway.exists_after(filters, sort_key, anchor)


class PageSlicer:
    def __init__(
        self,
        gateway: Gateway,
        config: PaginationConfig | None = None,
        codec: CursorCodec | None = None,
    ):
        self.gateway = gateway
        self.config = config or PaginationConfig()
        self.codec = codec or CursorCodec()

    async def slice(
        self,
        filters: list[Filter],
        sort_key: SortKey,
        request: PageRequest,
        cancel: asyncio.Event | None = None,
    ) -> Slice:
        """Compute one page plus its boundary flags.

        All reads happen inside one gateway snapshot. If `cancel` is set
        before the boundary flags are computed, asyncio.CancelledError is
        raised instead.
        """
        boundary = (
            None
            if request.cursor is None
            else self.codec.decode(request.cursor, sort_key)
        )
        walk_key = sort_key if request.forward else sort_key.reversed()
        async with self.gateway.snapshot() as snapshot:
            records = await snapshot.seek(
                filters, walk_key, after=boundary, limit=request.count + 1
            )
            has_more = len(records) > request.count
            records = records[: request.count]
            if not request.forward:
                records.reverse()

            _check_cancelled(cancel)
            if request.forward:
                has_next_page = has_more
                first = sort_key.values(records[0]) if records else boundary
                has_previous_page = await _exists_beyond(
                    snapshot, filters, sort_key.reversed(), first
                )
            else:
                has_previous_page = has_more
                last = sort_key.values(records[-1]) if records else boundary
                has_next_page = await _exists_beyond(snapshot, filters, sort_key, last)

            total_count = None
            if self.config.include_total_count:
                _check_cancelled(cancel)
                total_count = await snapshot.count(filters)

        logger.debug(
            "sliced %d records (%s, next=%s, previous=%s)",
            len(records),
            request.direction.value,
            has_next_page,
            has_previous_page,
        )
        return Slice(
            records=records,
            has_next_page=has_next_page,
            has_previous_page=has_previous_page,
            total_count=total_count,
        )

    async def paginate(
        self,
        filters: list[Filter],
        sort_key: SortKey,
        request: PageRequest,
        to_node: Callable[..., T],
        cancel: asyncio.Event | None = None,
    ) -> Connection[T]:
        result = await self.slice(filters, sort_key, request, cancel=cancel)
        return assemble(result, sort_key, to_node, codec=self.codec)


def assemble(
    result: Slice,
    sort_key: SortKey,
    to_node: Callable[..., T],
    codec: CursorCodec | None = None,
) -> Connection[T]:
    """Wrap a slice into a Connection with one cursor per edge."""
    codec = codec or CursorCodec()
    edges = [
        Edge[Any](node=to_node(**x), cursor=codec.encode(sort_key, x))
        for x in result.records
    ]
    return Connection[Any](
        edges=edges,
        page_info=PageInfo(
            has_next_page=result.has_next_page,
            has_previous_page=result.has_previous_page,
            start_cursor=edges[0].cursor if edges else None,
            end_cursor=edges[-1].cursor if edges else None,
        ),
        total_count=result.total_count,
    )
