# (c) Nelen & Schuurmans

from collections.abc import Sequence
from datetime import datetime
from typing import Any

from sqlalchemy import and_
from sqlalchemy import asc
from sqlalchemy import Column
from sqlalchemy import delete
from sqlalchemy import desc
from sqlalchemy import Executable
from sqlalchemy import func
from sqlalchemy import or_
from sqlalchemy import Select
from sqlalchemy import select
from sqlalchemy import Table
from sqlalchemy import true
from sqlalchemy import update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.sql.expression import ColumnElement
from sqlalchemy.sql.expression import false

from stuff_tracker import ComparisonFilter
from stuff_tracker import ComparisonOperator
from stuff_tracker import Filter
from stuff_tracker import Id
from stuff_tracker import Json
from stuff_tracker import SortKey

__all__ = ["SQLBuilder"]


def _comparison_to_sql(
    column: Column, operator: ComparisonOperator, value: Any
) -> ColumnElement:
    if operator is ComparisonOperator.EQ:
        return column == value
    elif operator is ComparisonOperator.NE:
        return column != value
    elif operator is ComparisonOperator.LT:
        return column < value
    elif operator is ComparisonOperator.LE:
        return column <= value
    elif operator is ComparisonOperator.GT:
        return column > value
    elif operator is ComparisonOperator.GE:
        return column >= value
    elif operator is ComparisonOperator.CONTAINS:
        return column.icontains(value, autoescape=True)
    elif operator is ComparisonOperator.STARTS_WITH:
        return column.istartswith(value, autoescape=True)
    raise ValueError(f"unknown operator {operator}")


class SQLBuilder:
    def __init__(self, table: Table):
        self.table = table

    def _column(self, field: str) -> Column | None:
        return getattr(self.table.c, field, None)

    def _sort_column(self, field: str) -> Column:
        column = self._column(field)
        if column is None:
            raise ValueError(f"table {self.table.name} has no column '{field}'")
        return column

    def _filter_to_sql(self, filter: Filter) -> ColumnElement:
        column = self._column(filter.field)
        if column is None:
            return false()
        if isinstance(filter, ComparisonFilter):
            return _comparison_to_sql(column, filter.operator, filter.values[0])
        if len(filter.values) == 0:
            return false()
        elif len(filter.values) == 1:
            return column == filter.values[0]
        else:
            return column.in_(filter.values)

    def _filters_to_sql(self, filters: list[Filter]) -> list[ColumnElement]:
        return [self._filter_to_sql(x) for x in filters]

    def _seek_to_sql(self, sort_key: SortKey, after: Sequence[Any]) -> ColumnElement:
        """Rows strictly after `after` under `sort_key`.

        For (a ASC, b DESC, id ASC) and boundary (v1, v2, v3):

            a > v1 OR (a = v1 AND b < v2) OR (a = v1 AND b = v2 AND id > v3)
        """
        columns = [self._sort_column(x) for x in sort_key.names]
        conditions = []
        for i, (sort_field, value) in enumerate(zip(sort_key.fields, after)):
            column = columns[i]
            beyond = column > value if sort_field.ascending else column < value
            equal = [c == v for c, v in zip(columns[:i], after[:i])]
            conditions.append(and_(*equal, beyond) if equal else beyond)
        return or_(*conditions)

    def _order_by(self, sort_key: SortKey) -> list[ColumnElement]:
        return [
            asc(self._sort_column(x.field))
            if x.ascending
            else desc(self._sort_column(x.field))
            for x in sort_key.fields
        ]

    def _where(self, query: Select, conditions: list[ColumnElement]) -> Select:
        if conditions:
            query = query.where(and_(*conditions))
        return query

    def _id_filter_to_sql(self, id: Id) -> ColumnElement:
        return self._filter_to_sql(Filter.for_id(id))

    def _santize_item(self, item: Json) -> Json:
        known = {c.key for c in self.table.c}
        result = {k: item[k] for k in item.keys() if k in known}
        if "id" in result and result["id"] is None:
            del result["id"]
        return result

    def select(self, filters: list[Filter], for_update: bool = False) -> Executable:
        query = select(self.table)
        if for_update:
            query = query.with_for_update()
        return self._where(query, self._filters_to_sql(filters))

    def seek(
        self,
        filters: list[Filter],
        sort_key: SortKey,
        after: Sequence[Any] | None = None,
        limit: int | None = None,
    ) -> Executable:
        conditions = self._filters_to_sql(filters)
        if after is not None:
            conditions.append(self._seek_to_sql(sort_key, after))
        query = self._where(select(self.table), conditions)
        query = query.order_by(*self._order_by(sort_key))
        if limit is not None:
            query = query.limit(limit)
        return query

    def insert(self, item: Json) -> Executable:
        return (
            insert(self.table).values(**self._santize_item(item)).returning(self.table)
        )

    def update(self, id: Id, item: Json, if_unmodified_since: datetime | None):
        q = self._id_filter_to_sql(id)
        if if_unmodified_since is not None:
            q &= self.table.c.updated_at == if_unmodified_since
        return (
            update(self.table)
            .where(q)
            .values(**self._santize_item(item))
            .returning(self.table)
        )

    def delete(self, id: Id) -> Executable:
        return (
            delete(self.table)
            .where(self._id_filter_to_sql(id))
            .returning(self.table.c.id)
        )

    def count(self, filters: list[Filter]) -> Executable:
        query = select(func.count().label("count")).select_from(self.table)
        return self._where(query, self._filters_to_sql(filters))

    def exists(self, filters: list[Filter]) -> Executable:
        query = select(true().label("exists")).select_from(self.table)
        return self._where(query, self._filters_to_sql(filters)).limit(1)
