from datetime import datetime
from datetime import timezone

import pytest
from sqlalchemy import Column
from sqlalchemy import DateTime
from sqlalchemy import Integer
from sqlalchemy import MetaData
from sqlalchemy import Table
from sqlalchemy import Text

from stuff_tracker import build_sort_key
from stuff_tracker import ComparisonFilter
from stuff_tracker import Filter
from stuff_tracker import Json
from stuff_tracker import SortDirection
from stuff_tracker import SortKey
from stuff_tracker.sql import SQLBuilder
from stuff_tracker.sql.testing import assert_query_equal
from stuff_tracker.sql.testing import compile_query

item = Table(
    "item",
    MetaData(),
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)


ALL_FIELDS = "item.id, item.name, item.quantity, item.updated_at"
SORTABLE = {"name", "quantity"}


@pytest.fixture
def sql_builder() -> SQLBuilder:
    return SQLBuilder(item)


@pytest.mark.parametrize(
    "filters,sql",
    [
        ([], ""),
        ([Filter(field="name", values=[])], " WHERE false"),
        ([Filter(field="name", values=["foo"])], " WHERE item.name = 'foo'"),
        (
            [Filter(field="name", values=["foo", "bar"])],
            " WHERE item.name IN ('foo', 'bar')",
        ),
        ([Filter(field="nonexisting", values=["foo"])], " WHERE false"),
        (
            [Filter(field="id", values=[1]), Filter(field="name", values=["foo"])],
            " WHERE item.id = 1 AND item.name = 'foo'",
        ),
    ],
)
def test_select(sql_builder: SQLBuilder, filters: list[Filter], sql: str):
    query = sql_builder.select(filters)
    assert_query_equal(query, f"SELECT {ALL_FIELDS} FROM item{sql}")


@pytest.mark.parametrize(
    "operator,value,sql",
    [
        ("eq", 5, "item.quantity = 5"),
        ("ne", 5, "item.quantity != 5"),
        ("lt", 5, "item.quantity < 5"),
        ("le", 5, "item.quantity <= 5"),
        ("gt", 5, "item.quantity > 5"),
        ("ge", 5, "item.quantity >= 5"),
    ],
)
def test_select_comparison(sql_builder: SQLBuilder, operator, value, sql):
    query = sql_builder.select(
        [ComparisonFilter(field="quantity", values=[value], operator=operator)]
    )
    assert_query_equal(query, f"SELECT {ALL_FIELDS} FROM item WHERE {sql}")


@pytest.mark.parametrize("operator", ["contains", "starts_with"])
def test_select_textual_is_case_insensitive(sql_builder: SQLBuilder, operator):
    query = sql_builder.select(
        [ComparisonFilter(field="name", values=["Lamp"], operator=operator)]
    )
    actual = compile_query(query)
    assert "LIKE" in actual
    assert "item.name" in actual
    assert "lower" in actual.lower() or "ILIKE" in actual


def test_select_for_update(sql_builder: SQLBuilder):
    query = sql_builder.select([Filter.for_id(2)], for_update=True)
    assert_query_equal(
        query,
        f"SELECT {ALL_FIELDS} FROM item WHERE item.id = 2 FOR UPDATE",
    )


def test_seek_first_page(sql_builder: SQLBuilder):
    query = sql_builder.seek([], SortKey.default(), limit=11)
    assert_query_equal(
        query, f"SELECT {ALL_FIELDS} FROM item ORDER BY item.id ASC LIMIT 11"
    )


def test_seek_after_id(sql_builder: SQLBuilder):
    query = sql_builder.seek([], SortKey.default(), after=(3,), limit=11)
    assert_query_equal(
        query,
        f"SELECT {ALL_FIELDS} FROM item WHERE item.id > 3 "
        f"ORDER BY item.id ASC LIMIT 11",
    )


def test_seek_after_two_fields(sql_builder: SQLBuilder):
    key = build_sort_key([("name", SortDirection.ASC)], SORTABLE)
    query = sql_builder.seek([], key, after=("foo", 3), limit=11)
    assert_query_equal(
        query,
        f"SELECT {ALL_FIELDS} FROM item "
        f"WHERE item.name > 'foo' OR item.name = 'foo' AND item.id > 3 "
        f"ORDER BY item.name ASC, item.id ASC LIMIT 11",
    )


def test_seek_descending(sql_builder: SQLBuilder):
    key = build_sort_key([("quantity", SortDirection.DESC)], SORTABLE)
    query = sql_builder.seek([], key, after=(4, 10), limit=5)
    assert_query_equal(
        query,
        f"SELECT {ALL_FIELDS} FROM item "
        f"WHERE item.quantity < 4 OR item.quantity = 4 AND item.id > 10 "
        f"ORDER BY item.quantity DESC, item.id ASC LIMIT 5",
    )


def test_seek_reversed(sql_builder: SQLBuilder):
    key = build_sort_key([("quantity", SortDirection.DESC)], SORTABLE).reversed()
    query = sql_builder.seek([], key, after=(4, 10), limit=5)
    assert_query_equal(
        query,
        f"SELECT {ALL_FIELDS} FROM item "
        f"WHERE item.quantity > 4 OR item.quantity = 4 AND item.id < 10 "
        f"ORDER BY item.quantity ASC, item.id DESC LIMIT 5",
    )


def test_seek_three_fields(sql_builder: SQLBuilder):
    key = build_sort_key(
        [("quantity", SortDirection.DESC), ("name", SortDirection.ASC)], SORTABLE
    )
    query = sql_builder.seek([], key, after=(4, "foo", 10))
    assert_query_equal(
        query,
        f"SELECT {ALL_FIELDS} FROM item "
        f"WHERE item.quantity < 4 "
        f"OR item.quantity = 4 AND item.name > 'foo' "
        f"OR item.quantity = 4 AND item.name = 'foo' AND item.id > 10 "
        f"ORDER BY item.quantity DESC, item.name ASC, item.id ASC",
    )


def test_seek_with_filter(sql_builder: SQLBuilder):
    key = build_sort_key([("name", SortDirection.ASC)], SORTABLE)
    query = sql_builder.seek(
        [ComparisonFilter(field="quantity", values=[5], operator="ge")],
        key,
        after=("foo", 3),
        limit=2,
    )
    assert_query_equal(
        query,
        f"SELECT {ALL_FIELDS} FROM item "
        f"WHERE item.quantity >= 5 "
        f"AND (item.name > 'foo' OR item.name = 'foo' AND item.id > 3) "
        f"ORDER BY item.name ASC, item.id ASC LIMIT 2",
    )


def test_seek_unknown_column(sql_builder: SQLBuilder):
    key = build_sort_key([("color", SortDirection.ASC)], {"color"})
    with pytest.raises(ValueError):
        sql_builder.seek([], key)


@pytest.mark.parametrize(
    "filters,sql",
    [
        ([], ""),
        ([Filter(field="name", values=["foo"])], " WHERE item.name = 'foo'"),
        ([Filter(field="nonexisting", values=["foo"])], " WHERE false"),
    ],
)
def test_count(sql_builder: SQLBuilder, filters: list[Filter], sql: str):
    query = sql_builder.count(filters)
    assert_query_equal(query, f"SELECT count(*) AS count FROM item{sql}")


@pytest.mark.parametrize(
    "filters,sql",
    [
        ([], ""),
        ([Filter(field="name", values=["foo"])], " WHERE item.name = 'foo'"),
    ],
)
def test_exists(sql_builder: SQLBuilder, filters: list[Filter], sql: str):
    query = sql_builder.exists(filters)
    assert_query_equal(query, f"SELECT true AS exists FROM item{sql} LIMIT 1")


@pytest.mark.parametrize(
    "record,sql",
    [
        ({"name": "foo"}, "(name) VALUES ('foo')"),
        ({"id": None, "name": "foo"}, "(name) VALUES ('foo')"),
        ({"id": 2, "name": "foo"}, "(id, name) VALUES (2, 'foo')"),
        ({"name": "foo", "nonexisting": 2}, "(name) VALUES ('foo')"),
    ],
)
def test_insert(sql_builder: SQLBuilder, record: Json, sql: str):
    query = sql_builder.insert(record)
    assert_query_equal(query, f"INSERT INTO item {sql} RETURNING {ALL_FIELDS}")


@pytest.mark.parametrize(
    "record,if_unmodified_since,sql",
    [
        (
            {"id": 2, "name": "foo"},
            None,
            "SET id=2, name='foo' WHERE item.id = 2",
        ),
        (
            {"id": 2, "name": "foo"},
            datetime(2010, 1, 1, tzinfo=timezone.utc),
            (
                "SET id=2, name='foo' WHERE item.id = 2 "
                "AND item.updated_at = '2010-01-01 00:00:00+00:00'"
            ),
        ),
    ],
)
def test_update(sql_builder: SQLBuilder, record: Json, if_unmodified_since, sql):
    query = sql_builder.update(record["id"], record, if_unmodified_since)
    assert_query_equal(query, f"UPDATE item {sql} RETURNING {ALL_FIELDS}")


def test_delete(sql_builder: SQLBuilder):
    query = sql_builder.delete(2)
    assert_query_equal(query, "DELETE FROM item WHERE item.id = 2 RETURNING item.id")
