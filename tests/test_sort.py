import pytest

from stuff_tracker import build_sort_key
from stuff_tracker import InvalidSort
from stuff_tracker import SortDirection
from stuff_tracker import SortField
from stuff_tracker import SortKey

ASC = SortDirection.ASC
DESC = SortDirection.DESC

SORTABLE = {"name", "quantity", "created_at"}


def test_build_empty():
    actual = build_sort_key([], SORTABLE)

    assert actual == SortKey.default()
    assert actual.names == ["id"]


def test_build_appends_id():
    actual = build_sort_key([("quantity", DESC), ("name", ASC)], SORTABLE)

    assert actual.fields == (
        SortField(field="quantity", direction=DESC),
        SortField(field="name", direction=ASC),
        SortField(field="id", direction=ASC),
    )


def test_build_keeps_explicit_id():
    actual = build_sort_key([("id", DESC), ("name", ASC)], SORTABLE)

    assert actual.names == ["id", "name"]
    assert actual.directions == [DESC, ASC]


@pytest.mark.parametrize(
    "direction,expected", [("asc", ASC), ("DESC", DESC), (ASC, ASC)]
)
def test_build_accepts_direction_strings(direction, expected):
    actual = build_sort_key([("name", direction)], SORTABLE)

    assert actual.fields[0].direction is expected


def test_build_unknown_field():
    with pytest.raises(InvalidSort) as e:
        build_sort_key([("color", ASC)], SORTABLE)

    assert e.value.field == "color"


def test_build_duplicate_field():
    with pytest.raises(InvalidSort):
        build_sort_key([("name", ASC), ("name", DESC)], SORTABLE)


def test_build_invalid_direction():
    with pytest.raises(InvalidSort):
        build_sort_key([("name", "sideways")], SORTABLE)


def test_reversed():
    key = build_sort_key([("quantity", DESC)], SORTABLE)

    assert key.reversed().fields == (
        SortField(field="quantity", direction=ASC),
        SortField(field="id", direction=DESC),
    )
    assert key.reversed().reversed() == key


def test_fingerprint_depends_on_direction():
    key = build_sort_key([("quantity", DESC)], SORTABLE)

    assert key.fingerprint != key.reversed().fingerprint
    same = build_sort_key([("quantity", DESC)], SORTABLE)
    assert key.fingerprint == same.fingerprint


@pytest.fixture
def records():
    return [
        {"id": 1, "name": "b", "quantity": 3},
        {"id": 2, "name": "a", "quantity": 3},
        {"id": 3, "name": "c", "quantity": None},
        {"id": 4, "name": "a", "quantity": 1},
    ]


def test_sort_tiebreak_on_id(records):
    key = build_sort_key([("quantity", DESC)], SORTABLE)

    # None sorts first when descending
    assert [x["id"] for x in key.sort(records)] == [3, 1, 2, 4]


def test_sort_multi_field(records):
    key = build_sort_key([("name", ASC), ("quantity", ASC)], SORTABLE)

    assert [x["id"] for x in key.sort(records)] == [4, 2, 1, 3]


def test_sort_none_last_ascending(records):
    key = build_sort_key([("quantity", ASC)], SORTABLE)

    assert [x["id"] for x in key.sort(records)] == [4, 1, 2, 3]


def test_compare_total_order(records):
    key = build_sort_key([("name", ASC)], SORTABLE)

    for a in records:
        for b in records:
            assert (key.compare(a, b) == 0) == (a is b)
            assert key.compare(a, b) == -key.compare(b, a)


def test_seek_after(records):
    key = build_sort_key([("name", ASC)], SORTABLE)

    actual = key.seek(records, after=("a", 4), limit=2)

    assert [x["id"] for x in actual] == [1, 3]


def test_seek_reversed_is_before(records):
    key = build_sort_key([("name", ASC)], SORTABLE)

    actual = key.reversed().seek(records, after=("b", 1))

    assert [x["id"] for x in actual] == [4, 2]
