import base64
import json
from datetime import datetime
from datetime import timezone
from uuid import UUID

import pytest

from stuff_tracker import build_sort_key
from stuff_tracker import CursorCodec
from stuff_tracker import InvalidCursor
from stuff_tracker import SortDirection

SORT_KEY = build_sort_key(
    [("name", SortDirection.ASC), ("created_at", SortDirection.DESC)],
    {"name", "created_at"},
)


@pytest.fixture
def codec():
    return CursorCodec()


@pytest.fixture
def record():
    return {
        "id": 12,
        "name": "Garage",
        "created_at": datetime(2024, 1, 1, 12, 30, tzinfo=timezone.utc),
        "quantity": 3,
    }


def test_decode_gives_sort_key_values(codec, record):
    cursor = codec.encode(SORT_KEY, record)

    assert codec.decode(cursor, SORT_KEY) == (
        "Garage",
        datetime(2024, 1, 1, 12, 30, tzinfo=timezone.utc),
        12,
    )


def test_encode_is_deterministic(codec, record):
    assert codec.encode(SORT_KEY, record) == codec.encode(SORT_KEY, dict(record))


def test_encode_is_url_safe_without_padding(codec, record):
    cursor = codec.encode(SORT_KEY, record)

    assert "=" not in cursor
    assert "+" not in cursor
    assert "/" not in cursor


def test_distinct_records_distinct_cursors(codec, record):
    other = {**record, "id": 13}

    assert codec.encode(SORT_KEY, record) != codec.encode(SORT_KEY, other)


@pytest.mark.parametrize(
    "value", [None, True, 0, 1.5, "", "ünïcode", UUID(int=5), "1"]
)
def test_values_keep_their_type(codec, value):
    key = build_sort_key([("x", SortDirection.ASC)], {"x"})

    (actual, _) = codec.decode(codec.encode(key, {"id": 1, "x": value}), key)

    assert actual == value
    assert type(actual) is type(value)


@pytest.mark.parametrize(
    "cursor",
    [
        "",
        "not a cursor",
        "!!!!",
        "ëëë",
        base64.urlsafe_b64encode(b"{}").decode(),
        base64.urlsafe_b64encode(b"[1, 2]").decode(),
        base64.urlsafe_b64encode(b'[1, [["x", 1]]]').decode(),
        base64.urlsafe_b64encode(b'[1, [["i", "foo"]]]').decode(),
        base64.urlsafe_b64encode(b'[1, [["d", "yesterday"]]]').decode(),
        base64.urlsafe_b64encode(b"[1, []]").decode(),
    ],
)
def test_decode_malformed(codec, cursor):
    with pytest.raises(InvalidCursor):
        codec.decode(cursor)


def test_decode_other_sort_key(codec, record):
    cursor = codec.encode(SORT_KEY, record)

    with pytest.raises(InvalidCursor):
        codec.decode(cursor, SORT_KEY.reversed())


def test_decode_wrong_arity(codec):
    payload = json.dumps([SORT_KEY.fingerprint, [["s", "Garage"], ["i", 12]]])
    cursor = base64.urlsafe_b64encode(payload.encode()).decode()

    with pytest.raises(InvalidCursor):
        codec.decode(cursor, SORT_KEY)


def test_decode_without_sort_key(codec, record):
    cursor = codec.encode(SORT_KEY, record)

    assert len(codec.decode(cursor)) == 3


FIELD_TYPES = {"id": int | None, "name": str, "created_at": datetime}


def test_decode_checks_field_types(record):
    codec = CursorCodec(FIELD_TYPES)
    cursor = codec.encode(SORT_KEY, record)

    assert codec.decode(cursor, SORT_KEY) == (
        "Garage",
        datetime(2024, 1, 1, 12, 30, tzinfo=timezone.utc),
        12,
    )


@pytest.mark.parametrize(
    "tagged",
    [
        [["i", 5], ["d", "2024-01-01T00:00:00+00:00"], ["i", 1]],
        [["s", "Garage"], ["s", "yesterday"], ["i", 1]],
        [["s", "Garage"], ["d", "2024-01-01T00:00:00+00:00"], ["b", True]],
    ],
)
def test_decode_wrong_field_type(tagged):
    payload = json.dumps([SORT_KEY.fingerprint, tagged])
    cursor = base64.urlsafe_b64encode(payload.encode()).decode()

    with pytest.raises(InvalidCursor):
        CursorCodec(FIELD_TYPES).decode(cursor, SORT_KEY)
