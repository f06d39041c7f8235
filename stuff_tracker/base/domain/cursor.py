# (c) Nelen & Schuurmans

"""Opaque pagination cursors.

A cursor holds the values of the effective sort key for one record. Because
the sort key always contains the id, two records never share a cursor.

Payload (before URL-safe base64 without padding)::

    [<sort key fingerprint>, [["s", "Garage"], ["i", 12]]]

Every value is tagged with its type so that it decodes to exactly the value
that was encoded.
"""

import base64
import binascii
import json
from collections.abc import Callable
from collections.abc import Mapping
from datetime import datetime
from typing import Any
from typing import Literal
from uuid import UUID

from pydantic import TypeAdapter
from pydantic import ValidationError

from .exceptions import InvalidCursor
from .sort import SortKey
from .types import Json

__all__ = ["CursorCodec"]


Tag = Literal["n", "b", "i", "f", "s", "d", "u"]

_payload = TypeAdapter(tuple[int, list[tuple[Tag, Any]]])


def _tagged(value: Any) -> tuple[str, Any]:
    if value is None:
        return "n", None
    if isinstance(value, bool):
        return "b", value
    if isinstance(value, int):
        return "i", value
    if isinstance(value, float):
        return "f", value
    if isinstance(value, str):
        return "s", value
    if isinstance(value, datetime):
        return "d", value.isoformat()
    if isinstance(value, UUID):
        return "u", str(value)
    raise TypeError(f"cannot put a value of type {type(value)} in a cursor")


def _expect(kind: type | tuple[type, ...]) -> Callable[[Any], Any]:
    def check(value: Any) -> Any:
        if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
            raise ValueError(f"expected {kind}, got {value!r}")
        return value

    return check


def _from_none(value: Any) -> None:
    if value is not None:
        raise ValueError(f"expected null, got {value!r}")
    return None


_UNTAG: dict[str, Callable[[Any], Any]] = {
    "n": _from_none,
    "b": _expect(bool),
    "i": _expect(int),
    "f": _expect((float, int)),
    "s": _expect(str),
    "d": lambda x: datetime.fromisoformat(_expect(str)(x)),
    "u": lambda x: UUID(_expect(str)(x)),
}


class CursorCodec:
    """Encode and decode cursors under an effective sort key.

    Cursors are not portable between sort keys. A fingerprint of the sort key
    is included so that a cursor minted under another ordering is rejected
    instead of being applied as a boundary it was never meant to be.

    With `field_types` (field name to type), every decoded value must strictly
    match the type of its field.
    """

    def __init__(self, field_types: Mapping[str, Any] | None = None):
        self.adapters = {
            name: TypeAdapter(annotation)
            for name, annotation in (field_types or {}).items()
        }

    @staticmethod
    def encode(sort_key: SortKey, record: Json) -> str:
        payload = [sort_key.fingerprint, [_tagged(x) for x in sort_key.values(record)]]
        raw = json.dumps(payload, separators=(",", ":"))
        return base64.urlsafe_b64encode(raw.encode()).rstrip(b"=").decode()

    def decode(self, cursor: str, sort_key: SortKey | None = None) -> tuple[Any, ...]:
        """Decode a cursor into the tuple of sort key values.

        Raises InvalidCursor on structurally invalid input, or when `sort_key`
        is given and the cursor was created under a different one, or holds a
        value that does not match the type of its field.
        """
        try:
            padded = cursor + "=" * (-len(cursor) % 4)
            raw = base64.urlsafe_b64decode(padded.encode("ascii"))
            fingerprint, tagged = _payload.validate_json(raw)
            values = tuple(_UNTAG[tag](value) for tag, value in tagged)
        except (
            binascii.Error,
            UnicodeError,
            ValidationError,
            ValueError,
            TypeError,
        ):
            raise InvalidCursor()
        if not values:
            raise InvalidCursor()
        if sort_key is not None:
            if fingerprint != sort_key.fingerprint or len(values) != len(
                sort_key.fields
            ):
                raise InvalidCursor("cursor does not match the requested order")
            self._check_types(sort_key, values)
        return values

    def _check_types(self, sort_key: SortKey, values: tuple[Any, ...]) -> None:
        for name, value in zip(sort_key.names, values):
            adapter = self.adapters.get(name)
            if adapter is None:
                continue
            try:
                adapter.validate_python(value, strict=True)
            except ValidationError:
                raise InvalidCursor(f"cursor holds an invalid value for '{name}'")
