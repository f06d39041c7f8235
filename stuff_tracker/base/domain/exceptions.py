# (c) Nelen & Schuurmans

from typing import Any

from pydantic import ValidationError
from pydantic_core import ErrorDetails

from .types import Id

__all__ = [
    "AlreadyExists",
    "Conflict",
    "DoesNotExist",
    "BadRequest",
    "PaginationError",
    "InvalidSort",
    "InvalidCursor",
    "ConflictingPaginationArguments",
    "PageSizeOutOfRange",
]


class DoesNotExist(Exception):
    def __init__(self, name: str, id: Id | None = None):
        super().__init__()
        self.name = name
        self.id = id

    def __str__(self):
        if self.id is not None:
            return f"{self.name} with ID {self.id} not found."
        else:
            return f"{self.name} not found."


class Conflict(Exception):
    def __init__(self, msg: str | None = None):
        super().__init__(msg)


class AlreadyExists(Exception):
    def __init__(self, value: Any = None, key: str = "id"):
        super().__init__(f"record with {key}={value} already exists")


class BadRequest(Exception):
    def __init__(self, err_or_msg: ValidationError | str):
        self._internal_error = err_or_msg
        super().__init__(err_or_msg)

    def errors(self) -> list[ErrorDetails]:
        if isinstance(self._internal_error, ValidationError):
            return self._internal_error.errors()
        return [
            ErrorDetails(
                type="value_error",
                msg=self._internal_error,
                loc=[],  # type: ignore
                input=None,
            )
        ]

    def __str__(self) -> str:
        error = self._internal_error
        if isinstance(error, ValidationError):
            details = error.errors()[0]
            loc = "'" + ",".join([str(x) for x in details["loc"]]) + "' "
            if loc == "'*' ":
                loc = ""
            return f"validation error: {loc}{details['msg']}"
        return super().__str__()


class PaginationError(BadRequest):
    """Base class for errors in the arguments of a paginated query.

    These are deterministic: retrying with the same input gives the same error.
    """

    code: str = "BAD_REQUEST"

    def __init__(self, msg: str):
        super().__init__(msg)


class InvalidSort(PaginationError):
    code = "INVALID_SORT"

    def __init__(self, field: str, msg: str | None = None):
        super().__init__(msg or f"cannot sort on '{field}'")
        self.field = field


class InvalidCursor(PaginationError):
    code = "INVALID_CURSOR"

    def __init__(self, msg: str = "malformed cursor"):
        super().__init__(msg)


class ConflictingPaginationArguments(PaginationError):
    code = "CONFLICTING_PAGINATION_ARGUMENTS"


class PageSizeOutOfRange(PaginationError):
    code = "PAGE_SIZE_OUT_OF_RANGE"

    def __init__(self, name: str, value: int):
        super().__init__(f"'{name}' must be a positive integer, got {value}")
        self.value = value
