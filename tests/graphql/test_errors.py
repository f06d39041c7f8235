import pytest
from graphql import GraphQLError

from stuff_tracker import BadRequest
from stuff_tracker import Conflict
from stuff_tracker import DoesNotExist
from stuff_tracker import InvalidCursor
from stuff_tracker import InvalidSort
from stuff_tracker.graphql import graphql_errors


@pytest.mark.parametrize(
    "error,code,message",
    [
        (DoesNotExist("Item", 3), "NOT_FOUND", "Item with ID 3 not found."),
        (Conflict("busy"), "CONFLICT", "busy"),
        (BadRequest("bad"), "BAD_REQUEST", "bad"),
        (InvalidCursor(), "INVALID_CURSOR", "malformed cursor"),
        (InvalidSort("color"), "INVALID_SORT", "cannot sort on 'color'"),
    ],
)
def test_graphql_errors(error, code, message):
    with pytest.raises(GraphQLError) as e:
        with graphql_errors():
            raise error

    assert e.value.message == message
    assert e.value.extensions == {"code": code}
    assert e.value.original_error is error


def test_graphql_errors_other_exceptions_propagate():
    with pytest.raises(KeyError):
        with graphql_errors():
            raise KeyError("foo")


def test_graphql_errors_no_exception():
    with graphql_errors():
        pass
