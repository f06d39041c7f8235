# (c) Nelen & Schuurmans

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from graphql import GraphQLError

from stuff_tracker import BadRequest
from stuff_tracker import Conflict
from stuff_tracker import DoesNotExist

__all__ = ["graphql_errors"]


logger = logging.getLogger(__name__)


def to_graphql_error(error: Exception, code: str) -> GraphQLError:
    logger.info("%s: %s", code, error)
    return GraphQLError(str(error), original_error=error, extensions={"code": code})


@contextmanager
def graphql_errors() -> Iterator[None]:
    """Translate domain exceptions into field-level GraphQL errors.

    The error code ends up in `extensions.code`. Other exceptions propagate
    unchanged.
    """
    try:
        yield
    except DoesNotExist as e:
        raise to_graphql_error(e, "NOT_FOUND")
    except Conflict as e:
        raise to_graphql_error(e, "CONFLICT")
    except BadRequest as e:
        raise to_graphql_error(e, getattr(e, "code", "BAD_REQUEST"))
