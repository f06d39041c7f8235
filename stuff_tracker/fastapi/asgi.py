# (c) Nelen & Schuurmans

import json
from typing import Any
from uuid import UUID
from uuid import uuid4

from graphql import get_operation_ast
from graphql import GraphQLError
from graphql import parse
from starlette.requests import Request

__all__ = [
    "ensure_correlation_id",
    "get_correlation_id",
    "get_graphql_operation",
    "get_view_name",
    "is_health_check",
]

CORRELATION_ID_HEADER = b"x-correlation-id"


def get_view_name(request: Request) -> str | None:
    route = request.scope.get("route")
    return None if route is None else getattr(route, "name", None)


def is_health_check(request: Request) -> bool:
    return get_view_name(request) == "health_check" or request.url.path == "/health"


def get_header(request: Request, header_name: bytes) -> str | None:
    headers = dict(request.scope["headers"])
    try:
        return headers[header_name].decode()
    except (KeyError, ValueError, UnicodeDecodeError):
        return None


def get_correlation_id(request: Request) -> UUID | None:
    header = get_header(request, CORRELATION_ID_HEADER)
    if header is None:
        return None
    try:
        return UUID(header)
    except ValueError:
        return None


def ensure_correlation_id(request: Request) -> None:
    if get_correlation_id(request) is not None:
        return
    # generate an id and update the request inplace
    headers = dict(request.scope["headers"])
    headers[CORRELATION_ID_HEADER] = str(uuid4()).encode()
    request.scope["headers"] = list(headers.items())


async def _graphql_params(request: Request) -> tuple[Any, Any]:
    if request.method == "GET":
        params = request.query_params
        return params.get("query"), params.get("operationName")
    content_type = get_header(request, b"content-type") or ""
    if request.method != "POST" or not content_type.startswith("application/json"):
        return None, None
    try:
        payload = json.loads(await request.body())
    except ValueError:
        return None, None
    if not isinstance(payload, dict):
        return None, None
    return payload.get("query"), payload.get("operationName")


async def get_graphql_operation(request: Request) -> tuple[str | None, str | None]:
    """Return the type and the name of the GraphQL operation that a request runs.

    The query is taken from the JSON body of a POST or from the query string
    of a GET. The type ("query", "mutation" or "subscription") is None if the
    request has no parseable GraphQL document; the name is None for an
    anonymous operation.
    """
    query, operation_name = await _graphql_params(request)
    if not isinstance(query, str):
        return None, None
    if not isinstance(operation_name, str):
        operation_name = None
    try:
        operation = get_operation_ast(parse(query), operation_name)
    except GraphQLError:
        return None, None
    if operation is None:
        return None, None
    name = None if operation.name is None else operation.name.value
    return operation.operation.value, name
