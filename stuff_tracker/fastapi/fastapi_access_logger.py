# (c) Nelen & Schuurmans

import os
import time
from collections.abc import Awaitable
from collections.abc import Callable

from starlette.background import BackgroundTasks
from starlette.requests import Request
from starlette.responses import Response

from stuff_tracker import Gateway

from .asgi import ensure_correlation_id
from .asgi import get_correlation_id
from .asgi import get_graphql_operation
from .asgi import is_health_check

__all__ = ["FastAPIAccessLogger"]


class FastAPIAccessLogger:
    """HTTP middleware that hands an access record to a gateway per request.

    The record names the GraphQL operation (type and name) that the request
    ran. It is written in a background task, after the response was sent.
    """

    def __init__(self, hostname: str, gateway: Gateway):
        self.origin = f"{hostname}-{os.getpid()}"
        self.gateway = gateway

    async def __call__(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if request.scope["type"] != "http" or is_health_check(request):
            return await call_next(request)

        ensure_correlation_id(request)
        # the body can only be read before the request is handed on
        operation = await get_graphql_operation(request)

        time_received = time.time()
        response = await call_next(request)
        request_time = time.time() - time_received

        if response.background is None:
            response.background = BackgroundTasks()
        response.background.add_task(
            log_access,
            self.gateway,
            request,
            response,
            operation,
            time_received,
            request_time,
        )
        return response


async def log_access(
    gateway: Gateway,
    request: Request,
    response: Response,
    operation: tuple[str | None, str | None],
    time_received: float,
    request_time: float,
) -> None:
    try:
        content_length = int(response.headers.get("content-length"))
    except (TypeError, ValueError):
        content_length = None

    operation_type, operation_name = operation
    item = {
        "tag_suffix": "access_log",
        "remote_address": getattr(request.client, "host", None),
        "method": request.method,
        "path": request.url.path,
        "operation_type": operation_type,
        "operation_name": operation_name,
        "user_agent": request.headers.get("user-agent"),
        "status": response.status_code,
        "content_type": response.headers.get("content-type"),
        "content_length": content_length,
        "time": time_received,
        "request_time": request_time,
        "correlation_id": str(get_correlation_id(request)),
    }
    await gateway.add(item)
