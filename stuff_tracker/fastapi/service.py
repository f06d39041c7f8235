# (c) Nelen & Schuurmans

from collections.abc import Callable
from contextlib import asynccontextmanager
from inspect import iscoroutinefunction
from typing import Any

from fastapi import FastAPI
from starlette.types import ASGIApp
from starlette.types import StatelessLifespan
from strawberry import Schema
from strawberry.fastapi import GraphQLRouter

from stuff_tracker import Gateway

from .fastapi_access_logger import FastAPIAccessLogger

__all__ = ["Service"]


async def health_check():
    """Simple health check route"""
    return {"health": "OK"}


async def _maybe_await(func: Callable[[], Any]) -> None:
    if iscoroutinefunction(func):
        await func()
    else:
        func()


def to_lifespan(
    on_startup: list[Callable[[], Any]],
    on_shutdown: list[Callable[[], Any]],
) -> StatelessLifespan[ASGIApp] | None:
    @asynccontextmanager
    async def lifespan(app: ASGIApp):
        for func in on_startup:
            await _maybe_await(func)
        yield
        for func in on_shutdown:
            await _maybe_await(func)

    return lifespan


class Service:
    """Serves a GraphQL schema at /graphql, next to a /health route."""

    def __init__(
        self,
        schema: Schema,
        context_getter: Callable[..., Any] | None = None,
        path: str = "/graphql",
    ):
        self.schema = schema
        self.context_getter = context_getter
        self.path = path

    def create_app(
        self,
        title: str,
        description: str,
        hostname: str,
        on_startup: list[Callable[[], Any]] | None = None,
        on_shutdown: list[Callable[[], Any]] | None = None,
        access_logger_gateway: Gateway | None = None,
    ) -> FastAPI:
        app = FastAPI(
            title=title,
            description=description,
            lifespan=to_lifespan(on_startup or [], on_shutdown or []),
        )
        if access_logger_gateway is not None:
            app.middleware("http")(
                FastAPIAccessLogger(hostname=hostname, gateway=access_logger_gateway)
            )
        app.get("/health", include_in_schema=False)(health_check)
        app.include_router(
            GraphQLRouter(self.schema, context_getter=self.context_getter),
            prefix=self.path,
        )
        return app
