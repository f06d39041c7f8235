# (c) Nelen & Schuurmans

import os

import inject
import pytest
import pytest_asyncio
from sqlalchemy import text

from stuff_tracker.inventory.sql_model import metadata
from stuff_tracker.sql import SQLAlchemyAsyncSQLDatabase
from stuff_tracker.sql import SQLDatabase


@pytest.fixture(scope="session")
def postgres_url():
    return os.environ.get("POSTGRES_URL", "postgres:postgres@localhost:5432")


@pytest_asyncio.fixture(scope="session", loop_scope="session")
async def postgres_db_url(postgres_url) -> str:
    dbname = "stuff_tracker_test"
    root = SQLAlchemyAsyncSQLDatabase(postgres_url)
    try:
        await root.execute_autocommit(text(f"DROP DATABASE IF EXISTS {dbname}"))
        await root.execute_autocommit(text(f"CREATE DATABASE {dbname}"))
    finally:
        await root.dispose()

    database = SQLAlchemyAsyncSQLDatabase(f"{postgres_url}/{dbname}")
    try:
        await database.create_tables(metadata)
    finally:
        await database.dispose()
    return f"{postgres_url}/{dbname}"


@pytest_asyncio.fixture(scope="session", loop_scope="session")
async def database(postgres_db_url):
    # pool_size=2 for the Conflict test
    db = SQLAlchemyAsyncSQLDatabase(postgres_db_url, pool_size=2)
    inject.clear_and_configure(lambda binder: binder.bind(SQLDatabase, db))
    yield db
    inject.clear()
    await db.dispose()


@pytest_asyncio.fixture(loop_scope="session")
async def database_with_cleanup(database: SQLDatabase):
    await database.truncate_tables(list(metadata.tables))
    yield database
    await database.truncate_tables(list(metadata.tables))
