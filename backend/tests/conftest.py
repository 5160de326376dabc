"""Shared fixtures: temporary SQLite stores, an unreachable store, app context and HTTP client."""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.context import build_context
from app.main import create_app


def make_settings(database_url: str) -> Settings:
    return Settings(DATABASE_URL=database_url, ENVIRONMENT="test", DEBUG=False)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'comics.db'}"


@pytest.fixture
def unreachable_database_url(tmp_path):
    # the parent "directory" is a regular file, so SQLite can never open the database
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("")
    return f"sqlite+aiosqlite:///{blocker / 'comics.db'}"


@pytest.fixture
async def ctx(database_url):
    context = build_context(make_settings(database_url))
    await context.schema.ensure_schema()
    yield context
    await context.database.dispose()


@pytest.fixture
async def down_ctx(unreachable_database_url):
    context = build_context(make_settings(unreachable_database_url))
    yield context
    await context.database.dispose()


@pytest.fixture
async def db(ctx):
    async with ctx.database.session() as session:
        yield session


@pytest.fixture
def settings(database_url):
    return make_settings(database_url)


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def down_client(unreachable_database_url):
    app = create_app(make_settings(unreachable_database_url))
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
