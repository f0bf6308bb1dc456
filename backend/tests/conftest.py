"""
Quill Backend — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Provides reusable infrastructure: isolated stores, a configured app
       with its lifespan running, and an HTTPX client bound to it.

Fixture Hierarchy (all function-scoped):
    ├── sqlite_url:      Fresh SQLite file in tmp_path
    ├── memory_store:    InMemoryPostStore
    ├── sql_store:       SQLAlchemyPostStore on sqlite_url, tables created
    ├── store:           Parametrized over both engines (contract tests)
    ├── test_settings:   Settings pointing at sqlite_url
    ├── app:             create_app(test_settings) with lifespan entered
    └── test_client:     HTTPX AsyncClient over ASGITransport
"""

import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Set before any app import so the module-level settings/app never point
# at a real database
os.environ.setdefault("DATABASE_URL", "memory://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from app.config import Settings  # noqa: E402
from app.database import Database, engine_options  # noqa: E402
from app.main import create_app  # noqa: E402
from app.services.memory_post_store import InMemoryPostStore  # noqa: E402
from app.services.sql_post_store import SQLAlchemyPostStore  # noqa: E402


@pytest.fixture
def sqlite_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'quill_test.db'}"


@pytest_asyncio.fixture
async def memory_store() -> AsyncGenerator[InMemoryPostStore, None]:
    store = InMemoryPostStore()
    await store.initialize()
    yield store
    await store.close()


@pytest_asyncio.fixture
async def sql_store(sqlite_url) -> AsyncGenerator[SQLAlchemyPostStore, None]:
    database = Database(sqlite_url, **engine_options(sqlite_url))
    store = SQLAlchemyPostStore(database, create_tables=True)
    await store.initialize()
    yield store
    await store.close()


@pytest_asyncio.fixture(params=["memory", "sqlalchemy"])
async def store(request, sqlite_url):
    """Each contract test runs once per engine."""
    if request.param == "memory":
        instance = InMemoryPostStore()
    else:
        database = Database(sqlite_url, **engine_options(sqlite_url))
        instance = SQLAlchemyPostStore(database, create_tables=True)
    await instance.initialize()
    yield instance
    await instance.close()


@pytest.fixture
def test_settings(sqlite_url) -> Settings:
    return Settings(
        database_url=sqlite_url,
        db_create_tables=True,
        log_level="WARNING",
        rate_limit_requests=10000,
        cors_origins="http://localhost:3000",
    )


@pytest_asyncio.fixture
async def app(test_settings):
    """
    A fresh app with its lifespan running.

    ASGITransport does not send lifespan events, so the startup/shutdown
    context is entered here explicitly.
    """
    application = create_app(test_settings)
    async with application.router.lifespan_context(application):
        yield application


@pytest_asyncio.fixture
async def test_client(app) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX AsyncClient routed straight into the app.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def sample_post_data():
    return {
        "title": "Hello, world",
        "content": "The first post on this blog.",
        "author": "Ada",
    }
