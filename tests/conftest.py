"""Shared fixtures: a file-backed SQLite store per test and an API client."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from plm.infra.database import Database
from plm.main import create_app
from plm.repositories import EntityStore
from plm.services import (
    AttributeCatalog,
    AttributeCompatibilityEngine,
    GarmentLifecycleController,
    MaterialCatalog,
    SupplierWorkflowTracker,
)


def sqlite_url(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'plm.db'}"


@pytest_asyncio.fixture
async def db(tmp_path: Path) -> AsyncGenerator[Database, None]:
    """Fresh schema in a temporary database file."""
    database = Database(sqlite_url(tmp_path), audit=False)
    await database.create_all()
    yield database
    await database.dispose()


@pytest.fixture
def store(db: Database) -> EntityStore:
    return EntityStore(db)


@pytest.fixture
def garments(store: EntityStore) -> GarmentLifecycleController:
    return GarmentLifecycleController(store)


@pytest.fixture
def compatibility(store: EntityStore) -> AttributeCompatibilityEngine:
    return AttributeCompatibilityEngine(store)


@pytest.fixture
def materials(store: EntityStore) -> MaterialCatalog:
    return MaterialCatalog(store)


@pytest.fixture
def attributes(store: EntityStore) -> AttributeCatalog:
    return AttributeCatalog(store)


@pytest.fixture
def suppliers(store: EntityStore) -> SupplierWorkflowTracker:
    return SupplierWorkflowTracker(store, default_currency="USD")


@pytest_asyncio.fixture
async def client(db: Database) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to an app that uses the test database."""
    app = create_app()
    app.state.db = db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
