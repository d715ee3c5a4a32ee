"""Pytest fixtures for store integration tests.

Tests run against the MongoDB server named by TEST_MONGODB_URL and skip
gracefully when it is unavailable.
"""

import os
from collections.abc import AsyncIterator
from functools import partial
from uuid import uuid4

import pytest
import pytest_asyncio
from motor.motor_asyncio import AsyncIOMotorClient

from mongostore.db.errors import ConnectionError
from mongostore.sessions.stores.mongodb import MongoSessionStore


@pytest.fixture(scope="session")
def mongodb_url() -> str:
    """Get MongoDB connection string for tests."""
    return os.environ.get("TEST_MONGODB_URL", "mongodb://localhost:27017/mongostore_test")


@pytest.fixture
def collection_name() -> str:
    """Unique collection per test for isolation."""
    return f"sessions_{uuid4().hex[:12]}"


@pytest_asyncio.fixture(scope="function")
async def mongo_store(mongodb_url: str, collection_name: str) -> AsyncIterator[MongoSessionStore]:
    """Create a connected MongoSessionStore.

    Skips tests if MongoDB is not available.
    Uses function scope to avoid event loop issues across tests.
    """
    store = MongoSessionStore(
        {"url": mongodb_url, "collection": collection_name},
        client_factory=partial(AsyncIOMotorClient, serverSelectionTimeoutMS=1000),
    )
    try:
        await store.connect()
    except ConnectionError:
        pytest.skip("MongoDB not available (set TEST_MONGODB_URL)")

    yield store

    await store.clear()
    await store.close()
