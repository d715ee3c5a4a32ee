"""Test factories for creating test data."""

from tests.factories.mongo import FakeClientFactory, FakeCollection
from tests.factories.sessions import FrozenClock, SessionFactory

__all__ = [
    "FakeClientFactory",
    "FakeCollection",
    "FrozenClock",
    "SessionFactory",
]
