"""Session store backends."""

from mongostore.sessions.stores.inmemory import InMemorySessionStore
from mongostore.sessions.stores.mongodb import MongoSessionStore

__all__ = [
    "InMemorySessionStore",
    "MongoSessionStore",
]
