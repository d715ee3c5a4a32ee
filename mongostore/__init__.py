"""MongoDB-backed session persistence for async web-session frameworks."""

from mongostore.sessions import (
    InMemorySessionStore,
    MongoSessionStore,
    SessionStore,
    create_session_store,
)

__all__ = [
    "SessionStore",
    "MongoSessionStore",
    "InMemorySessionStore",
    "create_session_store",
]
