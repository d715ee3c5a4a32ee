"""Session persistence: the store contract, codecs and backends."""

from mongostore.sessions.codec import (
    IdentitySessionCodec,
    JsonSessionCodec,
    SessionCodec,
    codec_for,
)
from mongostore.sessions.factory import create_session_store
from mongostore.sessions.store import SessionStore
from mongostore.sessions.stores import InMemorySessionStore, MongoSessionStore

__all__ = [
    "SessionStore",
    "SessionCodec",
    "JsonSessionCodec",
    "IdentitySessionCodec",
    "codec_for",
    "InMemorySessionStore",
    "MongoSessionStore",
    "create_session_store",
]
