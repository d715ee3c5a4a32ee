"""In-memory implementation of SessionStore."""

from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from mongostore.observability.metrics import track_operation
from mongostore.sessions.codec import JsonSessionCodec, SessionCodec
from mongostore.sessions.expiry import is_expired, session_expiry, utcnow
from mongostore.sessions.store import SessionStore


class InMemorySessionStore(SessionStore):
    """In-memory implementation of SessionStore for testing and development.

    Payloads go through the same codec as the MongoDB store, so callers
    never share mutable state with the store. Not suitable for production use.
    """

    def __init__(
        self,
        codec: SessionCodec | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._codec = codec or JsonSessionCodec()
        self._clock = clock
        self._records: dict[str, tuple[Any, datetime | None]] = {}

    async def get(self, sid: str) -> dict[str, Any] | None:
        with track_operation("get"):
            record = self._records.get(sid)
            if record is None:
                return None

            payload, expires = record
            if is_expired(expires, self._clock()):
                self._records.pop(sid, None)
                return None
            return self._codec.decode(payload)

    async def set(self, sid: str, session: Mapping[str, Any]) -> None:
        with track_operation("set"):
            payload = self._codec.encode(session)
            self._records[sid] = (payload, session_expiry(session))

    async def destroy(self, sid: str) -> None:
        with track_operation("destroy"):
            self._records.pop(sid, None)

    async def length(self) -> int:
        with track_operation("length"):
            return len(self._records)

    async def clear(self) -> None:
        with track_operation("clear"):
            self._records.clear()
