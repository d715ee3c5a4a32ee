"""Test factories for session data."""

from datetime import UTC, datetime, timedelta
from typing import Any


class FrozenClock:
    """Controllable replacement for the store's UTC clock."""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime(2024, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        self.now = self.now + timedelta(**delta)

    def epoch_ms(self, **delta: float) -> int:
        """Milliseconds since the epoch, offset from the current time."""
        return int((self.now + timedelta(**delta)).timestamp() * 1000)


class SessionFactory:
    """Factory for session mappings shaped like a web framework's session."""

    @staticmethod
    def create(
        *,
        user: Any = 1,
        expires: Any = None,
        **extra: Any,
    ) -> dict[str, Any]:
        cookie: dict[str, Any] = {"path": "/", "httpOnly": True}
        if expires is not None:
            cookie["_expires"] = expires
        session: dict[str, Any] = {"user": user, "cookie": cookie}
        session.update(extra)
        return session
