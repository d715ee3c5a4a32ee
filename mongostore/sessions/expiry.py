"""Expiry handling for session records."""

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from mongostore.db.errors import CodecError


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def session_expiry(session: Mapping[str, Any]) -> datetime | None:
    """Read the expiry timestamp carried by a session's cookie.

    ``cookie._expires`` may be a datetime, an ISO-8601 string or a number
    of milliseconds since the epoch. Sessions without one never expire.

    Raises:
        CodecError: If ``_expires`` is present but not a usable timestamp
    """
    cookie = session.get("cookie") if isinstance(session, Mapping) else None
    if not isinstance(cookie, Mapping):
        return None

    raw = cookie.get("_expires")
    if raw is None:
        return None

    if isinstance(raw, datetime):
        return as_utc(raw)

    if isinstance(raw, int | float) and not isinstance(raw, bool):
        try:
            return datetime.fromtimestamp(raw / 1000, tz=UTC)
        except (OverflowError, OSError, ValueError) as e:
            raise CodecError(f"Cookie expiry out of range: {raw!r}", cause=e) from e

    if isinstance(raw, str):
        try:
            return as_utc(datetime.fromisoformat(raw))
        except ValueError as e:
            raise CodecError(f"Cookie expiry is not an ISO-8601 timestamp: {raw!r}", cause=e) from e

    raise CodecError(f"Unsupported cookie expiry type: {type(raw).__name__}")


def is_expired(expires: Any, now: datetime) -> bool:
    """True when ``expires`` is set and at or before ``now``.

    Raises:
        CodecError: If a stored ``expires`` is not a datetime
    """
    if expires is None:
        return False
    if not isinstance(expires, datetime):
        raise CodecError(
            f"Stored expires must be a datetime, got {type(expires).__name__}"
        )
    return as_utc(expires) <= as_utc(now)
