"""Tests for cookie expiry extraction."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from mongostore.db.errors import CodecError
from mongostore.sessions.expiry import is_expired, session_expiry

EXPIRY = datetime(2030, 5, 17, 8, 30, tzinfo=UTC)


class TestSessionExpiry:
    """Tests for session_expiry."""

    def test_no_cookie(self) -> None:
        assert session_expiry({"user": 1}) is None

    def test_cookie_without_expiry(self) -> None:
        assert session_expiry({"cookie": {"path": "/"}}) is None

    def test_epoch_milliseconds(self) -> None:
        ms = int(EXPIRY.timestamp() * 1000)
        assert session_expiry({"cookie": {"_expires": ms}}) == EXPIRY

    def test_iso_string(self) -> None:
        assert session_expiry({"cookie": {"_expires": "2030-05-17T08:30:00Z"}}) == EXPIRY

    def test_aware_datetime_converted_to_utc(self) -> None:
        local = EXPIRY.astimezone(timezone(timedelta(hours=2)))
        result = session_expiry({"cookie": {"_expires": local}})

        assert result == EXPIRY
        assert result.tzinfo == UTC

    def test_naive_datetime_is_utc(self) -> None:
        naive = EXPIRY.replace(tzinfo=None)
        assert session_expiry({"cookie": {"_expires": naive}}) == EXPIRY

    def test_garbage_string_raises(self) -> None:
        with pytest.raises(CodecError, match="ISO-8601"):
            session_expiry({"cookie": {"_expires": "next tuesday"}})

    def test_boolean_raises(self) -> None:
        with pytest.raises(CodecError, match="Unsupported"):
            session_expiry({"cookie": {"_expires": True}})


class TestIsExpired:
    """Tests for is_expired."""

    def test_no_expiry_never_expires(self) -> None:
        assert is_expired(None, EXPIRY) is False

    def test_future_expiry(self) -> None:
        assert is_expired(EXPIRY, EXPIRY - timedelta(seconds=1)) is False

    def test_expiry_equal_to_now_is_expired(self) -> None:
        assert is_expired(EXPIRY, EXPIRY) is True

    def test_naive_stored_expiry(self) -> None:
        naive = EXPIRY.replace(tzinfo=None)
        assert is_expired(naive, EXPIRY + timedelta(seconds=1)) is True

    @pytest.mark.parametrize("stored", ["2020-01-01T00:00:00Z", 1577836800000, True])
    def test_non_datetime_stored_expiry_raises(self, stored) -> None:
        """Records written by another client may carry any BSON type."""
        with pytest.raises(CodecError, match="expires"):
            is_expired(stored, EXPIRY)
