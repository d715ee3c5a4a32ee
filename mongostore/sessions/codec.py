"""Session codecs.

A codec turns a session mapping into the value kept in the ``session``
field of a record, and back. JSON text is the default; the identity
codec stores the mapping as a native document.
"""

import json
from abc import ABC, abstractmethod
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from mongostore.config.models.storage import ConnectionConfig
from mongostore.db.errors import CodecError


def _json_serializer(obj: Any) -> str:
    """JSON serializer for session values not serializable by default."""
    if isinstance(obj, datetime | date):
        return obj.isoformat()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


class SessionCodec(ABC):
    """Encode/decode pair applied to session payloads."""

    name: str = "abstract"

    @abstractmethod
    def encode(self, session: Mapping[str, Any]) -> Any:
        """Encode a session for storage."""
        pass

    @abstractmethod
    def decode(self, payload: Any) -> dict[str, Any]:
        """Decode a stored payload back into a session."""
        pass


class JsonSessionCodec(SessionCodec):
    """Stores sessions as JSON text."""

    name = "json"

    def encode(self, session: Mapping[str, Any]) -> str:
        try:
            return json.dumps(
                session,
                ensure_ascii=False,
                separators=(",", ":"),
                default=_json_serializer,
            )
        except (TypeError, ValueError) as e:
            raise CodecError(f"Session is not JSON serializable: {e}", cause=e) from e

    def decode(self, payload: Any) -> dict[str, Any]:
        if not isinstance(payload, str | bytes | bytearray):
            raise CodecError(
                f"Expected JSON text payload, got {type(payload).__name__}"
            )
        try:
            session = json.loads(payload)
        except ValueError as e:
            raise CodecError(f"Stored session is not valid JSON: {e}", cause=e) from e
        if not isinstance(session, dict):
            raise CodecError(
                f"Stored session must decode to an object, got {type(session).__name__}"
            )
        return session


class IdentitySessionCodec(SessionCodec):
    """Stores sessions as native documents."""

    name = "identity"

    def encode(self, session: Mapping[str, Any]) -> dict[str, Any]:
        if not isinstance(session, Mapping):
            raise CodecError(
                f"Session must be a mapping, got {type(session).__name__}"
            )
        return dict(session)

    def decode(self, payload: Any) -> dict[str, Any]:
        if not isinstance(payload, Mapping):
            raise CodecError(
                f"Expected document payload, got {type(payload).__name__}"
            )
        return dict(payload)


def codec_for(config: ConnectionConfig) -> SessionCodec:
    """Pick the codec matching the ``stringify`` option."""
    if config.stringify:
        return JsonSessionCodec()
    return IdentitySessionCodec()
