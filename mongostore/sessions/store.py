"""SessionStore abstract interface."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any


class SessionStore(ABC):
    """Abstract interface a web-session framework uses to persist sessions.

    Sessions are plain mappings keyed by the framework's session id.
    A session whose ``cookie._expires`` has passed is never returned.
    """

    @abstractmethod
    async def get(self, sid: str) -> dict[str, Any] | None:
        """Get a session by id, or None when absent or expired."""
        pass

    @abstractmethod
    async def set(self, sid: str, session: Mapping[str, Any]) -> None:
        """Insert or replace the session stored under ``sid``."""
        pass

    @abstractmethod
    async def destroy(self, sid: str) -> None:
        """Delete a session. Deleting a missing session succeeds."""
        pass

    @abstractmethod
    async def length(self) -> int:
        """Count stored sessions."""
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Delete every stored session."""
        pass

    async def close(self) -> None:
        """Release backend resources."""
        return None
