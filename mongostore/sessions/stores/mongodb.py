"""MongoDB implementation of SessionStore.

One document per session:

    {"_id": <sid>, "session": <encoded session>, "expires": <datetime>}

``expires`` is only written when the session cookie carries ``_expires``.
Expired documents are removed lazily on read and, when ``clear_interval``
is positive, by the background sweeper.
"""

from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from pymongo.errors import PyMongoError

from mongostore.config.models.storage import ConnectionConfig
from mongostore.config.resolver import ConnectionSpec, resolve_connection_config
from mongostore.db.connection import ClientFactory, CollectionManager, ConnectionState
from mongostore.db.errors import CodecError, StoreOperationError
from mongostore.observability.logging import get_logger
from mongostore.observability.metrics import track_operation
from mongostore.sessions.codec import SessionCodec, codec_for
from mongostore.sessions.expiry import is_expired, session_expiry, utcnow
from mongostore.sessions.store import SessionStore

logger = get_logger(__name__)


class MongoSessionStore(SessionStore):
    """MongoDB-backed session store.

    The connection is opened lazily by the first operation, or eagerly with
    ``connect()``. Concurrent first operations share one connection attempt.

    Usage:
        async with MongoSessionStore("mongodb://user:pw@db.local/app") as store:
            await store.set(sid, {"user": 1})
            session = await store.get(sid)
    """

    def __init__(
        self,
        spec: ConnectionSpec = None,
        *,
        codec: SessionCodec | None = None,
        client_factory: ClientFactory | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """Initialize the store without touching the network.

        Args:
            spec: Connection string, options mapping or ConnectionConfig
            codec: Session codec (chosen from ``stringify`` if not provided)
            client_factory: Callable building the driver client
            clock: Source of the current UTC time

        Raises:
            ConfigurationError: If the connection specification is malformed
        """
        self._config = resolve_connection_config(spec)
        self._codec = codec or codec_for(self._config)
        self._clock = clock
        self._manager = CollectionManager(
            self._config,
            client_factory=client_factory,
            clock=clock,
        )

    @property
    def config(self) -> ConnectionConfig:
        return self._config

    @property
    def codec(self) -> SessionCodec:
        return self._codec

    @property
    def state(self) -> ConnectionState:
        return self._manager.state

    @property
    def manager(self) -> CollectionManager:
        return self._manager

    async def connect(self) -> None:
        """Resolve the collection now instead of on first use."""
        await self._manager.get_collection()

    async def close(self) -> None:
        """Stop the sweeper and close the connection."""
        await self._manager.close()

    async def __aenter__(self) -> "MongoSessionStore":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def get(self, sid: str) -> dict[str, Any] | None:
        """Get a session by id.

        An expired record is destroyed and reported as absent.

        Raises:
            StoreOperationError: If the lookup fails
            CodecError: If the stored payload or expiry cannot be decoded
        """
        with track_operation("get"):
            collection = await self._manager.get_collection()
            try:
                record = await collection.find_one({"_id": sid})
            except PyMongoError as e:
                logger.error("session_get_error", session_id=sid, error=str(e))
                raise StoreOperationError(f"Failed to get session: {e}", cause=e) from e

            if record is None:
                logger.debug("session_not_found", session_id=sid)
                return None

            try:
                expired = is_expired(record.get("expires"), self._clock())
            except CodecError as e:
                logger.error("session_expires_invalid", session_id=sid, error=str(e))
                raise

            if expired:
                logger.debug("session_expired", session_id=sid)
                await self.destroy(sid)
                return None

            try:
                return self._codec.decode(record.get("session"))
            except CodecError as e:
                logger.error(
                    "session_decode_error",
                    session_id=sid,
                    codec=self._codec.name,
                    error=str(e),
                )
                raise

    async def set(self, sid: str, session: Mapping[str, Any]) -> None:
        """Upsert a session, attaching its cookie expiry when present.

        Raises:
            CodecError: If the session cannot be encoded
            StoreOperationError: If the upsert fails
        """
        with track_operation("set"):
            record: dict[str, Any] = {"_id": sid, "session": self._codec.encode(session)}
            expires = session_expiry(session)
            if expires is not None:
                record["expires"] = expires

            collection = await self._manager.get_collection()
            try:
                await collection.replace_one({"_id": sid}, record, upsert=True)
            except PyMongoError as e:
                logger.error("session_set_error", session_id=sid, error=str(e))
                raise StoreOperationError(f"Failed to save session: {e}", cause=e) from e

            logger.debug(
                "session_saved",
                session_id=sid,
                expires=expires.isoformat() if expires else None,
            )

    async def destroy(self, sid: str) -> None:
        """Delete a session; a missing session is not an error.

        Raises:
            StoreOperationError: If the delete fails
        """
        with track_operation("destroy"):
            collection = await self._manager.get_collection()
            try:
                result = await collection.delete_one({"_id": sid})
            except PyMongoError as e:
                logger.error("session_destroy_error", session_id=sid, error=str(e))
                raise StoreOperationError(f"Failed to destroy session: {e}", cause=e) from e

            logger.debug(
                "session_destroyed",
                session_id=sid,
                deleted=bool(getattr(result, "deleted_count", 0)),
            )

    async def length(self) -> int:
        """Count stored sessions, expired ones not yet swept included.

        Raises:
            StoreOperationError: If the count fails
        """
        with track_operation("length"):
            collection = await self._manager.get_collection()
            try:
                return int(await collection.count_documents({}))
            except PyMongoError as e:
                logger.error("session_count_error", error=str(e))
                raise StoreOperationError(f"Failed to count sessions: {e}", cause=e) from e

    async def clear(self) -> None:
        """Drop the session collection.

        Raises:
            StoreOperationError: If the drop fails
        """
        with track_operation("clear"):
            collection = await self._manager.get_collection()
            try:
                await collection.drop()
            except PyMongoError as e:
                logger.error("session_clear_error", error=str(e))
                raise StoreOperationError(f"Failed to clear sessions: {e}", cause=e) from e

            logger.info("sessions_cleared", collection=self._config.collection)
