"""Lazy MongoDB connection and collection management.

The first caller that needs the session collection starts a single
resolution task:

    UNCONNECTED -> CONNECTING -> AUTHENTICATING -> RESOLVING_COLLECTION -> READY

AUTHENTICATING only happens when credentials are configured. Any failure
moves the manager to FAILED and every waiter receives the same error.
Callers arriving while the task runs await it instead of connecting again.
"""

import asyncio
from collections.abc import Callable
from datetime import datetime
from enum import Enum
from typing import Any

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo import WriteConcern
from pymongo.errors import PyMongoError

from mongostore.config.models.storage import ConnectionConfig
from mongostore.db.errors import (
    CollectionResolutionError,
    ConnectionError,
    StoreError,
)
from mongostore.db.sweeper import ExpirationSweeper
from mongostore.observability.logging import get_logger
from mongostore.observability.metrics import CONNECTION_ATTEMPTS
from mongostore.sessions.expiry import utcnow

logger = get_logger(__name__)

ClientFactory = Callable[..., AsyncIOMotorClient]


class ConnectionState(str, Enum):
    """Lifecycle of a CollectionManager."""

    UNCONNECTED = "unconnected"
    CONNECTING = "connecting"
    AUTHENTICATING = "authenticating"
    RESOLVING_COLLECTION = "resolving_collection"
    READY = "ready"
    FAILED = "failed"
    CLOSED = "closed"


class CollectionManager:
    """Owns the client, the session collection handle and the sweeper.

    Usage:
        manager = CollectionManager(config)
        collection = await manager.get_collection()
        ...
        await manager.close()
    """

    def __init__(
        self,
        config: ConnectionConfig,
        client_factory: ClientFactory | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """Initialize manager state; no I/O happens here.

        Args:
            config: Resolved connection configuration
            client_factory: Callable building the driver client (AsyncIOMotorClient by default)
            clock: Source of the current UTC time, handed to the sweeper
        """
        self._config = config
        self._client_factory = client_factory or AsyncIOMotorClient
        self._clock = clock
        self._state = ConnectionState.UNCONNECTED
        self._client: Any = None
        self._collection: AsyncIOMotorCollection | None = None
        self._resolution: asyncio.Task | None = None
        self._error: StoreError | None = None
        self._sweeper: ExpirationSweeper | None = None

    @property
    def config(self) -> ConnectionConfig:
        return self._config

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is ConnectionState.READY

    @property
    def sweeper(self) -> ExpirationSweeper | None:
        return self._sweeper

    async def get_collection(self) -> AsyncIOMotorCollection:
        """Return the session collection, connecting on first use.

        Raises:
            ConnectionError: If connecting or authenticating failed, or the
                manager is closed
            CollectionResolutionError: If the collection could not be resolved
        """
        if self._state is ConnectionState.READY and self._collection is not None:
            return self._collection

        if self._state is ConnectionState.CLOSED:
            raise ConnectionError("Session store connection is closed")

        if self._state is ConnectionState.FAILED and self._error is not None:
            raise self._error

        if self._resolution is None:
            self._resolution = asyncio.create_task(self._resolve())
        resolution = self._resolution

        # A cancelled waiter must not cancel the shared resolution
        try:
            return await asyncio.shield(resolution)
        except asyncio.CancelledError:
            # close() cancelled the shared task, not this waiter
            if resolution.cancelled():
                raise ConnectionError("Session store connection is closed") from None
            raise

    async def close(self) -> None:
        """Stop the sweeper and close the client. Safe to call twice."""
        if self._state is ConnectionState.CLOSED:
            return

        if self._resolution is not None and not self._resolution.done():
            self._resolution.cancel()
            try:
                await self._resolution
            except (asyncio.CancelledError, StoreError):
                pass

        if self._sweeper is not None:
            await self._sweeper.stop()

        if self._client is not None:
            self._client.close()
            self._client = None

        self._collection = None
        self._state = ConnectionState.CLOSED
        logger.info("mongodb_connection_closed", db=self._config.db)

    async def _resolve(self) -> AsyncIOMotorCollection:
        try:
            client = await self._connect()
            if self._config.has_credentials:
                await self._authenticate(client)
            collection = self._resolve_collection(client)
        except StoreError as e:
            self._fail(e)
            raise
        except Exception as e:
            error = ConnectionError(f"Unexpected error while connecting: {e!r}", cause=e)
            self._fail(error)
            raise error from e

        self._collection = collection
        self._state = ConnectionState.READY
        CONNECTION_ATTEMPTS.labels(outcome="ready").inc()
        logger.info(
            "mongodb_collection_ready",
            host=self._config.host,
            port=self._config.port,
            db=self._config.db,
            collection=self._config.collection,
        )

        if self._config.sweeper_enabled:
            self._sweeper = ExpirationSweeper(
                collection,
                self._config.clear_interval,
                clock=self._clock,
            )
            await self._sweeper.start()

        return collection

    async def _connect(self) -> Any:
        self._state = ConnectionState.CONNECTING
        options: dict[str, Any] = {
            "host": self._config.host,
            "port": self._config.port,
            "tz_aware": True,
            "retryReads": self._config.auto_reconnect,
            "retryWrites": self._config.auto_reconnect,
        }
        if self._config.has_credentials:
            options["username"] = self._config.username
            options["password"] = self._config.password.get_secret_value()  # type: ignore[union-attr]
            options["authSource"] = self._config.db

        try:
            self._client = self._client_factory(**options)
            await self._client.admin.command("ping")
        except PyMongoError as e:
            raise ConnectionError(
                f"Failed to connect to MongoDB at {self._config.host}:{self._config.port}: {e}",
                cause=e,
            ) from e

        logger.debug("mongodb_connected", host=self._config.host, port=self._config.port)
        return self._client

    async def _authenticate(self, client: Any) -> None:
        self._state = ConnectionState.AUTHENTICATING
        try:
            status = await client[self._config.db].command("connectionStatus")
        except PyMongoError as e:
            raise ConnectionError(
                f"Authentication failed for user {self._config.username!r}: {e}",
                cause=e,
            ) from e

        users = status.get("authInfo", {}).get("authenticatedUsers") or []
        if not users:
            raise ConnectionError(
                f"Authentication failed for user {self._config.username!r}: "
                "server reports no authenticated user"
            )
        logger.debug("mongodb_authenticated", username=self._config.username)

    def _resolve_collection(self, client: Any) -> AsyncIOMotorCollection:
        self._state = ConnectionState.RESOLVING_COLLECTION
        try:
            return client[self._config.db].get_collection(
                self._config.collection,
                write_concern=WriteConcern(w=1),
            )
        except (PyMongoError, TypeError) as e:
            raise CollectionResolutionError(
                f"Error getting collection: {self._config.collection}",
                cause=e,
            ) from e

    def _fail(self, error: StoreError) -> None:
        self._state = ConnectionState.FAILED
        self._error = error
        CONNECTION_ATTEMPTS.labels(outcome="failed").inc()
        logger.error(
            "mongodb_connection_failed",
            host=self._config.host,
            port=self._config.port,
            db=self._config.db,
            error=str(error),
        )
        if self._client is not None:
            self._client.close()
            self._client = None
