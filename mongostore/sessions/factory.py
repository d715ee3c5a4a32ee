"""SessionStore factory for creating backend instances.

Builds the configured SessionStore from the ``session`` settings section:

    [session]
    backend = "mongodb"
    url = "mongodb://localhost:27017/app"

    [session.options]
    collection = "web_sessions"
    clear_interval = 300

The url can also come from the MONGOSTORE_SESSION__URL environment variable.
"""

from typing import Any

from mongostore.config.models.storage import SessionStoreConfig
from mongostore.observability.logging import get_logger, setup_logging
from mongostore.sessions.store import SessionStore
from mongostore.sessions.stores.inmemory import InMemorySessionStore
from mongostore.sessions.stores.mongodb import MongoSessionStore

logger = get_logger(__name__)


def create_session_store(config: SessionStoreConfig | None = None) -> SessionStore:
    """Create a SessionStore instance based on configuration.

    Args:
        config: Session store configuration. When omitted, settings are
            loaded and their ``observability.logging`` section is applied

    Returns:
        Configured SessionStore instance

    Raises:
        ConfigurationError: If the connection specification is malformed
        ValueError: If backend type is not supported
    """
    if config is None:
        from mongostore.config import get_settings

        settings = get_settings()
        setup_logging(**settings.observability.logging.model_dump())
        config = settings.session

    backend = config.backend

    if backend == "inmemory":
        logger.info("creating_session_store", backend="inmemory")
        return InMemorySessionStore()

    elif backend == "mongodb":
        spec: dict[str, Any] = dict(config.options)
        if config.url:
            spec["url"] = config.url

        store = MongoSessionStore(spec or None)
        logger.info(
            "creating_session_store",
            backend="mongodb",
            host=store.config.host,
            port=store.config.port,
            db=store.config.db,
            collection=store.config.collection,
            stringify=store.config.stringify,
            clear_interval=store.config.clear_interval,
            has_credentials=store.config.has_credentials,
        )
        return store

    raise ValueError(f"Unsupported session store backend: {backend}")
