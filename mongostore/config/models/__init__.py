"""Configuration model exports.

    from mongostore.config.models import ConnectionConfig, SessionStoreConfig
"""

from mongostore.config.models.observability import (
    LoggingConfig,
    ObservabilityConfig,
)
from mongostore.config.models.storage import (
    ConnectionConfig,
    SessionStoreConfig,
)

__all__ = [
    "ConnectionConfig",
    "SessionStoreConfig",
    "LoggingConfig",
    "ObservabilityConfig",
]
