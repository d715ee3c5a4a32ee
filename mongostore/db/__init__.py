"""Database layer for mongostore.

This module contains:
- Store error hierarchy
- Lazy connection/collection management
- Background expiration sweeper
"""

from mongostore.db.errors import (
    CodecError,
    CollectionResolutionError,
    ConfigurationError,
    ConnectionError,
    StoreError,
    StoreOperationError,
)

__all__ = [
    "StoreError",
    "ConfigurationError",
    "ConnectionError",
    "CollectionResolutionError",
    "CodecError",
    "StoreOperationError",
]
