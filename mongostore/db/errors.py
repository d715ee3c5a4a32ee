"""Store error hierarchy for the session adapter.

Every failure the adapter can report is one of these errors, so callers
can handle them without importing driver-specific exceptions.
"""


class StoreError(Exception):
    """Base exception for all session store errors.

    Backend-specific errors are wrapped in one of the StoreError
    subclasses and kept on ``cause``.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class ConfigurationError(StoreError):
    """Raised when a connection specification cannot be resolved.

    Examples:
        - Connection string without a database segment
        - Port outside 1..65535
        - Unknown option key
    """

    pass


class ConnectionError(StoreError):
    """Raised when the database connection cannot be established.

    Examples:
        - Server unreachable
        - Authentication rejected
        - Store already closed
    """

    pass


class CollectionResolutionError(ConnectionError):
    """Raised when the session collection handle cannot be resolved."""

    pass


class CodecError(StoreError):
    """Raised when a session cannot be encoded or a payload decoded."""

    pass


class StoreOperationError(StoreError):
    """Raised when find/upsert/delete/count/drop fails on the backend."""

    pass
