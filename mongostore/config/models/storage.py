"""Storage backend configuration models."""

from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, SecretStr, field_validator

BackendType = Literal["mongodb", "inmemory"]

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 27017
DEFAULT_DATABASE = "DefaultDB"
DEFAULT_COLLECTION = "sessions"

# Characters MongoDB does not allow in database names
INVALID_DATABASE_CHARS = frozenset('/\\. "$*<>:|?')


class ConnectionConfig(BaseModel):
    """Resolved MongoDB connection settings for one session store.

    Immutable once built. Use ``resolve_connection_config`` to build one
    from a connection string or an options mapping.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    host: str = Field(default=DEFAULT_HOST, min_length=1, description="Server host")
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535, description="Server port")
    db: str = Field(
        default=DEFAULT_DATABASE,
        validation_alias=AliasChoices("db", "database"),
        description="Database name",
    )
    username: str | None = Field(default=None, description="Authentication user")
    password: SecretStr | None = Field(default=None, description="Authentication password")
    collection: str = Field(
        default=DEFAULT_COLLECTION,
        min_length=1,
        description="Collection holding session records",
    )
    stringify: bool = Field(
        default=True,
        description="Store sessions as JSON strings instead of native documents",
    )
    auto_reconnect: bool = Field(
        default=False,
        description="Let the driver retry reads and writes after a dropped connection",
    )
    clear_interval: float = Field(
        default=-1,
        description="Seconds between expired-session sweeps; <= 0 disables the sweeper",
    )

    @field_validator("db")
    @classmethod
    def _check_database_name(cls, value: str) -> str:
        if not value:
            raise ValueError("database name is required")
        bad = sorted(INVALID_DATABASE_CHARS.intersection(value))
        if bad:
            raise ValueError(f"database name contains invalid characters: {''.join(bad)!r}")
        return value

    @property
    def has_credentials(self) -> bool:
        """True when both username and password are set."""
        return bool(self.username) and self.password is not None and bool(
            self.password.get_secret_value()
        )

    @property
    def sweeper_enabled(self) -> bool:
        """True when a positive sweep interval is configured."""
        return self.clear_interval > 0


class SessionStoreConfig(BaseModel):
    """Session store section of the settings file."""

    backend: BackendType = Field(default="mongodb", description="Backend type")
    url: str | None = Field(
        default=None,
        description="Connection string [mongodb://][user:pass@]host[:port]/database",
    )
    options: dict[str, Any] = Field(
        default_factory=dict,
        description="Connection options; explicit keys override the url",
    )
