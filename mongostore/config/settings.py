"""Root settings model for mongostore configuration."""

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from mongostore.config.loader import config_files
from mongostore.config.models.observability import ObservabilityConfig
from mongostore.config.models.storage import SessionStoreConfig


class Settings(BaseSettings):
    """Session store and logging configuration.

    Values are layered, highest precedence first:
    1. Constructor arguments
    2. MONGOSTORE_* environment variables (nested with "__")
    3. config/{MONGOSTORE_ENV}.toml
    4. config/default.toml
    5. Model defaults

    Nested tables are merged key by key, so an environment file can
    override ``session.options.clear_interval`` alone.
    """

    model_config = SettingsConfigDict(
        env_prefix="MONGOSTORE_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="mongostore", description="Application name for logging")

    session: SessionStoreConfig = Field(
        default_factory=SessionStoreConfig,
        description="Session store backend configuration",
    )
    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig,
        description="Observability configuration",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        default_file, env_file = config_files()
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls, toml_file=env_file),
            TomlConfigSettingsSource(settings_cls, toml_file=default_file),
        )
