"""Unit tests for Settings class and get_settings function."""

from pathlib import Path

import pytest

from mongostore.config import get_settings, reload_settings
from mongostore.config.settings import Settings


@pytest.fixture
def config_env(
    test_config_dir: Path, mock_toml_files, monkeypatch: pytest.MonkeyPatch
):
    """Point the loader at the temporary config directory."""
    monkeypatch.setenv("MONGOSTORE_CONFIG_DIR", str(test_config_dir))
    monkeypatch.setenv("MONGOSTORE_ENV", "nonexistent")
    return mock_toml_files


class TestSettings:
    """Tests for Settings model."""

    def test_default_values(self, config_env) -> None:
        """Settings has sensible defaults."""
        settings = Settings()
        assert settings.app_name == "mongostore"
        assert settings.session.backend == "mongodb"
        assert settings.session.url is None
        assert settings.session.options == {}

    def test_observability_defaults(self, config_env) -> None:
        """Observability configuration has defaults."""
        settings = Settings()
        assert settings.observability.logging.level == "INFO"
        assert settings.observability.logging.format == "json"
        assert settings.observability.logging.redact_secrets is True


class TestGetSettings:
    """Tests for get_settings function."""

    def test_reads_toml(self, config_env) -> None:
        """get_settings returns values from default.toml."""
        config_env({
            "default.toml": (
                "app_name = 'test'\n"
                "[session]\nurl = 'mongodb://db.local/app'\n"
                "[session.options]\nclear_interval = 30\n"
            )
        })

        settings = get_settings()
        assert isinstance(settings, Settings)
        assert settings.app_name == "test"
        assert settings.session.url == "mongodb://db.local/app"
        assert settings.session.options == {"clear_interval": 30}

    def test_settings_cached(self, config_env) -> None:
        """get_settings returns cached instance."""
        config_env({"default.toml": "app_name = 'cached'"})

        assert get_settings() is get_settings()

    def test_env_overrides_toml(self, config_env, env_override) -> None:
        """MONGOSTORE_* environment variables win over TOML."""
        config_env({"default.toml": "[session]\nbackend = 'mongodb'"})

        with env_override({"MONGOSTORE_SESSION__BACKEND": "inmemory"}):
            settings = reload_settings()

        assert settings.session.backend == "inmemory"

    def test_reload_picks_up_changes(
        self, config_env, test_config_dir: Path
    ) -> None:
        """reload_settings re-reads configuration files."""
        config_env({"default.toml": "app_name = 'first'"})
        assert get_settings().app_name == "first"

        (test_config_dir / "default.toml").write_text("app_name = 'second'")
        assert reload_settings().app_name == "second"

    def test_environment_file_merges_nested_tables(
        self, config_env, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """An environment file overrides single keys inside nested tables."""
        config_env({
            "default.toml": (
                "[session]\nbackend = 'mongodb'\nurl = '/app'\n"
                "[session.options]\ncollection = 'web'\nclear_interval = -1\n"
            ),
            "staging.toml": "[session.options]\nclear_interval = 60\n",
        })
        monkeypatch.setenv("MONGOSTORE_ENV", "staging")

        settings = get_settings()

        assert settings.session.backend == "mongodb"
        assert settings.session.url == "/app"
        assert settings.session.options == {"collection": "web", "clear_interval": 60}

    def test_missing_default_raises(self, config_env) -> None:
        """Missing default.toml raises error."""
        with pytest.raises(FileNotFoundError, match="default.toml"):
            get_settings()

    def test_shipped_development_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The repository's config directory loads with development overrides."""
        monkeypatch.delenv("MONGOSTORE_CONFIG_DIR", raising=False)
        monkeypatch.setenv("MONGOSTORE_ENV", "development")
        monkeypatch.chdir(Path(__file__).parents[3])

        settings = get_settings()

        assert settings.session.options["clear_interval"] == 60
        assert settings.session.options["collection"] == "sessions"
        assert settings.observability.logging.level == "DEBUG"
        assert settings.observability.logging.redact_secrets is True
