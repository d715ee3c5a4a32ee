"""Location of the TOML files that configure the session store.

Two files are read, lowest precedence first:

    config/default.toml             base session and logging settings
    config/{MONGOSTORE_ENV}.toml    per-environment overrides (optional)

Parsing and merging is done by pydantic-settings; see ``Settings``.
"""

import os
from pathlib import Path


def get_config_dir() -> Path:
    """Directory holding the TOML files.

    MONGOSTORE_CONFIG_DIR wins; otherwise ``config/`` under the working
    directory.

    Raises:
        FileNotFoundError: If MONGOSTORE_CONFIG_DIR names a missing directory
    """
    config_dir_env = os.environ.get("MONGOSTORE_CONFIG_DIR")
    if config_dir_env:
        path = Path(config_dir_env)
        if not path.is_dir():
            raise FileNotFoundError(f"Config directory not found: {config_dir_env}")
        return path

    return Path.cwd() / "config"


def get_environment() -> str:
    """Current environment name from MONGOSTORE_ENV, 'development' if unset."""
    return os.environ.get("MONGOSTORE_ENV", "development")


def config_files() -> tuple[Path, Path]:
    """Return ``(default.toml, {env}.toml)`` paths; either may be missing."""
    config_dir = get_config_dir()
    return config_dir / "default.toml", config_dir / f"{get_environment()}.toml"
