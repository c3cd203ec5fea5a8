"""Configuration file management for wallosctl."""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomli_w

from wallosctl.errors import ConfigurationError

DEFAULT_URL = "http://localhost:8282"
DEFAULT_TIMEOUT = 10.0

ENV_OVERRIDES = {
    "url": "WALLOS_URL",
    "api_key": "WALLOS_API_KEY",
    "username": "WALLOS_USERNAME",
    "password": "WALLOS_PASSWORD",
    "timeout": "WALLOS_TIMEOUT",
}


@dataclass(frozen=True)
class Settings:
    """Resolved connection settings."""

    url: str = DEFAULT_URL
    api_key: str | None = None
    username: str | None = None
    password: str | None = None
    timeout: float = DEFAULT_TIMEOUT


def get_xdg_config_home() -> Path:
    """Get XDG config directory, with fallback to ~/.config."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


def get_config_path() -> Path:
    """Get the config file path (XDG compliant).

    Returns:
        Path to the config file.
    """
    return get_xdg_config_home() / "wallosctl" / "config.toml"


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    default_config: dict[str, Any] = {
        "server": {
            "url": DEFAULT_URL,
            "timeout": DEFAULT_TIMEOUT,
        },
    }

    save_config(default_config, config_path)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "rb") as f:
        return tomllib.load(f)


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Save configuration to TOML file.

    Args:
        config: Configuration dictionary.
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(config_path, 0o600)


def load_settings(config_path: Path | None = None) -> Settings:
    """Resolve settings from the config file, then environment overrides.

    A missing config file is not an error; defaults and environment apply.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Resolved settings.

    Raises:
        ConfigurationError: If the file is malformed or the timeout isn't numeric.
    """
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        config = {}
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Config file is not valid TOML: {e}") from e

    server = config.get("server", {})
    if not isinstance(server, dict):
        raise ConfigurationError("Config table [server] must be a table")

    values: dict[str, Any] = {key: server.get(key) for key in ENV_OVERRIDES}
    for key, env_var in ENV_OVERRIDES.items():
        env_value = os.environ.get(env_var)
        if env_value:
            values[key] = env_value

    try:
        timeout = float(values["timeout"]) if values["timeout"] is not None else DEFAULT_TIMEOUT
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Timeout must be a number, got {values['timeout']!r}") from e

    return Settings(
        url=values["url"] or DEFAULT_URL,
        api_key=values["api_key"] or None,
        username=values["username"] or None,
        password=values["password"] or None,
        timeout=timeout,
    )


def save_api_key(api_key: str, config_path: Path | None = None) -> None:
    """Store an API key in the [server] table, keeping everything else.

    Args:
        api_key: Key to store.
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    try:
        config = load_config(config_path)
    except FileNotFoundError:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config = {}

    server = config.setdefault("server", {})
    server["api_key"] = api_key
    save_config(config, config_path)
