"""ts3query Configuration System.

Layered YAML configuration with Pydantic validation.

Config Layer Priority (highest to lowest):
1. Overrides passed to create_settings() (in-memory)
2. Config file (~/.ts3query/config.yaml or an explicit path)
3. Environment variables (TS3QUERY_ prefix, ``__`` nesting)
4. Defaults (defined in Pydantic models)

Usage:
    from ts3query.core.config import get_settings

    settings = get_settings()
    print(settings.client.port)  # 10011 (default)
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, PositiveFloat, PositiveInt, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ts3query.core.exceptions import ConfigurationError


# Header line every ServerQuery connection starts with
DEFAULT_CONNECT_HEADER = "TS3"

DEFAULT_PORT = 10011
DEFAULT_SSH_PORT = 10022

DEFAULT_CONFIG_PATH = Path.home() / ".ts3query" / "config.yaml"


# =============================================================================
# Sub-configuration Models (nested sections)
# =============================================================================


class SSHConfig(BaseModel):
    """Secure-shell transport configuration.

    Authentication is attempted with the key file first, then the password,
    and finally with the "none" method when neither is configured.
    """

    enabled: bool = False
    username: str = "serveradmin"
    password: Optional[SecretStr] = None
    key_file: Optional[str] = None
    host_key_fingerprint: Optional[str] = None  # hex, colons optional

    @field_validator("host_key_fingerprint")
    @classmethod
    def normalize_fingerprint(cls, v: Optional[str]) -> Optional[str]:
        """Strip separators so fingerprints compare as plain hex."""
        if v is None:
            return None
        return v.replace(":", "").lower()


class ClientConfig(BaseModel):
    """ServerQuery connection configuration."""

    host: str = "127.0.0.1"
    port: PositiveInt = DEFAULT_PORT
    connect_timeout: PositiveFloat = 10.0  # seconds
    command_timeout: PositiveFloat = 10.0  # seconds, per exec() round trip
    connect_header: str = DEFAULT_CONNECT_HEADER
    expect_header: bool = True
    expect_banner: bool = True
    ssh: SSHConfig = Field(default_factory=SSHConfig)

    @property
    def address(self) -> str:
        """Return ``host:port`` for logging and error messages."""
        return f"{self.host}:{self.port}"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "json"

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate renderer name."""
        if v.lower() not in {"json", "console"}:
            raise ValueError(f"Invalid log format: {v}. Must be 'json' or 'console'")
        return v.lower()


class Settings(BaseSettings):
    """Main settings class.

    Loads configuration from:
    1. Environment variables (TS3QUERY_ prefix)
    2. Config file values passed in by create_settings()
    3. Defaults defined in Pydantic models
    """

    model_config = SettingsConfigDict(
        env_prefix="TS3QUERY_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    client: ClientConfig = Field(default_factory=ClientConfig)
    logging_config: LoggingConfig = Field(
        default_factory=LoggingConfig, alias="logging"
    )

    @property
    def logging(self) -> LoggingConfig:
        """Alias for logging_config to match YAML key and common usage."""
        return self.logging_config


# =============================================================================
# Configuration Loading Functions
# =============================================================================


def load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed YAML content as dictionary.

    Raises:
        ConfigurationError: If file cannot be read or parsed.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(
            config_path=str(path),
            message=f"Configuration file not found: {path}",
        )
    except yaml.YAMLError as e:
        raise ConfigurationError(
            config_path=str(path),
            message=f"Invalid YAML in {path}: {e}",
        )

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigurationError(
            config_path=str(path),
            message=f"Top level of {path} must be a mapping",
        )
    return content


def merge_configs(*configs: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge multiple configuration dictionaries.

    Later configs override earlier ones.

    Args:
        *configs: Configuration dictionaries to merge.

    Returns:
        Merged configuration dictionary.
    """
    result: Dict[str, Any] = {}

    for config in configs:
        for key, value in config.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = merge_configs(result[key], value)
            else:
                result[key] = value

    return result


def create_settings(
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> Settings:
    """Create a Settings instance with layered configuration.

    A missing default config file is not an error; a missing explicit
    ``config_path`` is.

    Args:
        config_path: Optional path to a YAML config file.
        overrides: Optional in-memory overrides dictionary.

    Returns:
        Configured Settings instance.

    Raises:
        ConfigurationError: If configuration is invalid.
    """
    if config_path is not None:
        path = Path(config_path).expanduser()
        file_config = load_yaml_file(path)
    else:
        path = DEFAULT_CONFIG_PATH
        file_config = load_yaml_file(path) if path.exists() else {}

    # Secrets (e.g. TS3QUERY_CLIENT__SSH__PASSWORD) may live next to the config
    env_path = path.parent / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    merged = merge_configs(file_config, overrides or {})

    try:
        return Settings(**merged)
    except Exception as e:
        raise ConfigurationError(
            config_path=str(path),
            message=f"Configuration validation failed: {e}",
        ) from e


# =============================================================================
# Singleton Settings Access
# =============================================================================


class _SettingsHolder:
    """Thread-safe singleton holder for Settings instance."""

    _instance: Optional[Settings] = None
    _lock: threading.Lock = threading.Lock()

    @classmethod
    def get(cls, force_reload: bool = False, **kwargs: Any) -> Settings:
        """Get or create the Settings singleton.

        Args:
            force_reload: If True, recreate settings even if already loaded.
            **kwargs: Arguments passed to create_settings().

        Returns:
            Settings instance.
        """
        if cls._instance is None or force_reload:
            with cls._lock:
                # Double-check locking
                if cls._instance is None or force_reload:
                    cls._instance = create_settings(**kwargs)
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton (for testing)."""
        with cls._lock:
            cls._instance = None


def get_settings(
    force_reload: bool = False,
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> Settings:
    """Get the global Settings singleton.

    Args:
        force_reload: If True, reload settings from files.
        config_path: Optional path to a YAML config file.
        overrides: Optional in-memory overrides.

    Returns:
        Settings instance.

    Examples:
        >>> settings = get_settings()
        >>> settings = get_settings(force_reload=True, config_path=Path("ts3.yaml"))
    """
    return _SettingsHolder.get(
        force_reload=force_reload,
        config_path=config_path,
        overrides=overrides,
    )


def reset_settings() -> None:
    """Reset the global settings singleton."""
    _SettingsHolder.reset()
