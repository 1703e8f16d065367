"""
Configuration Management.

Loads settings from <settings dir>/*.yaml and secrets from the environment
(or <settings dir>/.env). The settings directory is $KIVI_CONFIG_DIR when
set, otherwise the defaults packaged with kivi.

Secrets / environment overrides:
    CONSUL_HTTP_TOKEN, CONSUL_HTTP_ADDR, ETCD_CREDENTIALS, ETCD_ADDR

Settings (YAML):
    application.yaml   - App identity, HTTP timeouts, default backend URLs
    logging.yaml       - Logging configuration

Resolution order for every backend option:
    command-line flag > environment / .env > application.yaml
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from kivi.core.config_schema import ApplicationSchema, LoggingSchema

CONFIG_DIR_ENV = "KIVI_CONFIG_DIR"

_PACKAGED_SETTINGS_DIR = Path(__file__).resolve().parent.parent / "config" / "settings"


def find_config_dir() -> Path:
    """Return the settings directory, honouring $KIVI_CONFIG_DIR."""
    override = (os.environ.get(CONFIG_DIR_ENV) or "").strip()
    if override:
        return Path(override).expanduser()
    return _PACKAGED_SETTINGS_DIR


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from the settings directory."""
    config_path = find_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Credentials and addresses taken from the environment. Never logged."""

    consul_http_token: str | None = None
    consul_http_addr: str | None = None
    etcd_credentials: str | None = None
    etcd_addr: str | None = None

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _load_validated(schema_cls: type, filename: str) -> Any:
    """Load YAML and validate against schema. Returns typed model instance."""
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """
    Application configuration loaded from YAML files.

    Each YAML file is validated against its Pydantic schema at load time.
    Properties return typed Pydantic model instances with attribute access.
    """

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")

    @property
    def application(self) -> ApplicationSchema:
        """Application settings."""
        return self._application

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance. Reads .env from the settings directory."""
    env_path = find_config_dir() / ".env"
    return Settings(_env_file=str(env_path))


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


def resolve_option(flag_value: str | None, env_value: str | None, default: str | None) -> str | None:
    """
    Pick the effective value of an option.

    Blank strings count as unset, so an exported but empty variable does not
    mask the YAML default.
    """
    for candidate in (flag_value, env_value):
        if candidate is not None and candidate.strip():
            return candidate
    return default
