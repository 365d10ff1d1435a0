"""
Settings Management Module

Provides pydantic-based configuration management with:
- YAML configuration file loading
- Environment-specific overrides (config.{environment}.yaml)
- Environment variables (ADDON_PROXY_*) for values not set in YAML
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict


class HttpSettings(BaseModel):
    """Outbound HTTP client settings."""

    timeout: float = 30.0
    manifest_timeout: float = 10.0
    max_connections: int = 100
    max_keepalive_connections: int = 20
    keepalive_expiry: float = 5.0
    verify_ssl: bool = True
    follow_redirects: bool = True
    default_headers: dict[str, str] = Field(default_factory=dict)


class DispatchSettings(BaseModel):
    """Dispatch policy settings.

    Content types listed in ``stream_first_match_types`` answer stream
    requests from the first upstream (in binding order) that returns a
    non-empty list instead of merging every upstream's streams.
    """

    stream_first_match_types: list[str] = Field(default_factory=list)


class Settings(BaseSettings):
    """
    Main application settings.

    Configuration hierarchy (lowest to highest precedence):
    1. Field defaults
    2. settings/config.yaml (base)
    3. settings/config.{environment}.yaml (environment-specific)
    4. Environment variables (ADDON_PROXY_*, nested with ``__``)

    YAML values reach the model as init kwargs, so init kwargs rank below
    environment variables.

    Examples:
        >>> settings = get_settings()
        >>> settings.port
        7000
    """

    model_config = SettingsConfigDict(
        env_prefix="ADDON_PROXY_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="allow",
    )

    environment: str = "development"
    log_level: str = "INFO"
    log_json: bool = False

    host: str = "0.0.0.0"
    port: int = 7000
    configs_dir: Path = Path("configs")

    metrics_enabled: bool = False

    http: HttpSettings = Field(default_factory=HttpSettings)
    dispatch: DispatchSettings = Field(default_factory=DispatchSettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @classmethod
    def load_from_yaml(cls, config_path: Path | None = None) -> "Settings":
        """
        Load settings from a YAML configuration file.

        Args:
            config_path: Path to config file (default: ADDON_PROXY_SETTINGS_FILE
                or settings/config.yaml in the working directory)

        Returns:
            Settings instance
        """
        if config_path is None:
            config_path = Path(
                os.getenv("ADDON_PROXY_SETTINGS_FILE", "settings/config.yaml")
            )

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            config_data = yaml.safe_load(f) or {}

        env = os.getenv(
            "ADDON_PROXY_ENVIRONMENT", config_data.get("environment", "development")
        )
        env_config_path = config_path.parent / f"config.{env}.yaml"

        if env_config_path.exists():
            with open(env_config_path) as f:
                env_config = yaml.safe_load(f) or {}
                config_data = cls._deep_merge(config_data, env_config)

        return cls(**config_data)

    @staticmethod
    def _deep_merge(base: dict, override: dict) -> dict:
        """Deep merge two dictionaries."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = Settings._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    def http_client_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for the shared main HTTP client."""
        return {
            "timeout": self.http.timeout,
            "max_connections": self.http.max_connections,
            "max_keepalive_connections": self.http.max_keepalive_connections,
            "keepalive_expiry": self.http.keepalive_expiry,
            "ssl_verify": self.http.verify_ssl,
            "follow_redirects": self.http.follow_redirects,
        }


@lru_cache
def get_settings(config_path: Path | None = None) -> Settings:
    """
    Get cached settings instance.

    Args:
        config_path: Optional path to config file

    Returns:
        Settings instance
    """
    return Settings.load_from_yaml(config_path)


def reload_settings() -> Settings:
    """Reload settings by clearing cache."""
    get_settings.cache_clear()
    return get_settings()


__all__ = [
    "Settings",
    "HttpSettings",
    "DispatchSettings",
    "get_settings",
    "reload_settings",
]
