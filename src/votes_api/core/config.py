"""Application configuration via Pydantic Settings.

Precedence, highest first: explicit keyword arguments, environment
variables, ``.env``, the JSON config file, then the defaults below. The
JSON file path comes from the ``CONFIG_FILE`` environment variable
(default ``config.json``); a missing file is ignored. The file may use flat
setting names or the nested layout
``{"apiUrls": {"romania", "diaspora"}, "server": {"port", "cacheTtl"}}``
where ``cacheTtl`` is in milliseconds. Unrecognised keys are logged.
"""

import os
from pathlib import Path
from typing import Any, Literal

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

DEFAULT_ROMANIA_API_URL = "https://prezenta.roaep.ro/prezidentiale04052025/data/json/sicpv/pv/pv_aggregated.json"
DEFAULT_DIASPORA_API_URL = "https://prezenta.roaep.ro/prezidentiale04052025/data/json/sicpv/pv/pv_aggregated_sr.json"

# Nested config file keys and the setting each one fills.
_NESTED_CONFIG_KEYS = {
    "apiUrls": {"romania": "romania_api_url", "diaspora": "diaspora_api_url"},
    "server": {"port": "port", "cacheTtl": "cache_ttl"},
}


def flatten_config_file(data: dict[str, Any], known_fields: set[str]) -> tuple[dict[str, Any], list[str]]:
    """Map a config file onto flat setting names.

    Flat keys win over their nested equivalents. ``server.cacheTtl`` is
    converted from milliseconds to seconds.

    Args:
        data: Parsed config file.
        known_fields: Setting names accepted as flat keys.

    Returns:
        The flat settings and the dotted names of keys that match no setting.

    Raises:
        ValueError: If a nested section is not an object.
    """
    flat = {key: value for key, value in data.items() if key not in _NESTED_CONFIG_KEYS}
    unknown = sorted(key for key in flat if key not in known_fields)

    for section, mapping in _NESTED_CONFIG_KEYS.items():
        values = data.get(section, {})
        if not isinstance(values, dict):
            msg = f"config file section '{section}' must be an object"
            raise ValueError(msg)
        for key, value in values.items():
            name = mapping.get(key)
            if name is None:
                unknown.append(f"{section}.{key}")
                continue
            if name == "cache_ttl" and isinstance(value, int | float):
                value = round(value / 1000)
            flat.setdefault(name, value)
    return flat, unknown


class ConfigFileSource(JsonConfigSettingsSource):
    """JSON config file source that also accepts the nested ``apiUrls``/``server`` layout."""

    def __init__(self, settings_cls: type[BaseSettings], json_file: str) -> None:
        self._known_fields = set(settings_cls.model_fields)
        super().__init__(settings_cls, json_file=json_file)

    def _read_file(self, file_path: Path) -> dict[str, Any]:
        data = super()._read_file(file_path)
        if not isinstance(data, dict):
            msg = f"config file {file_path} must contain a JSON object"
            raise ValueError(msg)
        flat, unknown = flatten_config_file(data, self._known_fields)
        if unknown:
            logger.warning("Ignoring unknown keys in {}: {}", file_path, ", ".join(unknown))
        return flat


class Settings(BaseSettings):
    """Application settings loaded from environment variables and an optional JSON file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Upstream feeds
    romania_api_url: str = Field(
        default=DEFAULT_ROMANIA_API_URL,
        description="Feed URL for the national (Romania) results",
    )
    diaspora_api_url: str = Field(
        default=DEFAULT_DIASPORA_API_URL,
        description="Feed URL for the diaspora results",
    )

    @field_validator("romania_api_url", "diaspora_api_url")
    @classmethod
    def validate_feed_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            msg = "feed URLs must use http or https"
            raise ValueError(msg)
        return v

    # Fetching
    fetcher_backend: Literal["browser", "http"] = Field(
        default="browser",
        description="How raw feed documents are retrieved: headless browser or direct HTTP",
    )
    fetch_timeout: float = Field(
        default=15.0,
        description="Seconds allowed for navigation and for the JSON response",
        gt=0,
    )
    fetch_coalescing: bool = Field(
        default=True,
        description="Share one in-flight fetch between concurrent cache misses for the same URL",
    )
    browser_headless: bool = Field(
        default=True,
        description="Run the headless browser without a window",
    )

    # Caching
    cache_ttl: int = Field(
        default=20,
        description="Derived candidate list cache TTL in seconds",
        ge=0,
    )
    raw_cache_ttl: int = Field(
        default=30,
        description="Raw upstream document cache TTL in seconds",
        ge=0,
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Bind host")  # noqa: S104
    port: int = Field(default=3001, description="Listen port", gt=0, lt=65536)
    api_prefix: str = Field(default="/api", description="Route prefix for all endpoints")

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: str | None = Field(
        default=None,
        description="Directory for log files (enables file logging with 24h rotation when set)",
    )
    log_json: bool = Field(
        default=False,
        description="Emit JSON log records on stderr",
    )

    # CORS
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins",
    )

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse CORS origins string into a list."""
        if not self.cors_origins.strip():
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # Dashboard
    dashboard_poll_interval: int = Field(
        default=20,
        description="Seconds between dashboard polls",
        gt=0,
    )
    registered_voters_romania: int = Field(
        default=8416686,
        description="Registered voters in Romania, for the remaining-votes figure",
        ge=0,
    )
    registered_voters_diaspora: int = Field(
        default=3127125,
        description="Registered diaspora voters, for the remaining-votes figure",
        ge=0,
    )

    @property
    def registered_voters_total(self) -> int:
        """Registered voters across both electorates."""
        return self.registered_voters_romania + self.registered_voters_diaspora

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        config_file = os.environ.get("CONFIG_FILE", "config.json")
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            ConfigFileSource(settings_cls, json_file=config_file),
            file_secret_settings,
        )


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()
