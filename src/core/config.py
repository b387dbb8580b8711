"""Pydantic settings loaded from YAML configuration."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)

_settings: Settings | None = None

DEFAULT_CONFIG_PATH = Path("config/settings.yaml")


class EndpointConfig(BaseModel):
    """A named HTTP destination for alert delivery.

    Frozen once built, headers included: the registry replaces records
    wholesale, it never edits one in place.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(validation_alias=AliasChoices("name", "endpoint"))
    url: str = Field(min_length=1)
    headers: Mapping[str, str] = Field(default_factory=dict, validate_default=True)

    @field_validator("headers")
    @classmethod
    def _read_only_headers(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    @field_serializer("headers")
    def _headers_dict(self, value: Mapping[str, str]) -> dict[str, str]:
        return dict(value)


class HandlerConfig(BaseModel):
    """Per-handler destination binding. ``url`` wins over ``endpoint``."""

    url: str = ""
    endpoint: str = ""


class AlertPostConfig(BaseModel):
    """Alert POST service configuration."""

    # None disables the HTTP timeout entirely.
    timeout_secs: float | None = None
    endpoints: list[EndpointConfig] = Field(default_factory=list)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "json"


class Settings(BaseModel):
    """Root settings container."""

    alertpost: AlertPostConfig = AlertPostConfig()
    logging: LoggingConfig = LoggingConfig()


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from a YAML file and cache globally.

    Args:
        path: Path to YAML config. Defaults to config/settings.yaml.

    Returns:
        Parsed Settings instance.
    """
    global _settings  # noqa: PLW0603

    config_path = Path(path) if path else DEFAULT_CONFIG_PATH

    data: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f)
            if isinstance(raw, dict):
                data = raw

    _settings = Settings(**data)
    return _settings


def get_settings() -> Settings:
    """Return the cached settings, loading defaults if not yet loaded."""
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Reset the cached settings (useful for testing)."""
    global _settings  # noqa: PLW0603
    _settings = None
