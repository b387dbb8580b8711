"""Convenience factory for wiring the alert POST service."""

from __future__ import annotations

from pathlib import Path

from src.alertpost.service import AlertPostService
from src.core.config import DEFAULT_CONFIG_PATH, AlertPostConfig, load_settings


def create_alertpost_service(config: AlertPostConfig) -> AlertPostService:
    """Build a service seeded with the configured endpoints."""
    return AlertPostService(
        endpoints=config.endpoints,
        timeout_secs=config.timeout_secs,
    )


def reload_endpoints(service: AlertPostService, path: str | Path | None = None) -> None:
    """Re-read the settings file and replace the service's endpoints.

    A missing file or one that fails validation raises before the
    registry is touched.

    Raises:
        FileNotFoundError: *path* does not exist.
    """
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH
    if not config_path.is_file():
        raise FileNotFoundError(f"settings file not found: {config_path}")
    settings = load_settings(config_path)
    service.update(settings.alertpost.endpoints)
