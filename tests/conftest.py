"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

_PROXY_VARS = (
    "HTTP_PROXY",
    "HTTPS_PROXY",
    "ALL_PROXY",
    "http_proxy",
    "https_proxy",
    "all_proxy",
)


@pytest.fixture(autouse=True)
def _no_proxy_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep loopback traffic to the stub receiver off any ambient proxy."""
    for name in _PROXY_VARS:
        monkeypatch.delenv(name, raising=False)
