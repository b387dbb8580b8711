"""Alert POST service: endpoint registry, HTTP transport and test trigger."""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping

import httpx
import structlog
from pydantic import ValidationError

from src.alertpost.bufpool import BufferPool
from src.alertpost.dispatcher import AlertPostHandler
from src.alertpost.exceptions import (
    RequestConstructionError,
    TransportFailureError,
)
from src.alertpost.formatters import alert_data_from_event, encode_alert_data
from src.alertpost.registry import EndpointRegistry, parse_endpoint_configs
from src.alertpost.types import AlertEvent, TestOptions
from src.core.config import EndpointConfig, HandlerConfig

logger = structlog.get_logger(__name__)


class AlertPostService:
    """Owns the endpoint registry and the shared blocking HTTP client.

    Handlers created by :meth:`handler` read the registry at delivery time;
    :meth:`update` swaps the whole endpoint set atomically.
    """

    def __init__(
        self,
        endpoints: Iterable[EndpointConfig] = (),
        timeout_secs: float | None = None,
    ) -> None:
        self._registry = EndpointRegistry(endpoints)
        self._timeout = timeout_secs
        self._pool = BufferPool()
        self._client: httpx.Client | None = None
        self._client_lock = threading.Lock()

    @property
    def registry(self) -> EndpointRegistry:
        return self._registry

    # ── Lifecycle ───────────────────────────────────────────────

    def open(self) -> None:
        self._get_client()

    def close(self) -> None:
        with self._client_lock:
            client, self._client = self._client, None
        if client is not None and not client.is_closed:
            client.close()

    def _get_client(self) -> httpx.Client:
        with self._client_lock:
            if self._client is None or self._client.is_closed:
                self._client = httpx.Client(timeout=self._timeout)
            return self._client

    # ── Configuration ───────────────────────────────────────────

    def update(self, configs: Iterable[object]) -> None:
        """Replace every endpoint with *configs* (records or mappings).

        Raises:
            ConfigTypeMismatchError: Nothing is replaced.
        """
        self._registry.replace(parse_endpoint_configs(configs))

    def endpoint(self, name: str) -> EndpointConfig | None:
        return self._registry.lookup(name)

    def handler(self, config: HandlerConfig) -> AlertPostHandler:
        return AlertPostHandler(self, config, pool=self._pool)

    # ── Transport ───────────────────────────────────────────────

    def build_request(
        self, url: str, headers: Mapping[str, str], body: bytes
    ) -> httpx.Request:
        """Build the POST; endpoint headers are applied after Content-Type."""
        try:
            target = httpx.URL(url)
        except httpx.InvalidURL as exc:
            raise RequestConstructionError(f"invalid URL {url!r}: {exc}") from exc
        if target.scheme not in ("http", "https") or not target.host:
            raise RequestConstructionError(f"invalid URL {url!r}: need absolute http(s) URL")

        request_headers = httpx.Headers({"Content-Type": "application/json"})
        try:
            request_headers.update(headers)
            return self._get_client().build_request(
                "POST", target, content=body, headers=request_headers
            )
        except (httpx.HTTPError, ValueError, TypeError) as exc:
            raise RequestConstructionError(f"failed to create POST request: {exc}") from exc

    def post(self, url: str, headers: Mapping[str, str], body: bytes) -> None:
        """POST *body* to *url*. The response status is not inspected.

        Raises:
            RequestConstructionError: The URL or headers are unusable.
            TransportFailureError: No response was received.
        """
        request = self.build_request(url, headers, body)
        try:
            response = self._get_client().send(request)
        except httpx.HTTPError as exc:
            raise TransportFailureError(f"failed to POST alert data: {exc}") from exc
        except RuntimeError as exc:
            # httpx refuses to send once close() has run on another thread.
            raise TransportFailureError(f"failed to POST alert data: {exc}") from exc
        response.close()
        logger.debug("alertpost_response", url=url, status=response.status_code)

    # ── Operator test trigger ───────────────────────────────────

    def test(self, options: TestOptions) -> None:
        """POST an empty alert to the target in *options*, bypassing the registry.

        Raises:
            AlertPostError: Any delivery failure, synchronously.
        """
        try:
            record = EndpointConfig(
                name=options.endpoint, url=options.url, headers=options.headers
            )
        except ValidationError as exc:
            raise RequestConstructionError(
                f"invalid test target {options.url!r}: {exc}"
            ) from exc

        with self._pool.borrow() as body:
            encode_alert_data(alert_data_from_event(AlertEvent()), body)
            self.post(record.url, record.headers, body.getvalue())

        logger.info("alertpost_test_sent", endpoint=record.name, url=record.url)

    def test_options(self) -> TestOptions:
        """Example options shown to operators."""
        return TestOptions(
            endpoint="example",
            url="http://localhost:3000/",
            headers={"Auth": "secret"},
        )
