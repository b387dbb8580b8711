"""Per-destination alert handler: one JSON POST per alert."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

import structlog

from src.alertpost.bufpool import BufferPool
from src.alertpost.exceptions import (
    AlertPostError,
    EndpointNotFoundError,
    SerializationError,
)
from src.alertpost.formatters import alert_data_from_event, encode_alert_data
from src.alertpost.types import AlertEvent
from src.core.config import HandlerConfig

if TYPE_CHECKING:
    from src.alertpost.service import AlertPostService

logger = structlog.get_logger(__name__)


class AlertPostHandler:
    """Delivers alerts to a fixed URL or to a named endpoint.

    - A non-empty fixed URL always wins; the registry is never consulted
      and no endpoint headers are sent.
    - Otherwise the endpoint is looked up on every delivery, so registry
      reloads take effect on the next alert.
    - Failures are terminal for the alert: logged, never retried.
    """

    def __init__(
        self,
        service: AlertPostService,
        config: HandlerConfig,
        pool: BufferPool | None = None,
    ) -> None:
        self._service = service
        self._url = config.url
        self._endpoint = config.endpoint
        self._pool = pool or BufferPool()

    @property
    def url(self) -> str:
        return self._url

    @property
    def endpoint(self) -> str:
        return self._endpoint

    # ── Delivery ────────────────────────────────────────────────

    def handle(self, event: AlertEvent) -> None:
        """Deliver *event*, logging and dropping it on any failure."""
        try:
            self.deliver(event)
        except SerializationError:
            logger.exception("alertpost_marshal_failed", alert_id=event.state.id)
        except EndpointNotFoundError as exc:
            logger.error(
                "alertpost_endpoint_not_found",
                alert_id=event.state.id,
                endpoint=exc.endpoint,
            )
        except AlertPostError as exc:
            logger.error(
                "alertpost_delivery_failed",
                alert_id=event.state.id,
                error_type=type(exc).__name__,
                error=str(exc),
                url=self._url,
                endpoint=self._endpoint,
            )

    def deliver(self, event: AlertEvent) -> None:
        """Deliver *event*, raising on failure.

        Raises:
            SerializationError: The payload cannot be encoded.
            EndpointNotFoundError: The bound endpoint is not registered.
            RequestConstructionError: The resolved URL is unusable.
            TransportFailureError: The HTTP round trip failed.
        """
        with self._pool.borrow() as body:
            encode_alert_data(alert_data_from_event(event), body)

            if self._url:
                url, headers = self._url, {}
            else:
                record = self._service.endpoint(self._endpoint)
                if record is None:
                    raise EndpointNotFoundError(self._endpoint)
                url, headers = record.url, record.headers

            self._service.post(url, headers, body.getvalue())

        logger.debug(
            "alertpost_delivered",
            alert_id=event.state.id,
            level=event.state.level.name,
            url=url,
        )

    def dispatch(self, event: AlertEvent) -> threading.Thread:
        """Run :meth:`handle` on a dedicated daemon thread and return it."""
        thread = threading.Thread(
            target=self.handle,
            args=(event,),
            name=f"alertpost-{event.state.id or 'alert'}",
            daemon=True,
        )
        thread.start()
        return thread
