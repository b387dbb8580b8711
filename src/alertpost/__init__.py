"""Alert delivery over HTTP POST to named, hot-reloadable endpoints."""

from src.alertpost.bufpool import BufferPool
from src.alertpost.dispatcher import AlertPostHandler
from src.alertpost.exceptions import (
    AlertPostError,
    ConfigTypeMismatchError,
    DuplicateEndpointError,
    EndpointNotFoundError,
    RequestConstructionError,
    SerializationError,
    TransportFailureError,
)
from src.alertpost.factory import create_alertpost_service, reload_endpoints
from src.alertpost.formatters import alert_data_from_event, encode_alert_data
from src.alertpost.registry import EndpointRegistry, parse_endpoint_configs
from src.alertpost.service import AlertPostService
from src.alertpost.types import (
    AlertData,
    AlertEvent,
    AlertState,
    EventData,
    Level,
    TestOptions,
)

__all__ = [
    "AlertData",
    "AlertEvent",
    "AlertPostError",
    "AlertPostHandler",
    "AlertPostService",
    "AlertState",
    "BufferPool",
    "ConfigTypeMismatchError",
    "DuplicateEndpointError",
    "EndpointNotFoundError",
    "EndpointRegistry",
    "EventData",
    "Level",
    "RequestConstructionError",
    "SerializationError",
    "TestOptions",
    "TransportFailureError",
    "alert_data_from_event",
    "create_alertpost_service",
    "encode_alert_data",
    "parse_endpoint_configs",
    "reload_endpoints",
]
