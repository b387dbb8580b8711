"""Exception hierarchy for alert POST delivery."""

from __future__ import annotations


class AlertPostError(Exception):
    """Base exception for all alert POST errors."""


class ConfigTypeMismatchError(AlertPostError):
    """An endpoint configuration update contained an invalid element."""


class DuplicateEndpointError(ConfigTypeMismatchError):
    """Two endpoint records in one update share a name."""


class SerializationError(AlertPostError):
    """The alert payload could not be encoded as JSON."""


class EndpointNotFoundError(AlertPostError):
    """No endpoint is registered under the requested name."""

    def __init__(self, endpoint: str) -> None:
        super().__init__(f"endpoint does not exist: {endpoint!r}")
        self.endpoint = endpoint


class RequestConstructionError(AlertPostError):
    """The destination URL is malformed or the request could not be built."""


class TransportFailureError(AlertPostError):
    """The HTTP round trip failed before a response was received."""
