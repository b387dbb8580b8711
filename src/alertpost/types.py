"""Domain types for alert delivery: events in, payloads out."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import IntEnum
from typing import Any

from pydantic import BaseModel, Field, field_serializer, field_validator

# Zero value for an alert that never fired (used by synthetic test alerts).
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

_NS_PER_SEC = 1_000_000_000


class Level(IntEnum):
    """Alert level, ordered so comparisons work naturally.

    Travels on the wire as its name (``"WARNING"``), not its number.
    """

    OK = 0
    INFO = 1
    WARNING = 2
    CRITICAL = 3


def duration_to_ns(value: timedelta) -> int:
    """Convert a timedelta to whole nanoseconds."""
    seconds = value.days * 86400 + value.seconds
    return seconds * _NS_PER_SEC + value.microseconds * 1000


def duration_from_ns(value: int) -> timedelta:
    """Convert nanoseconds to a timedelta, truncating below a microsecond."""
    seconds, ns = divmod(value, _NS_PER_SEC)
    return timedelta(seconds=seconds, microseconds=ns // 1000)


class _AlertFields(BaseModel):
    """Fields shared by an alert's state and its wire payload."""

    id: str = ""
    message: str = ""
    details: str = ""
    time: datetime = ZERO_TIME
    duration: timedelta = timedelta(0)
    level: Level = Level.OK

    @field_validator("level", mode="before")
    @classmethod
    def _level_from_name(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                return Level[value.upper()]
            except KeyError:
                raise ValueError(f"unknown alert level {value!r}") from None
        return value

    @field_validator("duration", mode="before")
    @classmethod
    def _duration_from_ns(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return duration_from_ns(value)
        return value

    @field_validator("time")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @field_serializer("level")
    def _level_name(self, value: Level) -> str:
        return value.name

    @field_serializer("duration")
    def _duration_ns(self, value: timedelta) -> int:
        return duration_to_ns(value)


class AlertState(_AlertFields):
    """Current state of one alert occurrence."""


class EventData(BaseModel):
    """Output of the computation that raised the alert."""

    name: str = ""
    tags: dict[str, str] = Field(default_factory=dict)
    # Opaque result payload, forwarded untouched.
    result: Any = None


class AlertEvent(BaseModel):
    """An alert occurrence handed to a handler."""

    state: AlertState = Field(default_factory=AlertState)
    data: EventData = Field(default_factory=EventData)


class AlertData(_AlertFields):
    """JSON body POSTed to an endpoint for one alert."""

    data: Any = None


class TestOptions(BaseModel):
    """Operator-supplied target for a one-off connectivity check."""

    __test__ = False

    endpoint: str = ""
    url: str = ""
    headers: dict[str, str] = Field(default_factory=dict)
