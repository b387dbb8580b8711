"""Pure functions that turn alert events into JSON request bodies."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, BinaryIO

from pydantic import BaseModel
from pydantic_core import PydanticSerializationError

from src.alertpost.exceptions import SerializationError
from src.alertpost.types import AlertData, AlertEvent


def alert_data_from_event(event: AlertEvent) -> AlertData:
    """Copy an event's state and computed result into a wire payload.

    No validation happens here; unrepresentable ``data`` surfaces later
    from :func:`encode_alert_data`.
    """
    state = event.state
    return AlertData.model_construct(
        id=state.id,
        message=state.message,
        details=state.details,
        time=state.time,
        duration=state.duration,
        level=state.level,
        data=event.data.result,
    )


def _check_finite(value: Any) -> None:
    # JSON has no NaN or Infinity; pydantic would quietly write null instead.
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"unsupported value: {value!r}")
    elif isinstance(value, BaseModel):
        _check_finite(value.model_dump())
    elif isinstance(value, Mapping):
        for item in value.values():
            _check_finite(item)
    elif isinstance(value, (list, tuple, set, frozenset)):
        for item in value:
            _check_finite(item)


def encode_alert_data(data: AlertData, buf: BinaryIO) -> None:
    """Write *data* as JSON into *buf*.

    Raises:
        SerializationError: The payload holds a value JSON cannot represent,
            including NaN or infinite floats. Nothing is written to *buf*
            in that case.
    """
    try:
        _check_finite(data.data)
        body = data.model_dump_json().encode("utf-8")
    except (PydanticSerializationError, ValueError, TypeError) as exc:
        raise SerializationError(f"failed to marshal alert data json: {exc}") from exc
    buf.write(body)
    buf.write(b"\n")
