"""Tests for alert formatters: event normalisation and JSON encoding."""

from __future__ import annotations

import io
import json
from datetime import datetime, timedelta, timezone

import pytest

from src.alertpost.exceptions import SerializationError
from src.alertpost.formatters import alert_data_from_event, encode_alert_data
from src.alertpost.types import AlertEvent, AlertState, EventData, Level


# ── Helpers ─────────────────────────────────────────────────────


def _event(result: object = None, **kw: object) -> AlertEvent:
    defaults: dict[str, object] = {
        "id": "cpu:host=a",
        "message": "cpu is high",
        "details": "<b>cpu</b> at 97%",
        "time": datetime(2024, 5, 1, 8, 0, tzinfo=timezone.utc),
        "duration": timedelta(seconds=90),
        "level": Level.WARNING,
    }
    defaults.update(kw)
    return AlertEvent(
        state=AlertState(**defaults),  # type: ignore[arg-type]
        data=EventData(name="cpu", result=result),
    )


# ── alert_data_from_event ───────────────────────────────────────


class TestAlertDataFromEvent:
    def test_copies_state(self) -> None:
        ev = _event()
        data = alert_data_from_event(ev)
        assert data.id == "cpu:host=a"
        assert data.message == "cpu is high"
        assert data.details == "<b>cpu</b> at 97%"
        assert data.time == ev.state.time
        assert data.duration == timedelta(seconds=90)
        assert data.level is Level.WARNING

    def test_copies_result_unchanged(self) -> None:
        result = {"series": [{"name": "cpu", "values": [[1, 97.0]]}]}
        data = alert_data_from_event(_event(result=result))
        assert data.data is result

    def test_empty_event(self) -> None:
        data = alert_data_from_event(AlertEvent())
        assert data.id == ""
        assert data.level is Level.OK
        assert data.data is None


# ── encode_alert_data ───────────────────────────────────────────


class TestEncodeAlertData:
    def test_writes_json_object(self) -> None:
        buf = io.BytesIO()
        encode_alert_data(alert_data_from_event(_event(result={"x": 1})), buf)
        payload = json.loads(buf.getvalue())
        assert payload["id"] == "cpu:host=a"
        assert payload["level"] == "WARNING"
        assert payload["duration"] == 90_000_000_000
        assert payload["time"] == "2024-05-01T08:00:00Z"
        assert payload["data"] == {"x": 1}

    def test_unserializable_data_raises(self) -> None:
        buf = io.BytesIO()
        data = alert_data_from_event(_event(result={"x": object()}))
        with pytest.raises(SerializationError):
            encode_alert_data(data, buf)

    def test_nothing_written_on_failure(self) -> None:
        buf = io.BytesIO()
        data = alert_data_from_event(_event(result=object()))
        with pytest.raises(SerializationError):
            encode_alert_data(data, buf)
        assert buf.getvalue() == b""

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_float_raises(self, value: float) -> None:
        buf = io.BytesIO()
        data = alert_data_from_event(_event(result={"series": [{"values": [[1, value]]}]}))
        with pytest.raises(SerializationError):
            encode_alert_data(data, buf)
        assert buf.getvalue() == b""

    def test_finite_floats_kept(self) -> None:
        buf = io.BytesIO()
        encode_alert_data(alert_data_from_event(_event(result={"x": 97.5})), buf)
        assert json.loads(buf.getvalue())["data"] == {"x": 97.5}
