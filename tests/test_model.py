from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from carelink_tool.model import (
    CareLinkSnapshot,
    MalformedSnapshotError,
    PumpStatusEntry,
    SensorGlucoseEntry,
    SgReading,
    Trend,
)

SnapshotJson = Callable[..., dict[str, Any]]


@pytest.mark.parametrize(
    ("key", "code", "direction"),
    [
        ("NONE", 0, "NONE"),
        ("UP_DOUBLE", 1, "DoubleUp"),
        ("UP", 2, "SingleUp"),
        ("DOWN", 6, "SingleDown"),
        ("DOWN_DOUBLE", 7, "DoubleDown"),
    ],
)
def test_trend_vocabulary(key: str, code: int, direction: str) -> None:
    trend = Trend.from_carelink(key)
    assert trend is not None
    assert trend.as_json() == {"trend": code, "direction": direction}


@pytest.mark.parametrize("key", [None, "", "UP_TRIPLE", "up"])
def test_trend_unknown_keys(key: str | None) -> None:
    assert Trend.from_carelink(key) is None


def test_sg_reading_validity() -> None:
    assert SgReading(kind="SG", sg=100, datetime="x").is_valid
    assert not SgReading(kind="SG", sg=0, datetime="x").is_valid
    assert not SgReading(kind="Calibration", sg=100, datetime="x").is_valid


def test_snapshot_from_json(snapshot_json: SnapshotJson) -> None:
    snap = CareLinkSnapshot.from_json(snapshot_json())
    assert snap.medical_device_family == "Paradigm"
    assert snap.sgs is not None
    assert snap.sgs[0] == SgReading(kind="SG", sg=110, datetime="Jan 1, 2023 04:50:00")
    assert snap.conduit_in_range is True
    assert snap.reservoir_level_percent is None
    assert snap.active_insulin_amount == 1.35


def test_snapshot_from_json_absent_sgs_is_none(snapshot_json: SnapshotJson) -> None:
    data = snapshot_json()
    del data["sgs"]
    assert CareLinkSnapshot.from_json(data).sgs is None


def test_snapshot_from_json_null_fields_are_absent(snapshot_json: SnapshotJson) -> None:
    snap = CareLinkSnapshot.from_json(
        snapshot_json(sensorState=None, activeInsulin=None)
    )
    assert snap.sensor_state is None
    assert snap.active_insulin_amount is None


@pytest.mark.parametrize(
    "key",
    ["currentServerTime", "lastMedicalDeviceDataUpdateServerTime", "medicalDeviceFamily"],
)
def test_snapshot_from_json_missing_required(
    snapshot_json: SnapshotJson, key: str
) -> None:
    data = snapshot_json()
    del data[key]
    with pytest.raises(MalformedSnapshotError, match=key):
        CareLinkSnapshot.from_json(data)


def test_pump_status_entry_minimal_json() -> None:
    entry = PumpStatusEntry(date=0, device="connect://paradigm")
    assert entry.to_json() == {
        "type": "pump_status",
        "date": 0,
        "dateString": "1970-01-01T00:00:00.000Z",
        "device": "connect://paradigm",
    }


def test_sensor_glucose_entry_json_with_trend() -> None:
    entry = SensorGlucoseEntry(sgv=98, date=1672567200000, trend=Trend.DOWN)
    assert entry.to_json() == {
        "type": "sgv",
        "sgv": 98,
        "date": 1672567200000,
        "dateString": "2023-01-01T10:00:00.000Z",
        "trend": 6,
        "direction": "SingleDown",
    }
