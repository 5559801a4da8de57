from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

# 2023-01-01T10:05:00Z
SERVER_TIME_MS = 1672567500000


def make_snapshot_json(**overrides: Any) -> dict[str, Any]:
    """CareLink response of a pump at UTC-5 that reported 83 seconds ago."""
    data: dict[str, Any] = {
        "currentServerTime": SERVER_TIME_MS,
        "lastMedicalDeviceDataUpdateServerTime": SERVER_TIME_MS - 83_000,
        "sMedicalDeviceTime": "Jan 1, 2023 05:05:00",
        "medicalDeviceFamily": "Paradigm",
        "lastSGTrend": "UP",
        "conduitInRange": True,
        "conduitBatteryLevel": 86,
        "reservoirAmount": 54.5,
        "sensorState": "NORMAL",
        "activeInsulin": {"amount": 1.35, "datetime": "Jan 1, 2023 05:04:00"},
        "sgs": [
            {"kind": "SG", "sg": 110, "datetime": "Jan 1, 2023 04:50:00"},
            {"kind": "SG", "sg": 115, "datetime": "Jan 1, 2023 04:55:00"},
            {"kind": "SG", "sg": 120, "datetime": "Jan 1, 2023 05:00:00"},
        ],
    }
    data.update(overrides)
    return data


@pytest.fixture
def snapshot_json() -> Callable[..., dict[str, Any]]:
    return make_snapshot_json
