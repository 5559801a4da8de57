"""Modelos tipados para snapshots de CareLink y entradas estilo Nightscout."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from carelink_tool.merge import deep_merge
from carelink_tool.pump_time import iso_string

PUMP_STATUS_ENTRY_TYPE = "pump_status"
SENSOR_GLUCOSE_ENTRY_TYPE = "sgv"

# (clave JSON, atributo) de los campos de estado copiados a la entrada.
PUMP_STATUS_FIELDS: tuple[tuple[str, str], ...] = (
    # booleans
    ("conduitInRange", "conduit_in_range"),
    ("conduitMedicalDeviceInRange", "conduit_medical_device_in_range"),
    ("conduitSensorInRange", "conduit_sensor_in_range"),
    ("medicalDeviceSuspended", "medical_device_suspended"),
    # numbers
    ("conduitBatteryLevel", "conduit_battery_level"),
    ("reservoirLevelPercent", "reservoir_level_percent"),
    ("reservoirAmount", "reservoir_amount"),
    ("medicalDeviceBatteryLevelPercent", "medical_device_battery_level_percent"),
    ("sensorDurationHours", "sensor_duration_hours"),
    ("timeToNextCalibHours", "time_to_next_calib_hours"),
    # strings
    ("sensorState", "sensor_state"),
    ("calibStatus", "calib_status"),
)


class MalformedSnapshotError(ValueError):
    """Raised when a snapshot lacks the fields every transform needs."""


class Trend(Enum):
    """CareLink trend keys and their Nightscout (trend, direction) pair."""

    NONE = (0, "NONE")
    UP_DOUBLE = (1, "DoubleUp")
    UP = (2, "SingleUp")
    DOWN = (6, "SingleDown")
    DOWN_DOUBLE = (7, "DoubleDown")

    @property
    def code(self) -> int:
        return self.value[0]

    @property
    def direction(self) -> str:
        return self.value[1]

    @classmethod
    def from_carelink(cls, key: str | None) -> Trend | None:
        """Look up a ``lastSGTrend`` value; None when absent or unknown."""
        if key is None:
            return None
        try:
            return cls[key]
        except KeyError:
            return None

    def as_json(self) -> dict[str, Any]:
        return {"trend": self.code, "direction": self.direction}


@dataclass(frozen=True)
class SgReading:
    """One raw sensor reading as reported in ``sgs``."""

    kind: str | None
    sg: int | None
    datetime: str | None

    @property
    def is_valid(self) -> bool:
        """True for real glucose readings (``SG`` kind, non-sentinel value)."""
        return self.kind == "SG" and self.sg != 0

    @classmethod
    def from_json(cls, item: Mapping[str, Any]) -> SgReading:
        return cls(
            kind=item.get("kind"),
            sg=item.get("sg"),
            datetime=item.get("datetime"),
        )


@dataclass(frozen=True)
class CareLinkSnapshot:
    """One polling cycle of CareLink Connect pump telemetry."""

    current_server_time: int
    last_medical_device_data_update_server_time: int
    medical_device_family: str
    s_medical_device_time: str | None = None
    sgs: tuple[SgReading, ...] | None = None
    last_sg_trend: str | None = None
    conduit_in_range: bool | None = None
    conduit_medical_device_in_range: bool | None = None
    conduit_sensor_in_range: bool | None = None
    medical_device_suspended: bool | None = None
    conduit_battery_level: float | None = None
    reservoir_level_percent: float | None = None
    reservoir_amount: float | None = None
    medical_device_battery_level_percent: float | None = None
    sensor_duration_hours: float | None = None
    time_to_next_calib_hours: float | None = None
    sensor_state: str | None = None
    calib_status: str | None = None
    active_insulin_amount: float | None = None

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> CareLinkSnapshot:
        """Build a snapshot from the CareLink JSON document.

        Args:
            data: Decoded CareLink Connect response.

        Returns:
            Typed snapshot.

        Raises:
            MalformedSnapshotError: If server times or device family are missing.
        """
        for key in (
            "currentServerTime",
            "lastMedicalDeviceDataUpdateServerTime",
            "medicalDeviceFamily",
        ):
            if data.get(key) is None:
                raise MalformedSnapshotError(f"Missing {key}")

        raw_sgs = data.get("sgs")
        sgs = (
            tuple(SgReading.from_json(item) for item in raw_sgs)
            if raw_sgs is not None
            else None
        )

        active_insulin = data.get("activeInsulin")
        amount = (
            active_insulin.get("amount")
            if isinstance(active_insulin, Mapping)
            else None
        )

        status = {attr: data.get(key) for key, attr in PUMP_STATUS_FIELDS}
        return cls(
            current_server_time=int(data["currentServerTime"]),
            last_medical_device_data_update_server_time=int(
                data["lastMedicalDeviceDataUpdateServerTime"]
            ),
            medical_device_family=str(data["medicalDeviceFamily"]),
            s_medical_device_time=data.get("sMedicalDeviceTime"),
            sgs=sgs,
            last_sg_trend=data.get("lastSGTrend"),
            active_insulin_amount=amount,
            **status,
        )


@dataclass(frozen=True)
class PumpStatusEntry:
    """Device status entry; absent fields stay None and are not rendered."""

    date: int
    device: str | None = None
    conduit_in_range: bool | None = None
    conduit_medical_device_in_range: bool | None = None
    conduit_sensor_in_range: bool | None = None
    medical_device_suspended: bool | None = None
    conduit_battery_level: float | None = None
    reservoir_level_percent: float | None = None
    reservoir_amount: float | None = None
    medical_device_battery_level_percent: float | None = None
    sensor_duration_hours: float | None = None
    time_to_next_calib_hours: float | None = None
    sensor_state: str | None = None
    calib_status: str | None = None
    iob: float | None = None

    type = PUMP_STATUS_ENTRY_TYPE

    @property
    def date_string(self) -> str:
        return iso_string(self.date)

    def to_json(self) -> dict[str, Any]:
        """Render the Nightscout document, omitting absent fields."""
        doc: dict[str, Any] = {"type": self.type}
        for key, attr in PUMP_STATUS_FIELDS:
            value = getattr(self, attr)
            if value is not None:
                doc[key] = value
        if self.iob is not None:
            doc["iob"] = self.iob
        doc["date"] = self.date
        doc["dateString"] = self.date_string
        if self.device is not None:
            doc["device"] = self.device
        return doc


@dataclass(frozen=True)
class SensorGlucoseEntry:
    """One sensor glucose value, optionally annotated with the latest trend."""

    sgv: int
    date: int
    device: str | None = None
    trend: Trend | None = None

    type = SENSOR_GLUCOSE_ENTRY_TYPE

    @property
    def date_string(self) -> str:
        return iso_string(self.date)

    def to_json(self) -> dict[str, Any]:
        doc: dict[str, Any] = {
            "type": self.type,
            "sgv": self.sgv,
            "date": self.date,
            "dateString": self.date_string,
        }
        if self.device is not None:
            doc["device"] = self.device
        return deep_merge(doc, self.trend.as_json() if self.trend else None)


Entry = PumpStatusEntry | SensorGlucoseEntry
