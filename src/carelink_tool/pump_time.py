"""Inferencia de la zona horaria de la bomba y conversión de horas locales."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from dateutil import parser, tz

if TYPE_CHECKING:
    from carelink_tool.model import CareLinkSnapshot

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=tz.UTC)
_MS_PER_HOUR = 60 * 60 * 1000


class MalformedTimestampError(ValueError):
    """Raised when a pump-local time string cannot be parsed."""


def to_epoch_ms(dt: datetime) -> int:
    """Convert an aware datetime to epoch milliseconds."""
    return (dt - _EPOCH) // timedelta(milliseconds=1)


def iso_string(epoch_ms: int) -> str:
    """Render epoch milliseconds as ISO-8601 UTC, e.g. ``2023-01-01T10:00:00.000Z``."""
    dt = _EPOCH + timedelta(milliseconds=epoch_ms)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def _parse(text: str | None) -> datetime:
    if not isinstance(text, str) or not text.strip():
        raise MalformedTimestampError(f"Missing pump time: {text!r}")
    try:
        return parser.parse(text)
    except (ValueError, OverflowError) as exc:
        raise MalformedTimestampError(f"Unparseable pump time: {text!r}") from exc


def resolve_pump_local_time(local_time: str | None, offset: str) -> datetime:
    """Resolve a pump-local time string to an absolute timestamp.

    Args:
        local_time: Pump clock rendering without timezone
            (e.g. ``"2023-01-01 10:00:00"``).
        offset: Signed offset as produced by :class:`PumpOffsetGuesser`
            (e.g. ``"+0500"``).

    Returns:
        Timezone-aware datetime.

    Raises:
        MalformedTimestampError: If the string cannot be parsed.
    """
    if not isinstance(local_time, str) or not local_time.strip():
        raise MalformedTimestampError(f"Missing pump time: {local_time!r}")
    dt = _parse(f"{local_time} {offset}")
    try:
        applied = dt.utcoffset()
    except ValueError as exc:
        raise MalformedTimestampError(f"Invalid offset: {offset}") from exc
    if applied is None:
        raise MalformedTimestampError(f"Offset not applied: {local_time!r} {offset}")
    return dt


def format_offset(hours: int) -> str:
    """Render whole hours as ``+HH00`` / ``-HH00``."""
    sign = "+" if hours >= 0 else "-"
    return f"{sign}{abs(hours):02d}00"


@dataclass
class PumpOffsetGuesser:
    """Guess the pump's UTC offset from its clock and the server clock.

    ``sMedicalDeviceTime`` is advanced by the server even when the pump is
    not reporting, so its difference from server time stays close to a whole
    number of hours. ``last_guess`` is only used to avoid repeating the log
    line on every poll.
    """

    last_guess: str | None = None

    def guess(self, snapshot: CareLinkSnapshot) -> str:
        """Return the inferred offset for ``snapshot``.

        Raises:
            MalformedTimestampError: If ``sMedicalDeviceTime`` cannot be parsed.
        """
        pump_time = _parse(snapshot.s_medical_device_time)
        pump_as_utc = to_epoch_ms(pump_time.replace(tzinfo=tz.UTC))
        # round() rounds half to even; exact half-hour ties are not expected.
        hours = round((pump_as_utc - snapshot.current_server_time) / _MS_PER_HOUR)
        if abs(hours) >= 24:
            raise MalformedTimestampError(
                f"Pump clock {hours:+d}h from server time: "
                f"{snapshot.s_medical_device_time!r}"
            )
        offset = format_offset(hours)
        if offset != self.last_guess:
            server_time = datetime.fromtimestamp(
                snapshot.current_server_time / 1000, tz=tz.tzlocal()
            )
            logger.info(
                'Guessed pump timezone %s (pump time: "%s"; server time: %s)',
                offset,
                snapshot.s_medical_device_time,
                server_time.strftime("%a %b %d %Y %H:%M:%S %Z%z"),
            )
        self.last_guess = offset
        return offset
