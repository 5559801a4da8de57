"""Construcción de entradas de estado de bomba y de glucosa del sensor."""

from __future__ import annotations

import logging
from dataclasses import replace

from carelink_tool.model import (
    PUMP_STATUS_FIELDS,
    CareLinkSnapshot,
    PumpStatusEntry,
    SensorGlucoseEntry,
    Trend,
)
from carelink_tool.pump_time import (
    MalformedTimestampError,
    PumpOffsetGuesser,
    resolve_pump_local_time,
    to_epoch_ms,
)

logger = logging.getLogger(__name__)

STALE_DATA_THRESHOLD_MINUTES = 20


def recency_minutes(snapshot: CareLinkSnapshot) -> float:
    """Minutes between the last pump contact and the server clock."""
    return (
        snapshot.current_server_time
        - snapshot.last_medical_device_data_update_server_time
    ) / (60 * 1000)


def is_stale(snapshot: CareLinkSnapshot) -> bool:
    """True when the pump has not reported for more than the threshold."""
    recency = recency_minutes(snapshot)
    if recency > STALE_DATA_THRESHOLD_MINUTES:
        logger.info("Stale CareLink data: %.2f minutes old", recency)
        return True
    return False


def pump_status_entry(snapshot: CareLinkSnapshot) -> PumpStatusEntry:
    """Project the whitelisted status fields of a snapshot.

    Fields missing on the snapshot stay None. ``iob`` is only set for a
    non-negative ``activeInsulin.amount``.
    """
    status = {attr: getattr(snapshot, attr) for _, attr in PUMP_STATUS_FIELDS}
    amount = snapshot.active_insulin_amount
    return PumpStatusEntry(
        date=snapshot.last_medical_device_data_update_server_time,
        iob=amount if amount is not None and amount >= 0 else None,
        **status,
    )


def sgv_entries(
    snapshot: CareLinkSnapshot, guesser: PumpOffsetGuesser
) -> list[SensorGlucoseEntry]:
    """Convert ``sgs`` into absolutely-timestamped glucose entries.

    Readings are assumed to be ordered by time ascending; they are not sorted.

    Args:
        snapshot: Snapshot to read.
        guesser: Offset guesser shared across polls.

    Returns:
        Entries for every valid reading; the last one carries the trend when
        the freshest raw reading is not a sentinel.
    """
    if not snapshot.sgs:
        return []

    try:
        offset = guesser.guess(snapshot)
    except MalformedTimestampError as exc:
        logger.warning("Cannot guess pump timezone, skipping SGVs: %s", exc)
        return []

    out: list[SensorGlucoseEntry] = []
    # True once the latest valid reading has been dropped for a bad datetime.
    tail_dropped = False
    for reading in snapshot.sgs:
        if not reading.is_valid:
            continue
        try:
            ts = resolve_pump_local_time(reading.datetime, offset)
        except MalformedTimestampError as exc:
            logger.warning("Skipping SGV %s: %s", reading.sg, exc)
            tail_dropped = True
            continue
        out.append(SensorGlucoseEntry(sgv=reading.sg, date=to_epoch_ms(ts)))
        tail_dropped = False

    if out and not tail_dropped and snapshot.sgs[-1].sg != 0:
        trend = Trend.from_carelink(snapshot.last_sg_trend)
        if trend is None:
            logger.debug("No trend mapping for %r", snapshot.last_sg_trend)
        else:
            out[-1] = replace(out[-1], trend=trend)

    return out
