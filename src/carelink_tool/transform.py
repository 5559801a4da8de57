"""Transformación de un snapshot de CareLink en entradas de Nightscout."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from carelink_tool.entries import is_stale, pump_status_entry, sgv_entries
from carelink_tool.model import CareLinkSnapshot, Entry
from carelink_tool.pump_time import PumpOffsetGuesser

DEVICE_PREFIX = "connect://"

_GUESSER = PumpOffsetGuesser()


def device_uri(snapshot: CareLinkSnapshot) -> str:
    """Device tag shared by every entry of one snapshot."""
    return DEVICE_PREFIX + snapshot.medical_device_family.lower()


def transform(
    snapshot: CareLinkSnapshot | Mapping[str, Any],
    sgv_limit: int | None = None,
    guesser: PumpOffsetGuesser | None = None,
) -> list[Entry]:
    """Convert one CareLink snapshot into Nightscout entries.

    Args:
        snapshot: Typed snapshot or the raw CareLink JSON mapping.
        sgv_limit: Keep only this many of the most recent SGV entries
            (None = all).
        guesser: Offset guesser; defaults to the process-wide one.

    Returns:
        ``[pump_status, *sgvs]``, or an empty list for stale data.

    Raises:
        ValueError: If ``sgv_limit`` is negative.
        MalformedSnapshotError: If a raw mapping lacks required fields.
    """
    if sgv_limit is not None and sgv_limit < 0:
        raise ValueError(f"sgv_limit must be non-negative, got {sgv_limit}")
    if not isinstance(snapshot, CareLinkSnapshot):
        snapshot = CareLinkSnapshot.from_json(snapshot)
    if guesser is None:
        guesser = _GUESSER

    if is_stale(snapshot):
        return []

    entries: list[Entry] = [pump_status_entry(snapshot)]

    # sgs are trusted to be ascending by date; the tail is the most recent.
    sgvs = sgv_entries(snapshot, guesser)
    if sgv_limit is not None:
        sgvs = sgvs[max(0, len(sgvs) - sgv_limit) :]
    entries.extend(sgvs)

    device = device_uri(snapshot)
    return [replace(entry, device=device) for entry in entries]
