"""Lectura de snapshots JSON de CareLink Connect guardados en disco."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from carelink_tool.model import CareLinkSnapshot
from carelink_tool.sources.base import DataSource, SourcePaths


@dataclass(frozen=True)
class CareLinkPaths(SourcePaths):
    """Paths for saved CareLink snapshots."""

    # root: folder containing carelink_*.json


class CareLinkSource(DataSource):
    """CareLink Connect snapshot source."""

    pattern = "carelink_*.json"

    def load_snapshot(self, path: Path) -> CareLinkSnapshot:
        """Parse a saved CareLink response into a typed snapshot.

        Args:
            path: Path to JSON file.

        Returns:
            Snapshot ready for :func:`carelink_tool.transform.transform`.

        Raises:
            ValueError: If the JSON is not an object or lacks required fields.
        """
        text = path.read_text(encoding="utf-8")
        raw = _extract_json_object(text)
        if not isinstance(raw, dict):
            raise ValueError("CareLink JSON must be an object")
        return CareLinkSnapshot.from_json(raw)


def _extract_json_object(text: str) -> Any:
    """Extract JSON object from text, tolerating leading non-JSON (e.g. log lines)."""
    start = text.find("{")
    if start >= 0:
        return json.loads(text[start:])
    return json.loads(text)
