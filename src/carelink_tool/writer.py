"""Exportación de entradas a JSON (carga en Nightscout) y CSV."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path

import pandas as pd

from carelink_tool.model import Entry


def entries_to_frame(entries: Sequence[Entry]) -> pd.DataFrame:
    """One row per entry document, keeping output order.

    Columns appear in first-seen order; fields an entry does not carry are NaN.
    """
    return pd.DataFrame([e.to_json() for e in entries])


def write_entries_json(entries: Sequence[Entry], out_path: Path) -> None:
    """Write entries as a JSON array, the shape of an entries upload.

    Args:
        entries: Transformed entries.
        out_path: Output path for the JSON file.
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)
    docs = [e.to_json() for e in entries]
    out_path.write_text(json.dumps(docs, indent=2) + "\n", encoding="utf-8")


def write_entries_csv(entries: Sequence[Entry], out_path: Path) -> None:
    """Write entries as CSV for inspection."""
    out_path.parent.mkdir(parents=True, exist_ok=True)
    entries_to_frame(entries).to_csv(out_path, index=False)
