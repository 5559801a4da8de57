"""CLI para convertir un snapshot de CareLink en entradas de Nightscout."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from carelink_tool.config import BridgeConfig, parse_sgv_limit
from carelink_tool.sources.carelink import CareLinkPaths, CareLinkSource
from carelink_tool.transform import transform
from carelink_tool.writer import write_entries_csv, write_entries_json

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    parser = argparse.ArgumentParser(
        description="Convierte un snapshot de CareLink Connect en entradas de Nightscout."
    )
    parser.add_argument(
        "snapshot",
        nargs="?",
        default=None,
        help="Archivo JSON del snapshot (default: el carelink_*.json más nuevo).",
    )
    parser.add_argument(
        "--source-dir",
        default=str(Path.home() / "carelink"),
        help="Directorio con carelink_*.json (default: ~/carelink).",
    )
    parser.add_argument(
        "--sgv-limit",
        type=parse_sgv_limit,
        default=None,
        help="Cantidad máxima de SGVs recientes (default: $CARELINK_SGV_LIMIT o todas).",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Archivo de salida (.csv o .json); sin valor se imprime JSON.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Solo advertencias en el log (también $CARELINK_QUIET).",
    )
    return parser.parse_args()


def main() -> int:
    """Run the transform CLI.

    Returns:
        Exit code (0 on success).
    """
    ns = parse_args()
    config = BridgeConfig.from_env()
    sgv_limit = ns.sgv_limit if ns.sgv_limit is not None else config.sgv_limit
    verbose = config.verbose and not ns.quiet
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    src = CareLinkSource(CareLinkPaths(root=Path(ns.source_dir).expanduser()))
    if ns.snapshot is not None:
        snapshot_file = Path(ns.snapshot).expanduser()
    else:
        src.validate()
        snapshot_file = src.newest_json()
    snapshot = src.load_snapshot(snapshot_file)

    entries = transform(snapshot, sgv_limit=sgv_limit)
    logger.info("%d entries from %s", len(entries), snapshot_file)

    if ns.output is None:
        print(json.dumps([e.to_json() for e in entries], indent=2))
        return 0

    out_path = Path(ns.output).expanduser()
    if out_path.suffix.lower() == ".csv":
        write_entries_csv(entries, out_path)
    else:
        write_entries_json(entries, out_path)
    print(f"OK: Snapshot: {snapshot_file}")
    print(f"OK: Entries: {len(entries)}")
    print(f"OK: Output: {out_path}")
    return 0
