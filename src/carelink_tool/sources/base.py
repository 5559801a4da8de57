"""Clases base para fuentes de snapshots guardados."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from carelink_tool.model import CareLinkSnapshot


@dataclass(frozen=True)
class SourcePaths:
    """Directory holding saved snapshots."""

    root: Path


class DataSource(ABC):
    """Snapshot source backed by a directory of exports."""

    pattern = "*.json"

    def __init__(self, paths: SourcePaths) -> None:
        self._paths = paths

    def validate(self) -> None:
        """Validate that the snapshot directory exists.

        Raises:
            FileNotFoundError: If the root directory is missing.
        """
        if not self._paths.root.exists():
            raise FileNotFoundError(str(self._paths.root))

    def newest_json(self) -> Path:
        """Return the newest file matching ``pattern`` by mtime."""
        files = sorted(
            self._paths.root.glob(self.pattern),
            key=lambda p: p.stat().st_mtime,
            reverse=True,
        )
        if not files:
            raise FileNotFoundError(f"No {self.pattern} in {self._paths.root}")
        return files[0]

    @abstractmethod
    def load_snapshot(self, path: Path) -> CareLinkSnapshot:
        """Parse one saved export into a snapshot."""
