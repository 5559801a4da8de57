"""Punto de entrada de ``python -m carelink_tool``."""

from __future__ import annotations

from carelink_tool.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
