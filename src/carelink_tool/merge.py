"""Mezcla profunda de diccionarios."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any


def deep_merge(
    destination: Mapping[str, Any], source: Mapping[str, Any] | None
) -> dict[str, Any]:
    """Overlay ``source`` onto a copy of ``destination``.

    Nested mappings are merged recursively; any other value in ``source``
    replaces the one in ``destination``. Neither argument is mutated.

    Args:
        destination: Base mapping.
        source: Mapping to overlay, or None (no-op).

    Returns:
        A new dict with the merged fields.
    """
    merged = copy.deepcopy(dict(destination))
    if source is None:
        return merged
    for key, value in source.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged
