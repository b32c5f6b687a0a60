"""Shared helpers for food source payloads."""

from __future__ import annotations

from typing import Any


class SourceError(ValueError):
    """A food source payload does not have the expected shape."""


def to_float(value: Any, default: float = 0.0) -> float:
    """Coerce a payload number (possibly a string or None) to float."""
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default
