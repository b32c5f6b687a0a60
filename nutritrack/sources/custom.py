"""User-created custom foods."""

from __future__ import annotations

import time

from ..models import CUSTOM, FoodRecord
from ..nutrition.units import normalize_unit

CUSTOM_PREFIX = "custom-"


def is_custom_id(source_id: str) -> bool:
    return str(source_id).startswith(CUSTOM_PREFIX)


def make_custom_food(
    name: str,
    *,
    calories: float = 0.0,
    protein: float = 0.0,
    carbs: float = 0.0,
    fat: float = 0.0,
    fiber: float = 0.0,
    serving_size: float = 1.0,
    serving_unit: str = "serving",
    brand_name: str | None = None,
    source_id: str | None = None,
) -> FoodRecord:
    """Build a custom FoodRecord with a ``custom-<ms timestamp>`` id.

    Raises:
        ValueError: If the name is blank, the serving size is not positive
            or a nutrient is negative.
    """
    name = name.strip()
    if not name:
        raise ValueError("Custom food needs a name")
    if serving_size <= 0:
        raise ValueError(f"Serving size must be positive, got {serving_size!r}")
    for label, value in (
        ("calories", calories),
        ("protein", protein),
        ("carbs", carbs),
        ("fat", fat),
        ("fiber", fiber),
    ):
        if value < 0:
            raise ValueError(f"{label} cannot be negative ({value!r})")

    return FoodRecord(
        source_id=source_id or f"{CUSTOM_PREFIX}{int(time.time() * 1000)}",
        name=name,
        brand_name=brand_name or None,
        calories=float(calories),
        protein=float(protein),
        carbs=float(carbs),
        fat=float(fat),
        fiber=float(fiber),
        serving_size=float(serving_size),
        serving_unit=normalize_unit(serving_unit) or "serving",
        data_type=CUSTOM,
    )
