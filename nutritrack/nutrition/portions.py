"""Portion shortcuts, stepper increments and amount → servings conversion."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from ..models import FoodRecord, PortionPreset, Servings, food_field
from .units import convert_unit, is_volume_unit, is_weight_unit, normalize_unit

_SERVING_MULTIPLES = (("½", 0.5), ("1", 1.0), ("1.5", 1.5), ("2", 2.0))

_STEP_SIZES = MappingProxyType({
    "g": 10,
    "oz": 0.5,
    "lb": 0.25,
    "kg": 0.1,
    "ml": 25,
    "cup": 0.25,
    "tbsp": 0.5,
    "tsp": 0.5,
    "fl oz": 1,
    "l": 0.1,
})


def portion_presets(food: FoodRecord | Mapping[str, Any]) -> list[PortionPreset]:
    """Quick-pick portions for a food, based on its own serving.

    Multiples of the serving are always offered; weight foods also get
    4 oz and 100 g, volume foods 1 cup and ½ cup.
    """
    base_unit = food_field(food, "serving_unit", "g")
    base_size = food_field(food, "serving_size", 100.0)

    presets = [
        PortionPreset(label, base_size * factor, base_unit)
        for label, factor in _SERVING_MULTIPLES
    ]

    if is_weight_unit(base_unit):
        if base_unit != "oz":
            presets.append(PortionPreset("4 oz", 4, "oz"))
        if base_unit != "g" or base_size != 100:
            presets.append(PortionPreset("100g", 100, "g"))

    if is_volume_unit(base_unit) and base_unit != "cup":
        presets.append(PortionPreset("1 cup", 1, "cup"))
        presets.append(PortionPreset("½ cup", 0.5, "cup"))

    return presets


def step_size(unit: str) -> float:
    """Increment for +/- quantity steppers in ``unit``."""
    return _STEP_SIZES.get(unit, 1)


def servings_for_amount(food: FoodRecord, amount: float, unit: str | None = None) -> Servings | None:
    """Convert a display amount into a number of the food's servings.

    Args:
        food: The food being logged.
        amount: Amount shown to the user, e.g. 0.5.
        unit: Unit of ``amount``; defaults to the food's serving unit.

    Returns:
        Servings multiplier, or None if the unit is incompatible with the
        food's serving unit or the amount is not positive.
    """
    if amount <= 0 or food.serving_size <= 0:
        return None

    unit = normalize_unit(unit) or food.serving_unit
    in_serving_unit = convert_unit(amount, unit, food.serving_unit)
    if in_serving_unit is None:
        return None
    return Servings(in_serving_unit / food.serving_size)
