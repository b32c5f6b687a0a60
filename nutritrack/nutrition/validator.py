"""Atwater cross-check and plausibility bounds for nutrition records.

Each record is judged on its own serving basis:

* calories may not exceed ~900 kcal per 100 g (pure fat);
* protein + carbs + fat may not exceed 100 g per 100 g (5 g tolerance);
* reported calories must be within +30% of 4/4/9 Atwater calories
  (checked once Atwater calories pass 20 kcal, or when the surplus is
  larger than any small-macro food could explain);
* reported calories may not fall below 30% of Atwater calories.

Records with no nutrition data at all are accepted.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

from ..models import (
    BRANDED,
    FOUNDATION,
    SR_LEGACY,
    SURVEY,
    FoodRecord,
    ValidationResult,
    food_field,
)
from .units import convert_unit, is_volume_unit, is_weight_unit

logger = logging.getLogger(__name__)

MAX_CALORIES_PER_100 = 900.0
MAX_MACROS_PER_100 = 105.0
HIGH_TOLERANCE = 0.30
LOW_RATIO = 0.30
MIN_EXPECTED_FOR_HIGH_CHECK = 20.0
MIN_EXPECTED_FOR_LOW_CHECK = 50.0
# Surplus over Atwater calories that no small-macro record can explain
MAX_UNEXPLAINED_PER_100 = 450.0

T = TypeVar("T")


def expected_calories(protein: float, carbs: float, fat: float) -> float:
    """Atwater calories: 4 kcal/g protein and carbs, 9 kcal/g fat."""
    return protein * 4 + carbs * 4 + fat * 9


def _field(food: FoodRecord | Mapping[str, Any], name: str, default: Any = 0.0) -> Any:
    return food_field(food, name, default)


def _basis_scale(food: FoodRecord | Mapping[str, Any]) -> float:
    """How many 100 g/100 ml units one serving spans (never below 1)."""
    size = _field(food, "serving_size", None)
    unit = _field(food, "serving_unit", None)
    if not size or not unit:
        return 1.0

    if is_weight_unit(unit):
        amount = convert_unit(size, unit, "g")
    elif is_volume_unit(unit):
        amount = convert_unit(size, unit, "ml")
    else:
        amount = None

    if amount is None:
        return 1.0
    return max(1.0, amount / 100.0)


def validate_food(food: FoodRecord | Mapping[str, Any]) -> ValidationResult:
    """Classify a record's nutrition data as plausible or not.

    Never modifies the record.
    """
    calories = _field(food, "calories")
    protein = _field(food, "protein")
    carbs = _field(food, "carbs")
    fat = _field(food, "fat")

    if calories == 0 and protein == 0 and carbs == 0 and fat == 0:
        return ValidationResult(True, "No nutrition data")

    scale = _basis_scale(food)

    if calories > MAX_CALORIES_PER_100 * scale:
        return ValidationResult(
            False,
            f"Calories too high ({calories}): exceeds maximum possible "
            f"(~900 per 100g for pure fat)",
        )

    total_macros = protein + carbs + fat
    if total_macros > MAX_MACROS_PER_100 * scale:
        return ValidationResult(
            False, f"Macro totals exceed 100g per 100g ({total_macros:.1f}g)"
        )

    expected = expected_calories(protein, carbs, fat)

    unexplained = calories - expected
    if calories > expected * (1 + HIGH_TOLERANCE) and (
        expected > MIN_EXPECTED_FOR_HIGH_CHECK
        or unexplained > MAX_UNEXPLAINED_PER_100 * scale
    ):
        return ValidationResult(
            False,
            f"Calories ({calories}) significantly higher than expected "
            f"from macros ({round(expected)})",
        )

    if expected > MIN_EXPECTED_FOR_LOW_CHECK and calories < expected * LOW_RATIO:
        return ValidationResult(
            False,
            f"Calories ({calories}) too low for macros (expected ~{round(expected)})",
        )

    return ValidationResult(True)


def filter_valid(foods: Iterable[T]) -> list[T]:
    """Drop records with implausible nutrition data, keeping order."""
    kept: list[T] = []
    for food in foods:
        result = validate_food(food)
        if result.valid:
            kept.append(food)
        else:
            logger.debug("Filtered out %r: %s", _field(food, "name", ""), result.reason)
    return kept


def nutrition_confidence(food: FoodRecord | Mapping[str, Any]) -> int:
    """Score 0-100 for how trustworthy a record's nutrition data is."""
    if not validate_food(food).valid:
        return 0

    calories = _field(food, "calories")
    expected = expected_calories(
        _field(food, "protein"), _field(food, "carbs"), _field(food, "fat")
    )

    score = 100.0
    if expected > 0:
        pct_diff = abs(calories - expected) / expected
        score -= min(30.0, pct_diff * 100)

    data_type = _field(food, "data_type", "")
    if data_type in (FOUNDATION, SR_LEGACY):
        score += 10
    elif data_type == SURVEY:
        score += 5
    elif data_type == BRANDED:
        score -= 5

    return max(0, min(100, int(score + 0.5)))
