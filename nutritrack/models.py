"""Data models for food records, servings and logged entries."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields
from typing import Any

# Data type tags as reported by FoodData Central, plus local sources
BRANDED = "Branded"
SURVEY = "Survey (FNDDS)"
SR_LEGACY = "SR Legacy"
FOUNDATION = "Foundation"
BARCODE = "Barcode"
CUSTOM = "Custom"

GENERIC_DATA_TYPES = frozenset({SURVEY, SR_LEGACY})

MEALS = ("breakfast", "lunch", "dinner", "snacks")


@dataclass(frozen=True)
class FoodRecord:
    """A normalized food, all nutrients per one serving."""

    source_id: str
    name: str
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    serving_size: float = 100.0
    serving_unit: str = "g"
    data_type: str = ""
    brand_name: str | None = None

    @property
    def is_branded(self) -> bool:
        return self.data_type == BRANDED

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FoodRecord:
        """Build a record from a stored dict, ignoring unknown keys.

        Raises:
            ValueError: If ``data`` is not a mapping or has no name.
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Food record must be a JSON object, got {type(data).__name__}")
        if not data.get("name"):
            raise ValueError("Food record has no 'name'")
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}
        kwargs["source_id"] = str(kwargs.get("source_id", ""))
        return cls(**kwargs)


@dataclass(frozen=True)
class Servings:
    """Number of base servings consumed.

    Kept apart from display amounts (``1/2 cup``) so that only the
    dimensionless multiplier is ever persisted.
    """

    value: float

    def __post_init__(self) -> None:
        if not math.isfinite(self.value) or self.value <= 0:
            raise ValueError(f"servings must be a positive number, got {self.value!r}")

    def __float__(self) -> float:
        return float(self.value)


@dataclass(frozen=True)
class PortionPreset:
    label: str
    amount: float
    unit: str


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.valid


@dataclass
class NutrientTotals:
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0

    def __add__(self, other: NutrientTotals) -> NutrientTotals:
        return NutrientTotals(
            calories=self.calories + other.calories,
            protein=self.protein + other.protein,
            carbs=self.carbs + other.carbs,
            fat=self.fat + other.fat,
            fiber=self.fiber + other.fiber,
        )

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


@dataclass
class LoggedEntry:
    """A food record scaled by a servings multiplier for one date and meal."""

    food: FoodRecord
    quantity: float
    date: str
    meal: str
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    entry_id: int | None = None

    @property
    def nutrients(self) -> NutrientTotals:
        return NutrientTotals(
            calories=self.calories,
            protein=self.protein,
            carbs=self.carbs,
            fat=self.fat,
            fiber=self.fiber or 0.0,
        )


def food_field(food: Any, name: str, default: Any = None) -> Any:
    """Read a field from a FoodRecord or a plain mapping with the same keys."""
    if isinstance(food, Mapping):
        value = food.get(name, default)
    else:
        value = getattr(food, name, default)
    return default if value is None else value
