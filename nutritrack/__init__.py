"""Nutrition data normalization, validation and portion math for food logging."""

from .config import NutritrackConfig, load_config
from .models import (
    FoodRecord,
    LoggedEntry,
    NutrientTotals,
    PortionPreset,
    Servings,
    ValidationResult,
)
from .nutrition import (
    convert_unit,
    filter_valid,
    get_compatible_units,
    normalize_unit,
    portion_presets,
    rank_search_results,
    step_size,
    validate_food,
)
from .sources import SourceError, parse_product, parse_search_response, search_candidates

__all__ = [
    "FoodRecord",
    "LoggedEntry",
    "NutrientTotals",
    "PortionPreset",
    "Servings",
    "ValidationResult",
    "normalize_unit",
    "convert_unit",
    "get_compatible_units",
    "validate_food",
    "filter_valid",
    "rank_search_results",
    "portion_presets",
    "step_size",
    "SourceError",
    "parse_search_response",
    "parse_product",
    "search_candidates",
    "NutritrackConfig",
    "load_config",
]
