"""Unit handling, validation, ranking and portion math for food records."""

from .calculator import (
    NutritionGoals,
    PeriodSummary,
    daily_totals,
    make_logged_entry,
    portion_nutrients,
    progress,
    summarize_period,
)
from .portions import portion_presets, servings_for_amount, step_size
from .ranking import rank_search_results, relevance_score
from .units import (
    convert_unit,
    format_conversion_factor,
    get_compatible_units,
    is_volume_unit,
    is_weight_unit,
    normalize_unit,
    parse_amount,
)
from .validator import expected_calories, filter_valid, nutrition_confidence, validate_food

__all__ = [
    "normalize_unit",
    "is_weight_unit",
    "is_volume_unit",
    "convert_unit",
    "get_compatible_units",
    "format_conversion_factor",
    "parse_amount",
    "expected_calories",
    "validate_food",
    "filter_valid",
    "nutrition_confidence",
    "relevance_score",
    "rank_search_results",
    "portion_presets",
    "step_size",
    "servings_for_amount",
    "NutritionGoals",
    "PeriodSummary",
    "portion_nutrients",
    "make_logged_entry",
    "daily_totals",
    "progress",
    "summarize_period",
]
