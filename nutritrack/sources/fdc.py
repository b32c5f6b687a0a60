"""FoodData Central search response ingestion."""

from __future__ import annotations

import logging
from typing import Any

from ..models import FoodRecord
from ..nutrition.ranking import rank_search_results
from ..nutrition.units import normalize_unit
from ..nutrition.validator import filter_valid
from .base import SourceError, to_float

logger = logging.getLogger(__name__)

# FoodRecord field → FDC nutrientName
_NUTRIENT_NAMES: dict[str, str] = {
    "calories": "Energy",
    "protein": "Protein",
    "carbs": "Carbohydrate, by difference",
    "fat": "Total lipid (fat)",
    "fiber": "Fiber, total dietary",
}

DEFAULT_SERVING_SIZE = 100.0
DEFAULT_SERVING_UNIT = "g"


def _nutrient(food: dict, nutrient_name: str) -> float:
    for n in food.get("foodNutrients") or []:
        if n.get("nutrientName") == nutrient_name:
            return to_float(n.get("value"))
    return 0.0


def parse_food(food: dict[str, Any]) -> FoodRecord:
    """Convert one entry of ``foods`` into a FoodRecord.

    Raises:
        SourceError: If the entry has no id or description.
    """
    fdc_id = food.get("fdcId")
    name = (food.get("description") or "").strip()
    if fdc_id is None or not name:
        raise SourceError(f"FDC food without fdcId/description: {food!r:.80}")

    return FoodRecord(
        source_id=str(fdc_id),
        name=name,
        brand_name=food.get("brandName") or food.get("brandOwner") or None,
        calories=_nutrient(food, _NUTRIENT_NAMES["calories"]),
        protein=_nutrient(food, _NUTRIENT_NAMES["protein"]),
        carbs=_nutrient(food, _NUTRIENT_NAMES["carbs"]),
        fat=_nutrient(food, _NUTRIENT_NAMES["fat"]),
        fiber=_nutrient(food, _NUTRIENT_NAMES["fiber"]),
        serving_size=to_float(food.get("servingSize")) or DEFAULT_SERVING_SIZE,
        serving_unit=normalize_unit(food.get("servingSizeUnit")) or DEFAULT_SERVING_UNIT,
        data_type=food.get("dataType") or "",
    )


def parse_search_response(payload: dict[str, Any]) -> list[FoodRecord]:
    """Convert a ``/foods/search`` response body into FoodRecords.

    Raises:
        SourceError: If the payload has no ``foods`` list.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("foods"), list):
        raise SourceError("FDC search response has no 'foods' list")
    return [parse_food(food) for food in payload["foods"]]


def search_candidates(
    payload: dict[str, Any],
    query: str,
    *,
    min_query_length: int = 2,
) -> list[FoodRecord]:
    """Parse, validate and rank the results of a food search.

    Queries shorter than ``min_query_length`` yield no candidates.
    """
    if not query or len(query.strip()) < min_query_length:
        return []

    records = parse_search_response(payload)
    valid = filter_valid(records)
    if len(valid) < len(records):
        logger.info(
            "Dropped %d of %d results for %r with implausible nutrition data",
            len(records) - len(valid),
            len(records),
            query,
        )
    return list(rank_search_results(valid, query))
