"""Open Food Facts product payload ingestion (barcode lookups)."""

from __future__ import annotations

import logging
import re
from typing import Any

from ..models import BARCODE, FoodRecord
from ..nutrition.units import is_volume_unit
from .base import SourceError, to_float

logger = logging.getLogger(__name__)

KJ_PER_KCAL = 4.184

# "500 ml", "1.5 L", "33cl", "6 x 330 ml" → unit after each number
_QUANTITY_UNIT = re.compile(r"\d[\d.,]*\s*([a-zA-Z][a-zA-Z. ]*)")


def barcode_source_id(code: str) -> str:
    return f"barcode-{code.strip()}"


def _energy_kcal(nutriments: dict) -> float:
    kcal = to_float(nutriments.get("energy-kcal_100g"))
    if kcal:
        return kcal
    kj = to_float(nutriments.get("energy-kj_100g"))
    if kj:
        return kj / KJ_PER_KCAL
    return 0.0


def _base_unit(product: dict) -> str:
    """Per-100 basis: ml for drinks sold by volume, g otherwise."""
    quantity = product.get("quantity") or ""
    units = _QUANTITY_UNIT.findall(quantity)
    if not units:
        return "g"
    # multipacks ("6 x 330 ml") carry the unit on the last number
    unit = units[-1].strip()
    if is_volume_unit(unit) or unit.lower() == "cl":
        return "ml"
    return "g"


def parse_product(payload: dict[str, Any], code: str) -> FoodRecord | None:
    """Convert an Open Food Facts ``/product/<code>`` response.

    Nutrients are taken per 100 g (or 100 ml).

    Returns:
        The FoodRecord, or None if the product is not in the database.

    Raises:
        SourceError: If the payload is not a JSON object.
    """
    if not isinstance(payload, dict):
        raise SourceError("Barcode lookup response is not an object")

    product = payload.get("product")
    if payload.get("status") != 1 or not isinstance(product, dict):
        logger.info("Barcode %s not found", code)
        return None

    nutriments = product.get("nutriments") or {}
    name = (
        product.get("product_name")
        or product.get("product_name_en")
        or product.get("generic_name")
        or ""
    ).strip()
    if not name:
        name = f"Product {code}"

    brands = (product.get("brands") or "").split(",")[0].strip()

    return FoodRecord(
        source_id=barcode_source_id(code),
        name=name,
        brand_name=brands or None,
        calories=_energy_kcal(nutriments),
        protein=to_float(nutriments.get("proteins_100g")),
        carbs=to_float(nutriments.get("carbohydrates_100g")),
        fat=to_float(nutriments.get("fat_100g")),
        fiber=to_float(nutriments.get("fiber_100g")),
        serving_size=100.0,
        serving_unit=_base_unit(product),
        data_type=BARCODE,
    )
