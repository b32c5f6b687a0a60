"""Ingestion of external food payloads into FoodRecord instances."""

from .barcode import parse_product
from .base import SourceError
from .custom import make_custom_food
from .fdc import parse_search_response, search_candidates

__all__ = [
    "SourceError",
    "parse_search_response",
    "search_candidates",
    "parse_product",
    "make_custom_food",
]
