"""Relevance ranking of food search results."""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any, TypeVar

from ..models import BRANDED, GENERIC_DATA_TYPES, food_field

T = TypeVar("T")

# Preparation descriptors that make a name more specific than the query
_SPECIFIC_TERMS = (
    "raw", "cooked", "roasted", "fried", "baked", "grilled", "steamed",
    "boiled", "skin", "bone", "without", "with", "added",
)


def query_terms(query: str) -> list[str]:
    return query.lower().strip().split()


def relevance_score(food: Any, terms: Sequence[str]) -> float:
    """Additive relevance score of one record for the given query terms."""
    name = (food_field(food, "name") or "").lower()
    score = 0.0

    full_query = " ".join(terms)
    if name.startswith(full_query):
        score += 100
    elif full_query in name:
        score += 50

    if all(term in name for term in terms):
        score += 40

    for term in terms:
        if re.search(r"\b" + re.escape(term), name):
            score += 15

    # Shorter names are usually the generic food
    score += max(0.0, 30 - len(name) * 0.3)

    for term in _SPECIFIC_TERMS:
        if term in name:
            score -= 3

    brand = food_field(food, "brand_name")
    if brand and food_field(food, "data_type") == BRANDED:
        score += 5
        brand = brand.lower()
        if any(term in brand for term in terms):
            score += 20

    if food_field(food, "data_type") in GENERIC_DATA_TYPES:
        score += 8

    return score


def rank_search_results(foods: Sequence[T], query: str | None) -> Sequence[T]:
    """Order search results by descending relevance to ``query``.

    An empty result list or blank query returns ``foods`` untouched.
    Ties keep their input order.
    """
    if not foods or not query or not query.strip():
        return foods

    terms = query_terms(query)
    return sorted(foods, key=lambda f: relevance_score(f, terms), reverse=True)
