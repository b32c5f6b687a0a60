"""SQLite storage for the food log, recent foods, custom foods and goals."""

from .custom_foods import CustomFoodsDB
from .food_log import FoodLogDB
from .goals import GoalsDB
from .recent_foods import RecentFoodsDB
from .schema import ensure_schema

__all__ = [
    "FoodLogDB",
    "RecentFoodsDB",
    "CustomFoodsDB",
    "GoalsDB",
    "ensure_schema",
]
