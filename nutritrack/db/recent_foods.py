"""Bounded most-recently-logged foods list."""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path

from ..models import FoodRecord
from .schema import DEFAULT_DB_PATH, ensure_schema

MAX_RECENT_FOODS = 10


class RecentFoodsDB:
    """Manages the recent_foods table (most recent first, deduplicated)."""

    def __init__(
        self,
        db_path: str | Path = DEFAULT_DB_PATH,
        max_items: int = MAX_RECENT_FOODS,
    ) -> None:
        self._db_path = db_path
        self._max_items = max_items
        self._conn: sqlite3.Connection | None = None

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = ensure_schema(self._db_path)
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def add(self, food: FoodRecord) -> None:
        """Put ``food`` at the top, dropping older copies and overflow."""
        conn = self._get_conn()
        conn.execute("DELETE FROM recent_foods WHERE source_id = ?", (food.source_id,))
        conn.execute(
            "INSERT INTO recent_foods (source_id, food_json) VALUES (?, ?)",
            (food.source_id, json.dumps(food.to_dict(), ensure_ascii=False)),
        )
        conn.execute(
            """DELETE FROM recent_foods
               WHERE id NOT IN (
                   SELECT id FROM recent_foods ORDER BY id DESC LIMIT ?
               )""",
            (self._max_items,),
        )
        conn.commit()

    def get_all(self) -> list[FoodRecord]:
        """Return recent foods, most recent first."""
        conn = self._get_conn()
        rows = conn.execute("SELECT food_json FROM recent_foods ORDER BY id DESC").fetchall()
        return [FoodRecord.from_dict(json.loads(r["food_json"])) for r in rows]

    def clear(self) -> None:
        conn = self._get_conn()
        conn.execute("DELETE FROM recent_foods")
        conn.commit()
