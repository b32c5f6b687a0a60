"""User-created custom food storage."""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path

from ..models import FoodRecord
from .schema import DEFAULT_DB_PATH, ensure_schema


class CustomFoodsDB:
    """Manages the custom_foods table (newest first)."""

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH) -> None:
        self._db_path = db_path
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
        """Insert a custom food, or update it in place if the id exists."""
        conn = self._get_conn()
        conn.execute(
            """INSERT INTO custom_foods (source_id, name, food_json)
               VALUES (?, ?, ?)
               ON CONFLICT(source_id) DO UPDATE SET
                 name=excluded.name,
                 food_json=excluded.food_json,
                 updated_at=datetime('now', 'localtime')""",
            (food.source_id, food.name, json.dumps(food.to_dict(), ensure_ascii=False)),
        )
        conn.commit()

    def get(self, source_id: str) -> FoodRecord | None:
        conn = self._get_conn()
        row = conn.execute(
            "SELECT food_json FROM custom_foods WHERE source_id = ?",
            (source_id,),
        ).fetchone()
        return FoodRecord.from_dict(json.loads(row["food_json"])) if row else None

    def get_all(self) -> list[FoodRecord]:
        conn = self._get_conn()
        rows = conn.execute("SELECT food_json FROM custom_foods ORDER BY id DESC").fetchall()
        return [FoodRecord.from_dict(json.loads(r["food_json"])) for r in rows]

    def search(self, query: str | None) -> list[FoodRecord]:
        """Case-insensitive name substring search; blank query returns all."""
        foods = self.get_all()
        if not query or not query.strip():
            return foods
        needle = query.strip().lower()
        return [f for f in foods if needle in f.name.lower()]

    def delete(self, source_id: str) -> None:
        conn = self._get_conn()
        conn.execute("DELETE FROM custom_foods WHERE source_id = ?", (source_id,))
        conn.commit()

    def clear(self) -> None:
        conn = self._get_conn()
        conn.execute("DELETE FROM custom_foods")
        conn.commit()
