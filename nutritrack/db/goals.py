"""Daily goal storage (single row)."""

from __future__ import annotations

import sqlite3
from pathlib import Path

from ..nutrition.calculator import NutritionGoals
from .schema import DEFAULT_DB_PATH, ensure_schema


class GoalsDB:
    """Manages the goals table."""

    def __init__(
        self,
        db_path: str | Path = DEFAULT_DB_PATH,
        defaults: NutritionGoals | None = None,
    ) -> None:
        self._db_path = db_path
        self._defaults = defaults or NutritionGoals()
        self._conn: sqlite3.Connection | None = None

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = ensure_schema(self._db_path)
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def get(self) -> NutritionGoals:
        """Stored goals, or the defaults if none were saved yet."""
        conn = self._get_conn()
        row = conn.execute(
            "SELECT calories, protein, carbs, fat, fiber FROM goals WHERE id = 1"
        ).fetchone()
        if row is None:
            return NutritionGoals(**self._defaults.as_dict())
        return NutritionGoals(**dict(row))

    def set(self, goals: NutritionGoals) -> None:
        conn = self._get_conn()
        conn.execute(
            """INSERT INTO goals (id, calories, protein, carbs, fat, fiber)
               VALUES (1, ?, ?, ?, ?, ?)
               ON CONFLICT(id) DO UPDATE SET
                 calories=excluded.calories,
                 protein=excluded.protein,
                 carbs=excluded.carbs,
                 fat=excluded.fat,
                 fiber=excluded.fiber,
                 updated_at=datetime('now', 'localtime')""",
            (goals.calories, goals.protein, goals.carbs, goals.fat, goals.fiber),
        )
        conn.commit()
