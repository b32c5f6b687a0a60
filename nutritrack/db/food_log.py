"""Food log storage: one row per logged entry."""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path

from ..models import FoodRecord, LoggedEntry
from .schema import DEFAULT_DB_PATH, ensure_schema

logger = logging.getLogger(__name__)


class FoodLogDB:
    """Manages the food_log table."""

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

    def add_entry(self, entry: LoggedEntry) -> int:
        """Persist a logged entry.

        Returns:
            The inserted row ID (also set on ``entry.entry_id``).
        """
        conn = self._get_conn()
        cur = conn.execute(
            """INSERT INTO food_log
               (entry_date, meal, source_id, food_json, quantity,
                calories, protein, carbs, fat, fiber)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                entry.date,
                entry.meal,
                entry.food.source_id,
                json.dumps(entry.food.to_dict(), ensure_ascii=False),
                entry.quantity,
                entry.calories,
                entry.protein,
                entry.carbs,
                entry.fat,
                entry.fiber,
            ),
        )
        conn.commit()
        entry.entry_id = cur.lastrowid
        logger.debug("Logged %s x%.2f on %s", entry.food.name, entry.quantity, entry.date)
        return cur.lastrowid

    def get_entries(self, entry_date: str | None = None) -> list[LoggedEntry]:
        """Return entries for one date, or all entries, oldest first."""
        conn = self._get_conn()
        if entry_date is None:
            rows = conn.execute("SELECT * FROM food_log ORDER BY entry_date, id").fetchall()
        else:
            rows = conn.execute(
                "SELECT * FROM food_log WHERE entry_date = ? ORDER BY id",
                (entry_date,),
            ).fetchall()
        return [self._row_to_entry(r) for r in rows]

    def get_entries_between(self, start: str, end: str) -> list[LoggedEntry]:
        """Return entries with ``start <= date <= end``."""
        conn = self._get_conn()
        rows = conn.execute(
            """SELECT * FROM food_log
               WHERE entry_date BETWEEN ? AND ?
               ORDER BY entry_date, id""",
            (start, end),
        ).fetchall()
        return [self._row_to_entry(r) for r in rows]

    def get_dates(self) -> list[str]:
        """Dates that have at least one entry, most recent first."""
        conn = self._get_conn()
        rows = conn.execute(
            "SELECT DISTINCT entry_date FROM food_log ORDER BY entry_date DESC"
        ).fetchall()
        return [r["entry_date"] for r in rows]

    def delete_entry(self, entry_id: int) -> None:
        """Delete a logged entry by ID."""
        conn = self._get_conn()
        conn.execute("DELETE FROM food_log WHERE id = ?", (entry_id,))
        conn.commit()

    def copy_entries(self, entry_ids: list[int], target_date: str) -> list[int]:
        """Copy entries (e.g. from yesterday) onto ``target_date``.

        Returns:
            Row IDs of the new entries.
        """
        conn = self._get_conn()
        new_ids: list[int] = []
        for entry_id in entry_ids:
            cur = conn.execute(
                """INSERT INTO food_log
                   (entry_date, meal, source_id, food_json, quantity,
                    calories, protein, carbs, fat, fiber)
                   SELECT ?, meal, source_id, food_json, quantity,
                          calories, protein, carbs, fat, fiber
                   FROM food_log WHERE id = ?""",
                (target_date, entry_id),
            )
            if cur.rowcount:
                new_ids.append(cur.lastrowid)
        conn.commit()
        return new_ids

    @staticmethod
    def _row_to_entry(row: sqlite3.Row) -> LoggedEntry:
        return LoggedEntry(
            food=FoodRecord.from_dict(json.loads(row["food_json"])),
            quantity=row["quantity"],
            date=row["entry_date"],
            meal=row["meal"],
            calories=row["calories"],
            protein=row["protein"],
            carbs=row["carbs"],
            fat=row["fat"],
            fiber=row["fiber"],
            entry_id=row["id"],
        )
