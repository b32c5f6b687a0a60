"""Tests for database schema creation and migration."""

import sqlite3

import pytest

from nutritrack.db.schema import _SCHEMA_VERSION, ensure_schema


def test_ensure_schema_creates_tables(tmp_path):
    """Schema creates the log, food list and goal tables."""
    conn = ensure_schema(tmp_path / "test.db")

    tables = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
    ).fetchall()
    table_names = {row["name"] for row in tables}

    assert {"food_log", "recent_foods", "custom_foods", "goals", "schema_version"} <= table_names

    conn.close()


def test_ensure_schema_creates_parent_dirs(tmp_path):
    """Schema creates parent directories if they don't exist."""
    db_path = tmp_path / "sub" / "dir" / "test.db"
    conn = ensure_schema(db_path)
    assert db_path.exists()
    conn.close()


def test_ensure_schema_sets_version(tmp_path):
    conn = ensure_schema(tmp_path / "test.db")
    row = conn.execute("SELECT version FROM schema_version").fetchone()
    assert row["version"] == _SCHEMA_VERSION
    conn.close()


def test_ensure_schema_idempotent(tmp_path):
    """Calling ensure_schema twice keeps a single version row."""
    db_path = tmp_path / "test.db"
    ensure_schema(db_path).close()
    conn = ensure_schema(db_path)
    rows = conn.execute("SELECT version FROM schema_version").fetchall()
    assert len(rows) == 1
    conn.close()


def test_goals_table_holds_one_row(tmp_path):
    conn = ensure_schema(tmp_path / "test.db")
    conn.execute(
        "INSERT INTO goals (id, calories, protein, carbs, fat, fiber) VALUES (1, 1, 1, 1, 1, 1)"
    )
    with pytest.raises(sqlite3.IntegrityError):
        conn.execute(
            "INSERT INTO goals (id, calories, protein, carbs, fat, fiber) VALUES (2, 1, 1, 1, 1, 1)"
        )
    conn.close()


def test_ensure_schema_in_memory():
    conn = ensure_schema(":memory:")
    row = conn.execute("SELECT version FROM schema_version").fetchone()
    assert row["version"] == _SCHEMA_VERSION
    conn.close()
