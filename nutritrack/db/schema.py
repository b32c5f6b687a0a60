"""Database schema definitions and migration helpers."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)

_SCHEMA_VERSION = 1

IN_MEMORY = ":memory:"

DEFAULT_DB_PATH = "~/.config/nutritrack/nutritrack.db"

_DDL = """
CREATE TABLE IF NOT EXISTS food_log (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    entry_date TEXT NOT NULL,
    meal TEXT NOT NULL DEFAULT 'snacks',
    source_id TEXT NOT NULL,
    food_json TEXT NOT NULL,
    quantity REAL NOT NULL,
    calories REAL NOT NULL DEFAULT 0,
    protein REAL NOT NULL DEFAULT 0,
    carbs REAL NOT NULL DEFAULT 0,
    fat REAL NOT NULL DEFAULT 0,
    fiber REAL NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL DEFAULT (datetime('now', 'localtime'))
);

CREATE INDEX IF NOT EXISTS idx_food_log_date ON food_log(entry_date);

CREATE TABLE IF NOT EXISTS recent_foods (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    source_id TEXT NOT NULL UNIQUE,
    food_json TEXT NOT NULL,
    last_added TEXT NOT NULL DEFAULT (datetime('now', 'localtime'))
);

CREATE TABLE IF NOT EXISTS custom_foods (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    source_id TEXT NOT NULL UNIQUE,
    name TEXT NOT NULL,
    food_json TEXT NOT NULL,
    created_at TEXT NOT NULL DEFAULT (datetime('now', 'localtime')),
    updated_at TEXT
);

CREATE TABLE IF NOT EXISTS goals (
    id INTEGER PRIMARY KEY CHECK (id = 1),
    calories REAL NOT NULL,
    protein REAL NOT NULL,
    carbs REAL NOT NULL,
    fat REAL NOT NULL,
    fiber REAL NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (datetime('now', 'localtime'))
);

CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER NOT NULL
);
"""


def _stored_version(conn: sqlite3.Connection) -> int:
    try:
        row = conn.execute("SELECT MAX(version) AS version FROM schema_version").fetchone()
    except sqlite3.OperationalError:
        # fresh file, nothing created yet
        return 0
    return row["version"] or 0


def ensure_schema(db_path: str | Path) -> sqlite3.Connection:
    """Open the nutritrack database, creating or upgrading its tables.

    ``~`` in ``db_path`` is expanded and missing parent directories are
    created. ``":memory:"`` opens a throwaway in-memory database.
    """
    if str(db_path) == IN_MEMORY:
        conn = sqlite3.connect(IN_MEMORY)
    else:
        path = Path(db_path).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(path))
        conn.execute("PRAGMA journal_mode=WAL")
    conn.row_factory = sqlite3.Row

    version = _stored_version(conn)
    if version >= _SCHEMA_VERSION:
        return conn

    logger.info("Upgrading schema of %s from v%d to v%d", db_path, version, _SCHEMA_VERSION)
    with conn:
        conn.executescript(_DDL)
        conn.execute("DELETE FROM schema_version")
        conn.execute("INSERT INTO schema_version (version) VALUES (?)", (_SCHEMA_VERSION,))
    return conn
