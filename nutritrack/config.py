"""TOML configuration loader for nutritrack."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from .db.schema import DEFAULT_DB_PATH
from .nutrition.calculator import NutritionGoals


@dataclass
class DatabaseConfig:
    path: str = DEFAULT_DB_PATH


@dataclass
class SearchConfig:
    min_query_length: int = 2
    page_size: int = 25


@dataclass
class RecentConfig:
    max_items: int = 10


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class NutritrackConfig:
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    recent: RecentConfig = field(default_factory=RecentConfig)
    goals: NutritionGoals = field(default_factory=NutritionGoals)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | Path | None = None) -> NutritrackConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    The database path and log level can be set via NUTRITRACK_DB and
    NUTRITRACK_LOG_LEVEL when the file leaves them unset.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    dbs = raw.get("database", {})
    srh = raw.get("search", {})
    rec = raw.get("recent", {})
    gls = raw.get("goals", {})
    lgg = raw.get("logging", {})

    # config file → environment variable → default
    db_path = dbs.get("path", "") or os.environ.get("NUTRITRACK_DB", "") or DEFAULT_DB_PATH
    log_level = lgg.get("level", "") or os.environ.get("NUTRITRACK_LOG_LEVEL", "") or "WARNING"

    default_goals = NutritionGoals()

    return NutritrackConfig(
        database=DatabaseConfig(path=db_path),
        search=SearchConfig(
            min_query_length=srh.get("min_query_length", 2),
            page_size=srh.get("page_size", 25),
        ),
        recent=RecentConfig(max_items=rec.get("max_items", 10)),
        goals=NutritionGoals(
            calories=gls.get("calories", default_goals.calories),
            protein=gls.get("protein", default_goals.protein),
            carbs=gls.get("carbs", default_goals.carbs),
            fat=gls.get("fat", default_goals.fat),
            fiber=gls.get("fiber", default_goals.fiber),
        ),
        logging=LoggingConfig(level=log_level.upper()),
    )
