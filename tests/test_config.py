"""Tests for nutritrack config loading."""

import os
import tempfile

import pytest

from nutritrack.config import NutritrackConfig, load_config
from nutritrack.db.schema import DEFAULT_DB_PATH


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("NUTRITRACK_DB", raising=False)
    monkeypatch.delenv("NUTRITRACK_LOG_LEVEL", raising=False)


def _load_toml(content: bytes):
    with tempfile.NamedTemporaryFile(suffix=".toml", delete=False) as f:
        f.write(content)
        f.flush()
        config = load_config(f.name)
    os.unlink(f.name)
    return config


def test_load_config_defaults():
    """Loading with no path returns all defaults."""
    config = load_config()
    assert isinstance(config, NutritrackConfig)
    assert config.database.path == DEFAULT_DB_PATH
    assert config.search.min_query_length == 2
    assert config.search.page_size == 25
    assert config.recent.max_items == 10
    assert config.logging.level == "WARNING"
    assert config.goals.calories == 2000
    assert config.goals.protein == 150
    assert config.goals.carbs == 200
    assert config.goals.fat == 65
    assert config.goals.fiber == 30


def test_load_config_nonexistent_file():
    config = load_config("/nonexistent/path.toml")
    assert config.database.path == DEFAULT_DB_PATH


def test_load_config_from_toml():
    """Loading a valid TOML file populates config."""
    config = _load_toml(b"""\
[database]
path = "/var/lib/nutritrack.db"

[search]
min_query_length = 3
page_size = 10

[recent]
max_items = 5

[goals]
calories = 1800
protein = 120

[logging]
level = "debug"
""")
    assert config.database.path == "/var/lib/nutritrack.db"
    assert config.search.min_query_length == 3
    assert config.search.page_size == 10
    assert config.recent.max_items == 5
    assert config.goals.calories == 1800
    assert config.goals.protein == 120
    # unset goals keep their defaults
    assert config.goals.fat == 65
    assert config.logging.level == "DEBUG"


def test_load_config_env_override(monkeypatch):
    """Environment variables fill settings the file leaves unset."""
    monkeypatch.setenv("NUTRITRACK_DB", "/tmp/env.db")
    monkeypatch.setenv("NUTRITRACK_LOG_LEVEL", "info")

    config = load_config()
    assert config.database.path == "/tmp/env.db"
    assert config.logging.level == "INFO"


def test_load_config_file_takes_precedence(monkeypatch):
    monkeypatch.setenv("NUTRITRACK_DB", "/tmp/env.db")
    config = _load_toml(b"""\
[database]
path = "/tmp/file.db"
""")
    assert config.database.path == "/tmp/file.db"


def test_load_config_partial_toml():
    """Partial TOML uses defaults for missing sections."""
    config = _load_toml(b"""\
[recent]
max_items = 3
""")
    assert config.recent.max_items == 3
    assert config.search.page_size == 25
    assert config.goals.calories == 2000
