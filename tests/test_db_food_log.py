"""Tests for FoodLogDB."""

import pytest

from nutritrack.db.food_log import FoodLogDB
from nutritrack.models import FoodRecord, Servings
from nutritrack.nutrition.calculator import make_logged_entry


@pytest.fixture
def db(tmp_path):
    """Create a temporary FoodLogDB."""
    log = FoodLogDB(db_path=tmp_path / "test.db")
    yield log
    log.close()


@pytest.fixture
def oats():
    return FoodRecord(
        source_id="173904",
        name="Oats",
        calories=389,
        protein=16.9,
        carbs=66.3,
        fat=6.9,
        fiber=10.6,
        data_type="SR Legacy",
    )


def test_add_and_get_entry(db, oats):
    entry = make_logged_entry(oats, Servings(0.4), "2024-03-05", "breakfast")
    entry_id = db.add_entry(entry)

    assert entry.entry_id == entry_id
    stored = db.get_entries("2024-03-05")
    assert len(stored) == 1
    assert stored[0].entry_id == entry_id
    assert stored[0].food == oats
    assert stored[0].quantity == 0.4
    assert stored[0].meal == "breakfast"
    assert stored[0].calories == entry.calories


def test_get_entries_by_date(db, oats):
    db.add_entry(make_logged_entry(oats, Servings(1), "2024-03-04", "lunch"))
    db.add_entry(make_logged_entry(oats, Servings(1), "2024-03-05", "lunch"))
    db.add_entry(make_logged_entry(oats, Servings(2), "2024-03-05", "dinner"))

    assert len(db.get_entries("2024-03-05")) == 2
    assert len(db.get_entries("2024-03-06")) == 0
    assert len(db.get_entries()) == 3


def test_get_entries_between(db, oats):
    for day in ("2024-03-01", "2024-03-03", "2024-03-08"):
        db.add_entry(make_logged_entry(oats, Servings(1), day, "lunch"))

    entries = db.get_entries_between("2024-03-01", "2024-03-07")
    assert [e.date for e in entries] == ["2024-03-01", "2024-03-03"]


def test_get_dates(db, oats):
    for day in ("2024-03-02", "2024-03-05", "2024-03-02"):
        db.add_entry(make_logged_entry(oats, Servings(1), day, "lunch"))
    assert db.get_dates() == ["2024-03-05", "2024-03-02"]


def test_delete_entry(db, oats):
    entry_id = db.add_entry(make_logged_entry(oats, Servings(1), "2024-03-05", "lunch"))
    db.delete_entry(entry_id)
    assert db.get_entries("2024-03-05") == []


def test_copy_entries(db, oats):
    first = db.add_entry(make_logged_entry(oats, Servings(1), "2024-03-04", "breakfast"))
    second = db.add_entry(make_logged_entry(oats, Servings(2), "2024-03-04", "dinner"))

    new_ids = db.copy_entries([first, second, 999], "2024-03-05")

    assert len(new_ids) == 2
    copied = db.get_entries("2024-03-05")
    assert [e.meal for e in copied] == ["breakfast", "dinner"]
    assert [e.quantity for e in copied] == [1, 2]
    # originals untouched
    assert len(db.get_entries("2024-03-04")) == 2
