"""Tests for the recent foods, custom foods and goals tables."""

import pytest

from nutritrack.db import CustomFoodsDB, GoalsDB, RecentFoodsDB
from nutritrack.models import FoodRecord
from nutritrack.nutrition.calculator import NutritionGoals
from nutritrack.sources import make_custom_food


def _food(i, name=None) -> FoodRecord:
    return FoodRecord(source_id=str(i), name=name or f"Food {i}", calories=i)


class TestRecentFoodsDB:
    @pytest.fixture
    def db(self, tmp_path):
        recents = RecentFoodsDB(db_path=tmp_path / "test.db")
        yield recents
        recents.close()

    def test_most_recent_first(self, db):
        db.add(_food(1))
        db.add(_food(2))
        assert [f.source_id for f in db.get_all()] == ["2", "1"]

    def test_re_adding_moves_to_top(self, db):
        db.add(_food(1))
        db.add(_food(2))
        db.add(_food(1, "Food one, updated"))
        foods = db.get_all()
        assert [f.source_id for f in foods] == ["1", "2"]
        assert foods[0].name == "Food one, updated"

    def test_capped_at_ten(self, db):
        for i in range(15):
            db.add(_food(i))
        foods = db.get_all()
        assert len(foods) == 10
        assert foods[0].source_id == "14"
        assert foods[-1].source_id == "5"

    def test_custom_cap(self, tmp_path):
        db = RecentFoodsDB(db_path=tmp_path / "cap.db", max_items=3)
        for i in range(5):
            db.add(_food(i))
        assert [f.source_id for f in db.get_all()] == ["4", "3", "2"]
        db.close()

    def test_clear(self, db):
        db.add(_food(1))
        db.clear()
        assert db.get_all() == []


class TestCustomFoodsDB:
    @pytest.fixture
    def db(self, tmp_path):
        customs = CustomFoodsDB(db_path=tmp_path / "test.db")
        yield customs
        customs.close()

    def test_add_and_get(self, db):
        food = make_custom_food("Protein Shake", calories=160, protein=30, source_id="custom-1")
        db.add(food)
        assert db.get("custom-1") == food
        assert db.get("custom-2") is None

    def test_newest_first(self, db):
        db.add(make_custom_food("A", source_id="custom-1"))
        db.add(make_custom_food("B", source_id="custom-2"))
        assert [f.name for f in db.get_all()] == ["B", "A"]

    def test_update_in_place(self, db):
        db.add(make_custom_food("Shake", calories=160, source_id="custom-1"))
        db.add(make_custom_food("Shake", calories=180, source_id="custom-1"))
        foods = db.get_all()
        assert len(foods) == 1
        assert foods[0].calories == 180

    def test_search(self, db):
        db.add(make_custom_food("Grandma's Cookies", source_id="custom-1"))
        db.add(make_custom_food("Protein Shake", source_id="custom-2"))
        assert [f.name for f in db.search("cookie")] == ["Grandma's Cookies"]
        assert [f.name for f in db.search("  SHAKE ")] == ["Protein Shake"]
        assert len(db.search("")) == 2
        assert len(db.search(None)) == 2

    def test_delete(self, db):
        db.add(make_custom_food("A", source_id="custom-1"))
        db.delete("custom-1")
        assert db.get_all() == []

    def test_clear(self, db):
        db.add(make_custom_food("A", source_id="custom-1"))
        db.clear()
        assert db.get_all() == []


class TestGoalsDB:
    def test_defaults_when_unset(self, tmp_path):
        db = GoalsDB(db_path=tmp_path / "test.db")
        assert db.get() == NutritionGoals()
        db.close()

    def test_configured_defaults(self, tmp_path):
        defaults = NutritionGoals(calories=1800)
        db = GoalsDB(db_path=tmp_path / "test.db", defaults=defaults)
        assert db.get().calories == 1800
        db.close()

    def test_set_and_overwrite(self, tmp_path):
        db = GoalsDB(db_path=tmp_path / "test.db")
        db.set(NutritionGoals(calories=2200, protein=160, carbs=220, fat=70, fiber=35))
        db.set(NutritionGoals(calories=2100, protein=160, carbs=220, fat=70, fiber=35))
        assert db.get() == NutritionGoals(calories=2100, protein=160, carbs=220, fat=70, fiber=35)
        db.close()


class TestFoodRecordFromDict:
    def test_ignores_unknown_keys(self):
        food = FoodRecord.from_dict({"source_id": 7, "name": "Egg", "calories": 72, "extra": 1})
        assert food == FoodRecord(source_id="7", name="Egg", calories=72)

    def test_missing_name(self):
        with pytest.raises(ValueError, match="name"):
            FoodRecord.from_dict({"source_id": "1"})

    def test_not_a_mapping(self):
        with pytest.raises(ValueError):
            FoodRecord.from_dict(["Egg"])
