"""Tests for the nutrition plausibility validator."""

from nutritrack.models import BRANDED, SR_LEGACY, FoodRecord
from nutritrack.nutrition.validator import (
    expected_calories,
    filter_valid,
    nutrition_confidence,
    validate_food,
)


def _food(name="Food", **kw) -> FoodRecord:
    return FoodRecord(source_id=name.lower(), name=name, **kw)


class TestExpectedCalories:
    def test_atwater(self):
        assert expected_calories(10, 20, 5) == 10 * 4 + 20 * 4 + 5 * 9


class TestValidateFood:
    def test_apple_is_valid(self):
        result = validate_food({"calories": 52, "protein": 0.3, "carbs": 14, "fat": 0.2})
        assert result.valid
        assert result.reason is None

    def test_calories_far_above_small_macros(self):
        result = validate_food({"calories": 900, "protein": 1, "carbs": 1, "fat": 1})
        assert not result.valid
        assert "higher than expected from macros" in result.reason
        assert "(17)" in result.reason

    def test_all_zero_is_valid(self):
        result = validate_food(_food())
        assert result.valid
        assert result.reason == "No nutrition data"

    def test_missing_fields_count_as_zero(self):
        assert validate_food({"name": "Water"}).valid

    def test_calories_too_high(self):
        result = validate_food(_food(calories=950, fat=100))
        assert not result.valid
        assert result.reason.startswith("Calories too high (950")

    def test_macros_exceed_weight(self):
        result = validate_food(_food(calories=440, protein=60, carbs=50))
        assert not result.valid
        assert result.reason == "Macro totals exceed 100g per 100g (110.0g)"

    def test_high_check(self):
        result = validate_food(_food(calories=200, protein=10))
        assert not result.valid
        assert "significantly higher" in result.reason

    def test_high_within_tolerance(self):
        # expected 40, +30% is 52
        assert validate_food(_food(calories=50, protein=10)).valid

    def test_low_check(self):
        result = validate_food(_food(calories=10, protein=20))
        assert not result.valid
        assert result.reason == "Calories (10) too low for macros (expected ~80)"

    def test_low_check_needs_expected_above_threshold(self):
        # expected 40 is under the low-check threshold
        assert validate_food(_food(calories=1, protein=10)).valid

    def test_small_macros_small_surplus_is_valid(self):
        assert validate_food(_food(calories=30, protein=1, carbs=1, fat=1)).valid

    def test_spirits_without_macros_are_valid(self):
        assert validate_food(_food(calories=231)).valid

    def test_large_calories_without_macros_rejected(self):
        # missing macros count as zero, so 500 kcal has nothing to explain it
        result = validate_food({"calories": 500})
        assert not result.valid
        assert "significantly higher" in result.reason

    def test_unexplained_surplus_threshold(self):
        assert validate_food(_food(calories=450)).valid
        assert not validate_food(_food(calories=451)).valid

    def test_large_serving_scales_ceilings(self):
        food = _food(calories=1500, fat=166, serving_size=250, serving_unit="g")
        assert validate_food(food).valid

    def test_per_100g_serving_not_scaled(self):
        food = _food(calories=1500, fat=166, serving_size=100, serving_unit="g")
        assert not validate_food(food).valid

    def test_unknown_serving_unit_not_scaled(self):
        food = _food(calories=1500, fat=166, serving_size=3, serving_unit="slice")
        assert not validate_food(food).valid

    def test_does_not_modify_mapping(self):
        data = {"calories": 900, "protein": 1, "carbs": 1, "fat": 1}
        validate_food(data)
        assert data == {"calories": 900, "protein": 1, "carbs": 1, "fat": 1}

    def test_result_is_truthy_when_valid(self):
        assert validate_food(_food(calories=52, protein=0.3, carbs=14, fat=0.2))
        assert not validate_food(_food(calories=10, protein=20))


class TestFilterValid:
    def test_keeps_order(self):
        a = _food("A", calories=52, protein=0.3, carbs=14, fat=0.2)
        bad = _food("Bad", calories=900, protein=1, carbs=1, fat=1)
        b = _food("B", calories=165, protein=31, fat=3.6)
        c = _food("C")
        assert filter_valid([a, bad, b, c]) == [a, b, c]

    def test_empty(self):
        assert filter_valid([]) == []

    def test_accepts_generators(self):
        foods = (_food(str(i), calories=40, protein=10) for i in range(3))
        assert len(filter_valid(foods)) == 3


class TestNutritionConfidence:
    def test_invalid_is_zero(self):
        assert nutrition_confidence(_food(calories=10, protein=20)) == 0

    def test_exact_reference_data_capped(self):
        food = _food(calories=80, protein=10, carbs=10, data_type=SR_LEGACY)
        assert nutrition_confidence(food) == 100

    def test_branded_penalty(self):
        food = _food(calories=80, protein=10, carbs=10, data_type=BRANDED)
        assert nutrition_confidence(food) == 95

    def test_mismatch_reduces_score(self):
        # 10% over Atwater calories
        food = _food(calories=88, protein=10, carbs=10)
        assert nutrition_confidence(food) == 90
