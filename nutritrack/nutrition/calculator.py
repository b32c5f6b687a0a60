"""Nutrient scaling, daily totals, goal progress and period summaries."""

from __future__ import annotations

import calendar
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, timedelta

from ..models import MEALS, FoodRecord, LoggedEntry, NutrientTotals, Servings

ACTIVITY_MULTIPLIERS: dict[str, float] = {
    "sedentary": 1.2,     # little or no exercise
    "light": 1.375,       # 1-3 days/week
    "moderate": 1.55,     # 3-5 days/week
    "active": 1.725,      # 6-7 days/week
    "veryActive": 1.9,    # physical job or twice-daily training
}

# Share of calories from protein / carbs / fat
MACRO_PRESETS: dict[str, tuple[float, float, float]] = {
    "weightLoss": (0.25, 0.45, 0.30),
    "muscleGain": (0.25, 0.50, 0.25),
    "maintenance": (0.20, 0.50, 0.30),
    "balanced": (0.20, 0.50, 0.30),
}

CALORIE_ADJUSTMENTS: dict[str, int] = {
    "weightLoss": -500,
    "muscleGain": 300,
    "maintenance": 0,
    "balanced": 0,
}

ON_TRACK_LOW = 0.9
ON_TRACK_HIGH = 1.1


def _round_half_up(x: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return int(x * factor + 0.5) / factor if x >= 0 else -int(-x * factor + 0.5) / factor


@dataclass
class NutritionGoals:
    """Daily nutrition goals."""

    calories: float = 2000.0
    protein: float = 150.0
    carbs: float = 200.0
    fat: float = 65.0
    fiber: float = 30.0

    def as_dict(self) -> dict[str, float]:
        return {
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fat": self.fat,
            "fiber": self.fiber,
        }


def portion_nutrients(food: FoodRecord, servings: Servings | float) -> NutrientTotals:
    """Nutrients for ``servings`` servings of ``food``.

    Calories are rounded to whole numbers, everything else to 0.1 g.
    """
    qty = float(servings)
    return NutrientTotals(
        calories=_round_half_up(food.calories * qty),
        protein=_round_half_up(food.protein * qty, 1),
        carbs=_round_half_up(food.carbs * qty, 1),
        fat=_round_half_up(food.fat * qty, 1),
        fiber=_round_half_up((food.fiber or 0) * qty, 1),
    )


def make_logged_entry(
    food: FoodRecord,
    servings: Servings,
    entry_date: str,
    meal: str,
) -> LoggedEntry:
    """Scale a food by a servings multiplier into a new log entry.

    The food record itself is left untouched so it can be logged again
    with a different quantity.
    """
    if meal not in MEALS:
        raise ValueError(f"Unknown meal {meal!r} (expected one of {', '.join(MEALS)})")
    if not isinstance(servings, Servings):
        servings = Servings(float(servings))

    n = portion_nutrients(food, servings)
    return LoggedEntry(
        food=food,
        quantity=servings.value,
        date=entry_date,
        meal=meal,
        calories=n.calories,
        protein=n.protein,
        carbs=n.carbs,
        fat=n.fat,
        fiber=n.fiber,
    )


def daily_totals(entries: Iterable[LoggedEntry], entry_date: str) -> NutrientTotals:
    """Sum already-scaled nutrients of the entries logged on ``entry_date``."""
    totals = NutrientTotals()
    for entry in entries:
        if entry.date == entry_date:
            totals = totals + entry.nutrients
    return totals


def meal_totals(entries: Iterable[LoggedEntry]) -> dict[str, NutrientTotals]:
    """Per-meal totals, every meal present even when empty."""
    result = {meal: NutrientTotals() for meal in MEALS}
    for entry in entries:
        if entry.meal in result:
            result[entry.meal] = result[entry.meal] + entry.nutrients
    return result


def progress(totals: NutrientTotals, goals: NutritionGoals) -> dict[str, float]:
    """Percentage of each goal reached (0 when the goal is unset)."""
    current = totals.as_dict()
    return {
        key: (current[key] / target * 100) if target > 0 else 0.0
        for key, target in goals.as_dict().items()
    }


# ---- goal calculator --------------------------------------------------------


def calculate_bmr(weight_kg: float, height_cm: float, age: float, sex: str) -> int:
    """Basal metabolic rate (Mifflin-St Jeor), kcal/day."""
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    modifier = 5 if sex == "male" else -161
    return int(_round_half_up(base + modifier))


def calculate_tdee(bmr: float, activity_level: str) -> int:
    """Total daily energy expenditure for an activity level."""
    multiplier = ACTIVITY_MULTIPLIERS.get(activity_level, 1.2)
    return int(_round_half_up(bmr * multiplier))


def calculate_calorie_target(tdee: float, goal_type: str) -> float:
    return tdee + CALORIE_ADJUSTMENTS.get(goal_type, 0)


def calculate_macros(calories: float, preset: str) -> dict[str, int]:
    """Protein/carbs/fat grams for a calorie target and macro preset."""
    protein, carbs, fat = MACRO_PRESETS.get(preset, MACRO_PRESETS["balanced"])
    return {
        "protein": int(_round_half_up(calories * protein / 4)),
        "carbs": int(_round_half_up(calories * carbs / 4)),
        "fat": int(_round_half_up(calories * fat / 9)),
    }


def goals_from_profile(
    weight_kg: float,
    height_cm: float,
    age: float,
    sex: str,
    activity_level: str = "sedentary",
    goal_type: str = "balanced",
    fiber: float = 30.0,
) -> NutritionGoals:
    """Suggested daily goals for a body profile and goal type."""
    tdee = calculate_tdee(calculate_bmr(weight_kg, height_cm, age, sex), activity_level)
    calories = calculate_calorie_target(tdee, goal_type)
    macros = calculate_macros(calories, goal_type)
    return NutritionGoals(
        calories=calories,
        protein=macros["protein"],
        carbs=macros["carbs"],
        fat=macros["fat"],
        fiber=fiber,
    )


# ---- weekly / monthly summaries ----------------------------------------------


@dataclass
class DaySummary:
    date: str
    totals: NutrientTotals
    has_data: bool
    on_track: bool


@dataclass
class PeriodSummary:
    """Aggregated nutrition over a range of days."""

    days: list[DaySummary] = field(default_factory=list)

    @property
    def days_with_data(self) -> list[DaySummary]:
        return [d for d in self.days if d.has_data]

    def _average(self, attr: str) -> float:
        days = self.days_with_data
        if not days:
            return 0.0
        return sum(getattr(d.totals, attr) for d in days) / len(days)

    @property
    def avg_calories(self) -> float:
        return self._average("calories")

    @property
    def avg_protein(self) -> float:
        return self._average("protein")

    @property
    def avg_carbs(self) -> float:
        return self._average("carbs")

    @property
    def avg_fat(self) -> float:
        return self._average("fat")

    @property
    def avg_fiber(self) -> float:
        return self._average("fiber")

    @property
    def total_calories(self) -> float:
        return sum(d.totals.calories for d in self.days)

    @property
    def days_on_track(self) -> int:
        return sum(1 for d in self.days if d.on_track)

    @property
    def highest_day(self) -> DaySummary | None:
        days = self.days_with_data
        # first maximum wins
        return max(days, key=lambda d: d.totals.calories) if days else None

    @property
    def lowest_day(self) -> DaySummary | None:
        days = self.days_with_data
        return min(days, key=lambda d: d.totals.calories) if days else None

    @property
    def streak(self) -> int:
        """Consecutive on-track days counting back from the last day.

        Days with nothing logged are skipped rather than ending the streak.
        """
        count = 0
        for day in reversed(self.days):
            if day.has_data and day.on_track:
                count += 1
            elif day.has_data:
                break
        return count

    def summary_dict(self) -> dict:
        """Return a summary dict for JSON serialization."""
        highest = self.highest_day
        lowest = self.lowest_day
        return {
            "avg_calories": round(self.avg_calories),
            "avg_protein": round(self.avg_protein),
            "avg_carbs": round(self.avg_carbs),
            "avg_fat": round(self.avg_fat),
            "avg_fiber": round(self.avg_fiber),
            "total_calories": round(self.total_calories),
            "days_with_data": len(self.days_with_data),
            "days_on_track": self.days_on_track,
            "highest_day": highest.date if highest else None,
            "lowest_day": lowest.date if lowest else None,
            "streak": self.streak,
        }


def period_dates(view: str, today: date | None = None) -> list[str]:
    """ISO dates covered by a ``weekly`` or ``monthly`` view, oldest first."""
    today = today or date.today()
    if view == "weekly":
        return [(today - timedelta(days=i)).isoformat() for i in range(6, -1, -1)]
    if view == "monthly":
        last = calendar.monthrange(today.year, today.month)[1]
        return [
            date(today.year, today.month, day).isoformat()
            for day in range(1, min(last, today.day) + 1)
        ]
    raise ValueError(f"Unknown summary view {view!r} (weekly / monthly)")


def summarize_period(
    entries: Sequence[LoggedEntry],
    goals: NutritionGoals,
    dates: Sequence[str],
) -> PeriodSummary:
    """Per-day totals and on-track flags for each date in ``dates``."""
    days: list[DaySummary] = []
    for day in dates:
        totals = daily_totals(entries, day)
        has_data = totals.calories > 0
        on_track = (
            has_data
            and goals.calories * ON_TRACK_LOW <= totals.calories <= goals.calories * ON_TRACK_HIGH
        )
        days.append(DaySummary(date=day, totals=totals, has_data=has_data, on_track=on_track))
    return PeriodSummary(days=days)
