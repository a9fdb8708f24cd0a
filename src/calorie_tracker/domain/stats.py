"""Domain models for statistics."""

from dataclasses import dataclass

from calorie_tracker.domain.meals import MealTotals


@dataclass(frozen=True)
class DayCalories:
    """Calories consumed on one day of a week chart."""

    label: str
    date: str
    calories: float


@dataclass(frozen=True)
class WeekSummary:
    """Monday-to-Sunday calories with the average over logged days."""

    start: str
    end: str
    days: list[DayCalories]
    average: int


@dataclass(frozen=True)
class MacroProgress:
    """Consumed vs. target for one nutrient, ratio capped at 1."""

    consumed: float
    target: float
    ratio: float


@dataclass(frozen=True)
class DailyProgress:
    """A day's consumption measured against the user's targets."""

    date: str
    totals: MealTotals
    calories: MacroProgress
    proteins: MacroProgress
    carbs: MacroProgress
    fats: MacroProgress
    calories_remaining: float
