"""Statistics over the meal history."""

from dataclasses import dataclass
from datetime import date, timedelta

from calorie_tracker.domain.dates import Clock, date_key, local_clock, parse_date_key
from calorie_tracker.domain.profile import NutritionTargets
from calorie_tracker.domain.stats import (
    DailyProgress,
    DayCalories,
    MacroProgress,
    WeekSummary,
)
from calorie_tracker.rounding import round_half_up
from calorie_tracker.services.meals import MealStore
from calorie_tracker.services.targets import progress_ratio

WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def week_start(day: date) -> date:
    """Return the Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


@dataclass
class StatsService:
    """Chart and progress data built from the meal store."""

    meal_store: MealStore
    clock: Clock | None = None

    def today(self) -> date:
        """Return today's local date."""
        return (self.clock or local_clock())().date()

    def get_week_calories(self, day: date | str | None = None) -> WeekSummary:
        """Return Monday-to-Sunday calories for the week containing ``day``."""
        if isinstance(day, str):
            day = parse_date_key(day)
        start = week_start(day or self.today())
        keys = [date_key(start + timedelta(days=offset)) for offset in range(7)]
        calories = self.meal_store.get_daily_calories(keys)

        days = [
            DayCalories(label=label, date=key, calories=calories[key])
            for label, key in zip(WEEKDAY_LABELS, keys, strict=True)
        ]
        total = sum(item.calories for item in days)
        days_with_data = sum(1 for item in days if item.calories > 0)
        average = round_half_up(total / days_with_data) if days_with_data else 0
        return WeekSummary(start=keys[0], end=keys[-1], days=days, average=average)

    def get_daily_progress(
        self, day: str, targets: NutritionTargets
    ) -> DailyProgress:
        """Return a day's consumption against the given targets."""
        totals = self.meal_store.get_daily_totals(day)
        return DailyProgress(
            date=day,
            totals=totals,
            calories=_progress(totals.total_calories, targets.calories),
            proteins=_progress(totals.total_proteins, targets.proteins),
            carbs=_progress(totals.total_carbs, targets.carbs),
            fats=_progress(totals.total_fats, targets.fats),
            calories_remaining=max(targets.calories - totals.total_calories, 0),
        )


def _progress(consumed: float, target: float) -> MacroProgress:
    return MacroProgress(
        consumed=consumed, target=target, ratio=progress_ratio(consumed, target)
    )
