"""Tests for stats service."""

from datetime import date, datetime

from calorie_tracker.domain.profile import NutritionTargets
from calorie_tracker.services.meals import MealStore
from calorie_tracker.services.stats import StatsService, week_start
from tests.conftest import NEW_YORK, InMemorySnapshotRepository, salad_ingredients


def test_week_start_is_monday() -> None:
    assert week_start(date(2024, 3, 5)) == date(2024, 3, 4)
    assert week_start(date(2024, 3, 10)) == date(2024, 3, 4)
    assert week_start(date(2024, 3, 4)) == date(2024, 3, 4)


def test_week_calories_average_over_logged_days(
    repository: InMemorySnapshotRepository,
) -> None:
    moments = iter(
        [
            datetime(2024, 3, 4, 9, 0, tzinfo=NEW_YORK),
            datetime(2024, 3, 6, 9, 0, tzinfo=NEW_YORK),
            datetime(2024, 3, 6, 19, 0, tzinfo=NEW_YORK),
            datetime(2024, 3, 11, 9, 0, tzinfo=NEW_YORK),
        ]
    )
    meal_store = MealStore(repository, clock=lambda: next(moments))
    for _ in range(4):
        meal_store.add_meal("Salad", 8, salad_ingredients())
    service = StatsService(meal_store)

    summary = service.get_week_calories("2024-03-07")

    assert summary.start == "2024-03-04"
    assert summary.end == "2024-03-10"
    assert [day.label for day in summary.days][:2] == ["Mon", "Tue"]
    assert [day.calories for day in summary.days] == [100, 0, 200, 0, 0, 0, 0]
    assert summary.average == 150
    meal_store.close()


def test_empty_week_has_zero_average(meal_store: MealStore, clock) -> None:
    service = StatsService(meal_store, clock=clock)

    summary = service.get_week_calories()

    assert summary.start == "2024-03-04"
    assert summary.average == 0


def test_daily_progress(meal_store: MealStore, clock) -> None:
    meal_store.add_meal("Salad", 8, salad_ingredients())
    service = StatsService(meal_store, clock=clock)
    targets = NutritionTargets(calories=400, proteins=0, carbs=1, fats=10)

    progress = service.get_daily_progress("2024-03-05", targets)

    assert progress.totals.total_calories == 100
    assert progress.calories.ratio == 0.25
    assert progress.proteins.ratio == 0.0
    assert progress.carbs.ratio == 1.0
    assert progress.fats.ratio == 1.0
    assert progress.calories_remaining == 300


def test_today_uses_clock(meal_store: MealStore, clock) -> None:
    assert StatsService(meal_store, clock=clock).today() == date(2024, 3, 5)
