"""Meal record store."""

import logging
import math
import time
from collections.abc import Callable, Iterable
from dataclasses import replace
from typing import Any
from uuid import uuid4

from calorie_tracker.domain.dates import Clock, date_key, local_clock, parse_date_key
from calorie_tracker.domain.meals import (
    Ingredient,
    MealRecord,
    MealTotals,
    meal_from_dict,
    meal_to_dict,
)
from calorie_tracker.errors import ValidationError
from calorie_tracker.services.persistence import (
    ErrorCallback,
    PersistentStore,
    SnapshotRepository,
)
from calorie_tracker.services.totals import compute_totals, sum_totals, toggle_ingredient

MIN_HEALTH = 1
MAX_HEALTH = 10

logger = logging.getLogger(__name__)


def generate_meal_id() -> str:
    """Return a unique meal id: epoch milliseconds plus a random suffix."""
    return f"meal_{time.time_ns() // 1_000_000}_{uuid4().hex[:9]}"


class MealStore(PersistentStore):
    """Persisted meal history, newest first."""

    storage_key = "meal-storage"

    def __init__(
        self,
        repository: SnapshotRepository,
        *,
        clock: Clock | None = None,
        id_factory: Callable[[], str] = generate_meal_id,
        retries: int = 2,
        on_error: ErrorCallback | None = None,
    ) -> None:
        self._meals: list[MealRecord] = []
        self._clock = clock or local_clock()
        self._id_factory = id_factory
        super().__init__(repository, retries=retries, on_error=on_error)

    @property
    def meals(self) -> list[MealRecord]:
        """Return all meals, newest first."""
        with self._lock:
            return list(self._meals)

    def add_meal(
        self,
        title: str,
        health: int,
        ingredients: Iterable[Ingredient],
        image_uri: str | None = None,
    ) -> MealRecord:
        """Create a meal from analyzed ingredients and persist it."""
        items = tuple(ingredients)
        _validate_title(title)
        _validate_health(health)
        _validate_ingredients(items)

        now = self._clock()
        meal = MealRecord(
            id=self._id_factory(),
            title=title,
            health=health,
            ingredients=items,
            totals=compute_totals(items, 1),
            servings=1,
            image_uri=image_uri,
            created_at=now,
            date=date_key(now),
        )
        with self._lock:
            self._meals.insert(0, meal)
            self._persist()
        logger.info("Added meal %s for %s", meal.id, meal.date)
        return meal

    def update_meal(
        self,
        meal_id: str,
        *,
        title: str | None = None,
        health: int | None = None,
        ingredients: Iterable[Ingredient] | None = None,
        servings: float | None = None,
    ) -> MealRecord | None:
        """Merge the given fields into a meal; None when the id is unknown.

        Totals are recomputed from the merged ingredients and servings
        whenever either of them is part of the update.
        """
        items = tuple(ingredients) if ingredients is not None else None
        if title is not None:
            _validate_title(title)
        if health is not None:
            _validate_health(health)
        if items is not None:
            _validate_ingredients(items)
        if servings is not None:
            _validate_servings(servings)

        with self._lock:
            index = self._index_of(meal_id)
            if index is None:
                return None
            meal = self._meals[index]
            changes: dict[str, Any] = {}
            if title is not None:
                changes["title"] = title
            if health is not None:
                changes["health"] = health
            if items is not None:
                changes["ingredients"] = items
            if servings is not None:
                changes["servings"] = servings
            if items is not None or servings is not None:
                changes["totals"] = compute_totals(
                    changes.get("ingredients", meal.ingredients),
                    changes.get("servings", meal.servings),
                )
            updated = replace(meal, **changes)
            self._meals[index] = updated
            self._persist()
        return updated

    def toggle_ingredient(self, meal_id: str, index: int) -> MealRecord | None:
        """Exclude or restore one ingredient of a meal."""
        with self._lock:
            meal = self.get_meal(meal_id)
            if meal is None:
                return None
            toggled = toggle_ingredient(meal.ingredients, index)
            return self.update_meal(meal_id, ingredients=toggled)

    def remove_meal(self, meal_id: str) -> None:
        """Delete a meal; unknown ids are ignored."""
        with self._lock:
            index = self._index_of(meal_id)
            if index is None:
                return
            del self._meals[index]
            self._persist()
        logger.info("Removed meal %s", meal_id)

    def get_meal(self, meal_id: str) -> MealRecord | None:
        """Return a meal by id."""
        with self._lock:
            index = self._index_of(meal_id)
            return None if index is None else self._meals[index]

    def get_meals_by_date(self, day: str) -> list[MealRecord]:
        """Return meals logged on a ``YYYY-MM-DD`` day, in store order."""
        with self._lock:
            return [meal for meal in self._meals if meal.date == day]

    def get_daily_totals(self, day: str) -> MealTotals:
        """Return the sum of stored meal totals for a day."""
        return sum_totals(meal.totals for meal in self.get_meals_by_date(day))

    def get_daily_calories(self, days: Iterable[str]) -> dict[str, float]:
        """Return total calories for each requested day."""
        keys = list(days)
        for key in keys:
            parse_date_key(key)
        calories = dict.fromkeys(keys, 0)
        with self._lock:
            for meal in self._meals:
                if meal.date in calories:
                    calories[meal.date] += meal.totals.total_calories
        return calories

    def clear_all_meals(self) -> None:
        """Delete the whole meal history."""
        with self._lock:
            self._meals = []
            self._persist()

    def _index_of(self, meal_id: str) -> int | None:
        for index, meal in enumerate(self._meals):
            if meal.id == meal_id:
                return index
        return None

    def _snapshot(self) -> dict[str, Any]:
        return {"meals": [meal_to_dict(meal) for meal in self._meals]}

    def _restore(self, state: dict[str, Any]) -> None:
        self._meals = [meal_from_dict(row) for row in state.get("meals", [])]


def _validate_title(title: object) -> None:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("Meal title is required")


def _validate_health(health: object) -> None:
    if (
        isinstance(health, bool)
        or not isinstance(health, int)
        or not MIN_HEALTH <= health <= MAX_HEALTH
    ):
        raise ValidationError(
            f"Health score must be an integer {MIN_HEALTH}-{MAX_HEALTH}"
        )


def _validate_servings(servings: object) -> None:
    if (
        isinstance(servings, bool)
        or not isinstance(servings, int | float)
        or not math.isfinite(servings)
        or servings <= 0
    ):
        raise ValidationError("Servings must be a positive number")


def _validate_ingredients(ingredients: tuple[object, ...]) -> None:
    for item in ingredients:
        if not isinstance(item, Ingredient):
            raise ValidationError("Ingredients must be Ingredient records")
        for name in ("weight", "calories", "proteins", "carbs", "fats"):
            value = getattr(item, name)
            if not math.isfinite(value) or value < 0:
                raise ValidationError(
                    f"Ingredient {item.title!r} has invalid {name}: {value!r}"
                )
