"""Favorite meals store."""

from typing import Any

from calorie_tracker.domain.meals import MealRecord, meal_from_dict, meal_to_dict
from calorie_tracker.services.persistence import PersistentStore


class FavoriteStore(PersistentStore):
    """Snapshots of liked meals, independent of the meal history.

    A favorite is a copy taken when the meal was liked; later edits or
    deletion of the original meal do not touch it.
    """

    storage_key = "favorite-storage"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self._favorites: list[MealRecord] = []
        super().__init__(*args, **kwargs)

    @property
    def favorites(self) -> list[MealRecord]:
        """Return favorites, most recently added first."""
        with self._lock:
            return list(self._favorites)

    def add_favorite(self, meal: MealRecord) -> None:
        """Add a meal snapshot unless one with the same id exists."""
        with self._lock:
            if self._contains(meal.id):
                return
            self._favorites.insert(0, meal_from_dict(meal_to_dict(meal)))
            self._persist()

    def remove_favorite(self, meal_id: str) -> None:
        """Remove a favorite by meal id; unknown ids are ignored."""
        with self._lock:
            kept = [item for item in self._favorites if item.id != meal_id]
            if len(kept) == len(self._favorites):
                return
            self._favorites = kept
            self._persist()

    def is_favorite(self, meal_id: str) -> bool:
        """Return True when a favorite exists for the meal id."""
        with self._lock:
            return self._contains(meal_id)

    def get_favorite(self, meal_id: str) -> MealRecord | None:
        """Return the stored snapshot for a meal id."""
        with self._lock:
            for item in self._favorites:
                if item.id == meal_id:
                    return item
            return None

    def toggle_favorite(self, meal: MealRecord) -> bool:
        """Add or remove a meal and return whether it is now a favorite."""
        with self._lock:
            if self._contains(meal.id):
                self.remove_favorite(meal.id)
                return False
            self.add_favorite(meal)
            return True

    def clear_all(self) -> None:
        """Remove every favorite."""
        with self._lock:
            self._favorites = []
            self._persist()

    def _contains(self, meal_id: str) -> bool:
        return any(item.id == meal_id for item in self._favorites)

    def _snapshot(self) -> dict[str, Any]:
        return {"favorites": [meal_to_dict(item) for item in self._favorites]}

    def _restore(self, state: dict[str, Any]) -> None:
        self._favorites = [meal_from_dict(row) for row in state.get("favorites", [])]
