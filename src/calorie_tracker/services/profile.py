"""User profile store with derived nutrition targets."""

import logging
import math
from dataclasses import asdict, replace
from typing import Any

from calorie_tracker.domain.profile import (
    ActivityLevel,
    NutritionTargets,
    UnitSystem,
    UserProfile,
)
from calorie_tracker.errors import ValidationError
from calorie_tracker.services.persistence import PersistentStore
from calorie_tracker.services.targets import calculate_nutrition_targets

logger = logging.getLogger(__name__)

_POSITIVE_FIELDS = ("weight", "height", "age", "goal_weight")


class ProfileStore(PersistentStore):
    """Persisted profile; targets are recomputed on every change and load."""

    storage_key = "profile-storage"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self._profile = UserProfile()
        self._unit_system = UnitSystem.METRIC
        self._targets = calculate_nutrition_targets(self._profile)
        super().__init__(*args, **kwargs)

    @property
    def targets(self) -> NutritionTargets:
        """Return the targets derived from the current profile."""
        with self._lock:
            return self._targets

    @property
    def unit_system(self) -> UnitSystem:
        """Return the preferred display units."""
        with self._lock:
            return self._unit_system

    @property
    def is_imperial(self) -> bool:
        """Return True when the user prefers imperial units."""
        return self.unit_system is UnitSystem.IMPERIAL

    def get_profile(self) -> UserProfile:
        """Return the current profile."""
        with self._lock:
            return self._profile

    def update(self, **fields: Any) -> UserProfile:
        """Replace any subset of profile fields and recompute targets.

        ``unit_system`` may be passed too. Every field is validated before
        anything changes, so a rejected update leaves the store untouched.
        """
        unit_system = fields.pop("unit_system", None)
        if unit_system is not None:
            unit_system = _resolve_unit_system(unit_system)
        unknown = set(fields) - set(asdict(self._profile))
        if unknown:
            raise ValidationError(f"Unknown profile fields: {sorted(unknown)}")
        for name in _POSITIVE_FIELDS:
            if name in fields:
                _validate_positive(name, fields[name])
        if "activity_level" in fields:
            try:
                fields["activity_level"] = ActivityLevel(fields["activity_level"])
            except ValueError as exc:
                raise ValidationError(
                    f"Unknown activity level: {fields['activity_level']!r}"
                ) from exc

        with self._lock:
            self._profile = replace(self._profile, **fields)
            self._targets = calculate_nutrition_targets(self._profile)
            if unit_system is not None:
                self._unit_system = unit_system
            self._persist()
            profile = self._profile
        logger.info("Profile updated; daily target %s kcal", self._targets.calories)
        return profile

    def set_weight(self, weight: float) -> UserProfile:
        """Set the current weight (kg)."""
        return self.update(weight=weight)

    def set_height(self, height: float) -> UserProfile:
        """Set the height (cm)."""
        return self.update(height=height)

    def set_age(self, age: int) -> UserProfile:
        """Set the age (years)."""
        return self.update(age=age)

    def set_goal_weight(self, goal_weight: float) -> UserProfile:
        """Set the goal weight (kg)."""
        return self.update(goal_weight=goal_weight)

    def set_activity_level(self, level: ActivityLevel | str) -> UserProfile:
        """Set the activity level."""
        return self.update(activity_level=level)

    def set_unit_system(self, unit_system: UnitSystem | str) -> None:
        """Set the preferred display units."""
        resolved = _resolve_unit_system(unit_system)
        with self._lock:
            self._unit_system = resolved
            self._persist()

    def _snapshot(self) -> dict[str, Any]:
        profile = asdict(self._profile)
        profile["activity_level"] = self._profile.activity_level.value
        return {
            "profile": profile,
            "unit_system": self._unit_system.value,
            "targets": asdict(self._targets),
        }

    def _restore(self, state: dict[str, Any]) -> None:
        stored = state.get("profile") or {}
        defaults = UserProfile()
        self._profile = UserProfile(
            weight=float(stored.get("weight", defaults.weight)),
            height=float(stored.get("height", defaults.height)),
            age=int(stored.get("age", defaults.age)),
            goal_weight=float(stored.get("goal_weight", defaults.goal_weight)),
            activity_level=ActivityLevel(
                stored.get("activity_level", defaults.activity_level)
            ),
        )
        self._unit_system = UnitSystem(state.get("unit_system", UnitSystem.METRIC))
        # Stored targets are ignored; they always follow the profile.
        self._targets = calculate_nutrition_targets(self._profile)


def _resolve_unit_system(value: UnitSystem | str) -> UnitSystem:
    try:
        return UnitSystem(value)
    except ValueError as exc:
        raise ValidationError(f"Unknown unit system: {value!r}") from exc


def _validate_positive(name: str, value: object) -> None:
    if (
        isinstance(value, bool)
        or not isinstance(value, int | float)
        or not math.isfinite(value)
        or value <= 0
    ):
        raise ValidationError(f"Profile {name} must be a positive number")
