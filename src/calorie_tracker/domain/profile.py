"""Profile and nutrition target models."""

from dataclasses import dataclass
from enum import StrEnum


class ActivityLevel(StrEnum):
    """Self-reported weekly activity."""

    MINIMUM = "minimum"
    LIGHT = "light"
    MODERATE = "moderate"
    HIGH = "high"


class UnitSystem(StrEnum):
    """Preferred display units. Storage is always metric."""

    METRIC = "metric"
    IMPERIAL = "imperial"


@dataclass(frozen=True)
class UserProfile:
    """Biometrics used to derive daily targets (kg, cm, years)."""

    weight: float = 70
    height: float = 170
    age: int = 30
    goal_weight: float = 70
    activity_level: ActivityLevel = ActivityLevel.LIGHT


@dataclass(frozen=True)
class NutritionTargets:
    """Daily calorie (kcal) and macro (grams) targets."""

    calories: int
    proteins: int
    carbs: int
    fats: int
