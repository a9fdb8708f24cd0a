"""Daily nutrition targets from a user profile.

Basal metabolic rate uses the Mifflin-St Jeor equation. The profile does
not collect gender, so the male and female variants are averaged; this is
an intentional approximation and must stay gender-less.
"""

import math

from calorie_tracker.domain.profile import ActivityLevel, NutritionTargets, UserProfile
from calorie_tracker.rounding import round_half_up

ACTIVITY_MULTIPLIERS: dict[ActivityLevel, float] = {
    ActivityLevel.MINIMUM: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.HIGH: 1.725,
}

MIN_CALORIES = 1200
LOSE_DEFICIT = 500
GAIN_SURPLUS = 300
GOAL_TOLERANCE_KG = 1

PROTEIN_SHARE = 0.25
CARBS_SHARE = 0.45
FAT_SHARE = 0.30
KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARBS = 4
KCAL_PER_G_FAT = 9

DEFAULT_TARGETS = NutritionTargets(calories=2000, proteins=120, carbs=250, fats=65)


def calculate_bmr(weight: float, height: float, age: float) -> float:
    """Return the gender-averaged Mifflin-St Jeor BMR in kcal/day."""
    male = 10 * weight + 6.25 * height - 5 * age + 5
    female = 10 * weight + 6.25 * height - 5 * age - 161
    return (male + female) / 2


def calculate_tdee(bmr: float, activity_level: ActivityLevel | str) -> float:
    """Scale BMR by the activity multiplier (light when unknown)."""
    try:
        level = ActivityLevel(activity_level)
    except ValueError:
        level = ActivityLevel.LIGHT
    return bmr * ACTIVITY_MULTIPLIERS[level]


def calculate_nutrition_targets(profile: UserProfile) -> NutritionTargets:
    """Return daily calorie and macro targets for a profile."""
    bmr = calculate_bmr(profile.weight, profile.height, profile.age)
    tdee = calculate_tdee(bmr, profile.activity_level)

    weight_diff = profile.goal_weight - profile.weight
    if weight_diff < -GOAL_TOLERANCE_KG:
        tdee -= LOSE_DEFICIT
    elif weight_diff > GOAL_TOLERANCE_KG:
        tdee += GAIN_SURPLUS

    calories = max(round_half_up(tdee), MIN_CALORIES)
    return NutritionTargets(
        calories=calories,
        proteins=round_half_up(calories * PROTEIN_SHARE / KCAL_PER_G_PROTEIN),
        carbs=round_half_up(calories * CARBS_SHARE / KCAL_PER_G_CARBS),
        fats=round_half_up(calories * FAT_SHARE / KCAL_PER_G_FAT),
    )


def progress_ratio(consumed: float, target: float) -> float:
    """Return consumed/target capped at 1; 0 when the target is unusable."""
    if not math.isfinite(target) or target <= 0:
        return 0.0
    ratio = consumed / target
    if not math.isfinite(ratio) or ratio < 0:
        return 0.0
    return min(ratio, 1.0)
