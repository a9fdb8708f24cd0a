"""Meal aggregate engine.

``compute_totals`` is the only code path that turns ingredients into
``MealTotals``. Every edit to ingredients or servings must call it again
with the full inputs; totals are never patched incrementally.
"""

from collections.abc import Iterable, Sequence
from dataclasses import replace

from calorie_tracker.domain.meals import Ingredient, MealTotals
from calorie_tracker.rounding import round_half_up

MACRO_DIGITS = 1


def compute_totals(ingredients: Iterable[Ingredient], servings: float = 1) -> MealTotals:
    """Sum non-excluded ingredients, scale by servings and round."""
    calories = proteins = carbs = fats = weight = 0.0
    for item in ingredients:
        if item.excluded:
            continue
        calories += item.calories
        proteins += item.proteins
        carbs += item.carbs
        fats += item.fats
        weight += item.weight

    return MealTotals(
        total_calories=round_half_up(calories * servings),
        total_proteins=round_half_up(proteins * servings, MACRO_DIGITS),
        total_carbs=round_half_up(carbs * servings, MACRO_DIGITS),
        total_fats=round_half_up(fats * servings, MACRO_DIGITS),
        total_weight=round_half_up(weight * servings),
    )


def toggle_ingredient(
    ingredients: Sequence[Ingredient], index: int
) -> tuple[Ingredient, ...]:
    """Return a copy with the ingredient at ``index`` excluded or restored."""
    if not 0 <= index < len(ingredients):
        raise IndexError(f"Ingredient index out of range: {index}")
    target = ingredients[index]
    toggled = replace(target, excluded=not target.excluded)
    return (*ingredients[:index], toggled, *ingredients[index + 1 :])


def reset_exclusions(ingredients: Iterable[Ingredient]) -> tuple[Ingredient, ...]:
    """Return a copy with every ingredient included again."""
    return tuple(
        replace(item, excluded=False) if item.excluded else item
        for item in ingredients
    )


def scale_ingredient(ingredient: Ingredient, servings: float) -> Ingredient:
    """Return an ingredient's display values at a serving multiplier."""
    return replace(
        ingredient,
        weight=round_half_up(ingredient.weight * servings),
        calories=round_half_up(ingredient.calories * servings),
        proteins=round_half_up(ingredient.proteins * servings, MACRO_DIGITS),
        carbs=round_half_up(ingredient.carbs * servings, MACRO_DIGITS),
        fats=round_half_up(ingredient.fats * servings, MACRO_DIGITS),
    )


def sum_totals(totals: Iterable[MealTotals]) -> MealTotals:
    """Add already-computed meal totals (sum of sums, not of ingredients).

    Macro sums are rounded to one decimal only to drop float noise from
    adding one-decimal values.
    """
    calories = proteins = carbs = fats = weight = 0
    for item in totals:
        calories += item.total_calories
        proteins += item.total_proteins
        carbs += item.total_carbs
        fats += item.total_fats
        weight += item.total_weight
    return MealTotals(
        total_calories=calories,
        total_proteins=round(proteins, MACRO_DIGITS),
        total_carbs=round(carbs, MACRO_DIGITS),
        total_fats=round(fats, MACRO_DIGITS),
        total_weight=weight,
    )
