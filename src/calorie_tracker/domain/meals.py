"""Domain models for logged meals."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Ingredient:
    """One food component of a meal, with nutrition at its stored weight."""

    title: str
    weight: float
    calories: float
    proteins: float
    carbs: float
    fats: float
    excluded: bool = False


@dataclass(frozen=True)
class MealTotals:
    """Derived totals for a meal or a day of meals."""

    total_calories: float = 0
    total_proteins: float = 0.0
    total_carbs: float = 0.0
    total_fats: float = 0.0
    total_weight: float = 0


@dataclass(frozen=True)
class MealRecord:
    """A logged meal with its ingredients and cached totals."""

    id: str
    title: str
    health: int
    ingredients: tuple[Ingredient, ...]
    totals: MealTotals
    created_at: datetime
    date: str
    servings: float = 1
    image_uri: str | None = None


def ingredient_to_dict(ingredient: Ingredient) -> dict[str, object]:
    """Serialize an ingredient for storage."""
    return {
        "title": ingredient.title,
        "weight": ingredient.weight,
        "calories": ingredient.calories,
        "proteins": ingredient.proteins,
        "carbs": ingredient.carbs,
        "fats": ingredient.fats,
        "excluded": ingredient.excluded,
    }


def ingredient_from_dict(row: dict[str, object]) -> Ingredient:
    """Build an ingredient from a stored mapping."""
    return Ingredient(
        title=str(row.get("title", "")),
        weight=float(row.get("weight", 0.0)),
        calories=float(row.get("calories", 0.0)),
        proteins=float(row.get("proteins", 0.0)),
        carbs=float(row.get("carbs", 0.0)),
        fats=float(row.get("fats", 0.0)),
        excluded=bool(row.get("excluded", False)),
    )


def totals_to_dict(totals: MealTotals) -> dict[str, float]:
    """Serialize totals for storage or API output."""
    return {
        "total_calories": totals.total_calories,
        "total_proteins": totals.total_proteins,
        "total_carbs": totals.total_carbs,
        "total_fats": totals.total_fats,
        "total_weight": totals.total_weight,
    }


def totals_from_dict(row: dict[str, object]) -> MealTotals:
    """Build totals from a stored mapping."""
    return MealTotals(
        total_calories=row.get("total_calories", 0),
        total_proteins=row.get("total_proteins", 0.0),
        total_carbs=row.get("total_carbs", 0.0),
        total_fats=row.get("total_fats", 0.0),
        total_weight=row.get("total_weight", 0),
    )


def meal_to_dict(meal: MealRecord) -> dict[str, object]:
    """Serialize a meal record for storage."""
    return {
        "id": meal.id,
        "title": meal.title,
        "health": meal.health,
        "ingredients": [ingredient_to_dict(item) for item in meal.ingredients],
        "totals": totals_to_dict(meal.totals),
        "servings": meal.servings,
        "image_uri": meal.image_uri,
        "created_at": meal.created_at.isoformat(),
        "date": meal.date,
    }


def meal_from_dict(row: dict[str, object]) -> MealRecord:
    """Build a meal record from a stored mapping."""
    ingredients = row.get("ingredients") or []
    return MealRecord(
        id=str(row["id"]),
        title=str(row.get("title", "")),
        health=int(row.get("health", 0)),
        ingredients=tuple(ingredient_from_dict(item) for item in ingredients),
        totals=totals_from_dict(row.get("totals") or {}),
        servings=row.get("servings") or 1,
        image_uri=row.get("image_uri"),
        created_at=datetime.fromisoformat(str(row["created_at"])),
        date=str(row["date"]),
    )
