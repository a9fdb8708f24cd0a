"""Meal, summary and favorite endpoints."""

from __future__ import annotations

import base64
import binascii
from dataclasses import asdict
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, HTTPException, Request, status

from calorie_tracker.api.models import (
    ImageAnalysisRequest,
    MealUpdate,
    TextAnalysisRequest,
)
from calorie_tracker.domain.dates import date_key, parse_date_key
from calorie_tracker.domain.meals import Ingredient, meal_to_dict
from calorie_tracker.services.analysis import parse_analysis_response

if TYPE_CHECKING:
    from calorie_tracker.containers import AppContainer

router = APIRouter(tags=["meals"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _day_or_today(container: AppContainer, day: str | None) -> str:
    if day is None:
        return date_key(container.stats_service.today())
    parse_date_key(day)
    return day


def _not_found(meal_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND, detail=f"Meal {meal_id} not found"
    )


@router.get("/meals")
async def list_meals(request: Request, date: str | None = None) -> dict[str, object]:
    """Return meals logged on a day (today by default) with the day's totals."""
    container = _container(request)
    day = _day_or_today(container, date)
    meals = container.meal_store.get_meals_by_date(day)
    return {
        "date": day,
        "meals": [meal_to_dict(meal) for meal in meals],
        "totals": asdict(container.meal_store.get_daily_totals(day)),
    }


@router.post("/meals", status_code=status.HTTP_201_CREATED)
async def log_analyzed_meal(
    payload: dict[str, Any], request: Request, image_uri: str | None = None
) -> dict[str, object]:
    """Log a meal from an analysis response the client already received."""
    container = _container(request)
    response = parse_analysis_response(payload)
    meal = container.analysis_service.log_response(response, image_uri=image_uri)
    return meal_to_dict(meal)


@router.post("/meals/analyze/text", status_code=status.HTTP_201_CREATED)
async def analyze_text(
    payload: TextAnalysisRequest, request: Request
) -> dict[str, object]:
    """Analyze a meal description and log it."""
    container = _container(request)
    meal = await container.analysis_service.log_from_text(payload.text, payload.locale)
    return meal_to_dict(meal)


@router.post("/meals/analyze/image", status_code=status.HTTP_201_CREATED)
async def analyze_image(
    payload: ImageAnalysisRequest, request: Request
) -> dict[str, object]:
    """Analyze a base64 meal photo and log it."""
    container = _container(request)
    try:
        image_bytes = base64.b64decode(payload.image_base64, validate=True)
    except binascii.Error as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="image_base64 is not valid base64",
        ) from exc
    meal = await container.analysis_service.log_from_image(
        image_bytes, payload.locale, image_uri=payload.image_uri
    )
    return meal_to_dict(meal)


@router.get("/meals/{meal_id}")
async def get_meal(meal_id: str, request: Request) -> dict[str, object]:
    """Return a single meal."""
    meal = _container(request).meal_store.get_meal(meal_id)
    if meal is None:
        raise _not_found(meal_id)
    return meal_to_dict(meal)


@router.patch("/meals/{meal_id}")
async def update_meal(
    meal_id: str, payload: MealUpdate, request: Request
) -> dict[str, object]:
    """Update title, health, ingredients or servings of a meal."""
    ingredients = None
    if payload.ingredients is not None:
        ingredients = [Ingredient(**item.model_dump()) for item in payload.ingredients]
    meal = _container(request).meal_store.update_meal(
        meal_id,
        title=payload.title,
        health=payload.health,
        ingredients=ingredients,
        servings=payload.servings,
    )
    if meal is None:
        raise _not_found(meal_id)
    return meal_to_dict(meal)


@router.post("/meals/{meal_id}/ingredients/{index}/toggle")
async def toggle_ingredient(
    meal_id: str, index: int, request: Request
) -> dict[str, object]:
    """Exclude or restore one ingredient."""
    try:
        meal = _container(request).meal_store.toggle_ingredient(meal_id, index)
    except IndexError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    if meal is None:
        raise _not_found(meal_id)
    return meal_to_dict(meal)


@router.post("/meals/{meal_id}/correct")
async def correct_meal(
    meal_id: str, payload: TextAnalysisRequest, request: Request
) -> dict[str, object]:
    """Re-analyze a meal with a free-text correction."""
    meal = await _container(request).analysis_service.correct_meal(
        meal_id, payload.text, payload.locale
    )
    if meal is None:
        raise _not_found(meal_id)
    return meal_to_dict(meal)


@router.delete("/meals/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meal(meal_id: str, request: Request) -> None:
    """Delete a meal; deleting an unknown meal succeeds."""
    _container(request).meal_store.remove_meal(meal_id)


@router.get("/summary/daily")
async def daily_summary(request: Request, date: str | None = None) -> dict[str, object]:
    """Return a day's totals and progress against the profile targets."""
    container = _container(request)
    day = _day_or_today(container, date)
    progress = container.stats_service.get_daily_progress(
        day, container.profile_store.targets
    )
    return asdict(progress)


@router.get("/summary/week")
async def week_summary(request: Request, date: str | None = None) -> dict[str, object]:
    """Return Monday-to-Sunday calories for the week containing a day."""
    container = _container(request)
    day = _day_or_today(container, date)
    return asdict(container.stats_service.get_week_calories(day))


@router.get("/favorites")
async def list_favorites(request: Request) -> dict[str, object]:
    """Return favorite meal snapshots."""
    favorites = _container(request).favorite_store.favorites
    return {"favorites": [meal_to_dict(meal) for meal in favorites]}


@router.post("/favorites/{meal_id}/toggle")
async def toggle_favorite(meal_id: str, request: Request) -> dict[str, object]:
    """Favorite a logged meal, or unfavorite it."""
    container = _container(request)
    store = container.favorite_store
    if store.is_favorite(meal_id):
        store.remove_favorite(meal_id)
        return {"meal_id": meal_id, "favorite": False}
    meal = container.meal_store.get_meal(meal_id)
    if meal is None:
        raise _not_found(meal_id)
    return {"meal_id": meal_id, "favorite": store.toggle_favorite(meal)}


@router.delete("/favorites/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_favorite(meal_id: str, request: Request) -> None:
    """Remove a favorite."""
    _container(request).favorite_store.remove_favorite(meal_id)


@router.delete("/favorites", status_code=status.HTTP_204_NO_CONTENT)
async def clear_favorites(request: Request) -> None:
    """Remove all favorites."""
    _container(request).favorite_store.clear_all()
