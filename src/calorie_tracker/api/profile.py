"""Profile, weight and settings endpoints."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, status

from calorie_tracker.api.models import ProfileUpdate, SettingsUpdate, WeightCreate
from calorie_tracker.services.units import (
    format_height,
    format_weight,
    format_weight_value,
    weight_unit,
)

if TYPE_CHECKING:
    from calorie_tracker.containers import AppContainer

router = APIRouter(tags=["profile"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _profile_payload(container: AppContainer) -> dict[str, object]:
    store = container.profile_store
    profile = store.get_profile()
    imperial = store.is_imperial
    return {
        "profile": asdict(profile),
        "unit_system": store.unit_system.value,
        "targets": asdict(store.targets),
        "display": {
            "weight": format_weight(profile.weight, imperial),
            "goal_weight": format_weight(profile.goal_weight, imperial),
            "height": format_height(profile.height, imperial),
        },
    }


@router.get("/profile")
async def get_profile(request: Request) -> dict[str, object]:
    """Return the profile, derived targets and display strings."""
    return _profile_payload(_container(request))


@router.patch("/profile")
async def update_profile(payload: ProfileUpdate, request: Request) -> dict[str, object]:
    """Update profile fields; targets follow automatically."""
    container = _container(request)
    fields = payload.model_dump(exclude_none=True)
    if fields:
        container.profile_store.update(**fields)
    return _profile_payload(container)


@router.post("/weights", status_code=status.HTTP_201_CREATED)
async def add_weight(payload: WeightCreate, request: Request) -> dict[str, object]:
    """Record a weight; the latest entry also becomes the profile weight."""
    container = _container(request)
    entry = container.weight_store.add_entry(payload.weight, payload.date)
    latest = container.weight_store.get_latest_weight()
    if latest is not None and latest != container.profile_store.get_profile().weight:
        container.profile_store.set_weight(latest)
    return asdict(entry)


@router.get("/weights/{year}/{month}")
async def month_weights(year: int, month: int, request: Request) -> dict[str, object]:
    """Return a month's entries and its forward-filled daily series."""
    container = _container(request)
    profile = container.profile_store.get_profile()
    imperial = container.profile_store.is_imperial
    entries = container.weight_store.get_entries_for_month(year, month)
    series = container.weight_store.get_month_series(year, month, profile.weight)
    return {
        "year": year,
        "month": month,
        "unit": weight_unit(imperial),
        "goal_weight": format_weight_value(profile.goal_weight, imperial),
        "entries": [asdict(entry) for entry in entries],
        "series": [
            {**asdict(point), "display_weight": format_weight_value(point.weight, imperial)}
            for point in series
        ],
    }


@router.get("/settings")
async def get_settings(request: Request) -> dict[str, object]:
    """Return app settings."""
    return asdict(_container(request).settings_store.settings)


@router.patch("/settings")
async def update_settings(payload: SettingsUpdate, request: Request) -> dict[str, object]:
    """Update app settings."""
    store = _container(request).settings_store
    if payload.save_photo_enabled is not None:
        store.set_save_photo_enabled(payload.save_photo_enabled)
    if payload.dont_show_photo_example is not None:
        store.set_dont_show_photo_example(payload.dont_show_photo_example)
    return asdict(store.settings)
