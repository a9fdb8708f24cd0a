"""Shared test fixtures."""

import copy
import json
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

import pytest

from calorie_tracker.config import Settings
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.analysis import MealAnalysisRequest
from calorie_tracker.domain.dates import Clock
from calorie_tracker.domain.meals import Ingredient
from calorie_tracker.services.analysis import MealAnalysisClient, MealAnalysisService
from calorie_tracker.services.app_settings import SettingsStore
from calorie_tracker.services.favorites import FavoriteStore
from calorie_tracker.services.meals import MealStore
from calorie_tracker.services.persistence import SnapshotRepository
from calorie_tracker.services.profile import ProfileStore
from calorie_tracker.services.stats import StatsService
from calorie_tracker.services.weights import WeightStore

NEW_YORK = ZoneInfo("America/New_York")


@dataclass
class InMemorySnapshotRepository(SnapshotRepository):
    """In-memory snapshot repository for tests.

    Envelopes are stored as JSON text so tests see exactly what a durable
    backend would round-trip.
    """

    blobs: dict[str, str] = field(default_factory=dict)
    saves: list[str] = field(default_factory=list)

    def load(self, key: str) -> dict[str, Any] | None:
        raw = self.blobs.get(key)
        return None if raw is None else json.loads(raw)

    def save(self, key: str, envelope: dict[str, Any]) -> None:
        self.blobs[key] = json.dumps(envelope)
        self.saves.append(key)

    def state(self, key: str) -> dict[str, Any]:
        return json.loads(self.blobs[key])["state"]


@dataclass
class FailingSnapshotRepository(SnapshotRepository):
    """Repository whose writes fail a configurable number of times."""

    failures: int = 1_000
    attempts: int = 0
    blobs: dict[str, dict[str, Any]] = field(default_factory=dict)

    def load(self, key: str) -> dict[str, Any] | None:
        return self.blobs.get(key)

    def save(self, key: str, envelope: dict[str, Any]) -> None:
        self.attempts += 1
        if self.attempts <= self.failures:
            raise OSError("disk full")
        self.blobs[key] = copy.deepcopy(envelope)


@dataclass
class FakeMealAnalysisClient(MealAnalysisClient):
    """Fake analysis client returning a fixed payload."""

    payload: dict[str, Any] = field(
        default_factory=lambda: {
            "title": "Salad",
            "health": 8,
            "ingredients": [
                {
                    "title": "Lettuce",
                    "weight": 50,
                    "calories": 10,
                    "proteins": 1,
                    "carbs": 2,
                    "fats": 0,
                },
                {
                    "title": "Oil",
                    "weight": 10,
                    "calories": 90,
                    "proteins": 0,
                    "carbs": 0,
                    "fats": 10,
                },
            ],
            "isFood": True,
        }
    )
    requests: list[MealAnalysisRequest] = field(default_factory=list)

    async def analyze(self, request: MealAnalysisRequest) -> dict[str, Any]:
        self.requests.append(request)
        return copy.deepcopy(self.payload)


def fixed_clock(moment: datetime) -> Clock:
    """Return a clock frozen at ``moment``."""
    return lambda: moment


def salad_ingredients() -> list[Ingredient]:
    return [
        Ingredient(
            title="Lettuce", weight=50, calories=10, proteins=1, carbs=2, fats=0
        ),
        Ingredient(title="Oil", weight=10, calories=90, proteins=0, carbs=0, fats=10),
    ]


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        storage_backend="file",
        storage_dir=str(tmp_path / "storage"),
        analysis_api_url="https://analysis.test/calories",
        timezone="America/New_York",
    )


@pytest.fixture
def repository() -> InMemorySnapshotRepository:
    return InMemorySnapshotRepository()


@pytest.fixture
def clock() -> Clock:
    return fixed_clock(datetime(2024, 3, 5, 12, 30, tzinfo=NEW_YORK))


@pytest.fixture
def meal_store(
    repository: InMemorySnapshotRepository, clock: Clock
) -> Iterator[MealStore]:
    store = MealStore(repository, clock=clock)
    yield store
    store.close()


@pytest.fixture
def weight_store(
    repository: InMemorySnapshotRepository, clock: Clock
) -> Iterator[WeightStore]:
    store = WeightStore(repository, clock=clock)
    yield store
    store.close()


@pytest.fixture
def analysis_client() -> FakeMealAnalysisClient:
    return FakeMealAnalysisClient()


@pytest.fixture
def container(
    settings: Settings,
    repository: InMemorySnapshotRepository,
    clock: Clock,
    analysis_client: FakeMealAnalysisClient,
) -> AppContainer:
    meal_store = MealStore(repository, clock=clock)
    weight_store = WeightStore(repository, clock=clock)
    favorite_store = FavoriteStore(repository)
    profile_store = ProfileStore(repository)
    settings_store = SettingsStore(repository)
    stats_service = StatsService(meal_store, clock=clock)
    analysis_service = MealAnalysisService(
        client=analysis_client,
        meal_store=meal_store,
        default_locale=settings.default_locale,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        meal_store=meal_store,
        weight_store=weight_store,
        favorite_store=favorite_store,
        profile_store=profile_store,
        settings_store=settings_store,
        stats_service=stats_service,
        analysis_service=analysis_service,
        close_resources=close_resources,
    )
