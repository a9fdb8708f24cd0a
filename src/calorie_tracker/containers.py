"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from calorie_tracker.adapters.json_file_snapshot_repository import (
    JsonFileSnapshotRepository,
)
from calorie_tracker.adapters.meal_analysis_client import HttpxMealAnalysisClient
from calorie_tracker.adapters.supabase_snapshot_repository import (
    SupabaseSnapshotRepository,
)
from calorie_tracker.config import Settings, resolve_timezone
from calorie_tracker.domain.dates import local_clock
from calorie_tracker.services.analysis import MealAnalysisService
from calorie_tracker.services.app_settings import SettingsStore
from calorie_tracker.services.favorites import FavoriteStore
from calorie_tracker.services.meals import MealStore
from calorie_tracker.services.persistence import PersistentStore, SnapshotRepository
from calorie_tracker.services.profile import ProfileStore
from calorie_tracker.services.stats import StatsService
from calorie_tracker.services.weights import WeightStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    meal_store: MealStore
    weight_store: WeightStore
    favorite_store: FavoriteStore
    profile_store: ProfileStore
    settings_store: SettingsStore
    stats_service: StatsService
    analysis_service: MealAnalysisService
    close_resources: Callable[[], Awaitable[None]]

    def stores(self) -> tuple[PersistentStore, ...]:
        """Return every persisted store."""
        return (
            self.meal_store,
            self.weight_store,
            self.favorite_store,
            self.profile_store,
            self.settings_store,
        )


def build_snapshot_repository(settings: Settings) -> SnapshotRepository:
    """Create the snapshot repository selected by settings."""
    if settings.storage_backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError(
                "supabase_url and supabase_service_key are required "
                "for the supabase storage backend"
            )
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseSnapshotRepository(client, table=settings.supabase_storage_table)
    return JsonFileSnapshotRepository.create(settings.storage_dir)


def build_container(
    settings: Settings | None = None,
    repository: SnapshotRepository | None = None,
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    resolved_repository = repository or build_snapshot_repository(resolved_settings)
    clock = local_clock(resolve_timezone(resolved_settings.timezone))
    retries = resolved_settings.persistence_retries

    meal_store = MealStore(resolved_repository, clock=clock, retries=retries)
    weight_store = WeightStore(resolved_repository, clock=clock, retries=retries)
    favorite_store = FavoriteStore(resolved_repository, retries=retries)
    profile_store = ProfileStore(resolved_repository, retries=retries)
    settings_store = SettingsStore(resolved_repository, retries=retries)
    stats_service = StatsService(meal_store, clock=clock)
    analysis_client = HttpxMealAnalysisClient.create(
        url=resolved_settings.analysis_api_url,
        timeout=resolved_settings.analysis_timeout_seconds,
    )
    analysis_service = MealAnalysisService(
        client=analysis_client,
        meal_store=meal_store,
        default_locale=resolved_settings.default_locale,
    )

    async def close_resources() -> None:
        await analysis_client.close()
        for store in container.stores():
            store.close()

    container = AppContainer(
        settings=resolved_settings,
        meal_store=meal_store,
        weight_store=weight_store,
        favorite_store=favorite_store,
        profile_store=profile_store,
        settings_store=settings_store,
        stats_service=stats_service,
        analysis_service=analysis_service,
        close_resources=close_resources,
    )
    return container
