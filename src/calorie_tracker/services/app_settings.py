"""App preference store."""

from dataclasses import asdict, replace
from typing import Any

from calorie_tracker.domain.models import AppSettings
from calorie_tracker.services.persistence import PersistentStore


class SettingsStore(PersistentStore):
    """Persisted app toggles."""

    storage_key = "settings-storage"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self._settings = AppSettings()
        super().__init__(*args, **kwargs)

    @property
    def settings(self) -> AppSettings:
        """Return the current settings."""
        with self._lock:
            return self._settings

    def set_save_photo_enabled(self, enabled: bool) -> None:
        """Toggle saving captured photos to the gallery."""
        self._set(save_photo_enabled=bool(enabled))

    def set_dont_show_photo_example(self, enabled: bool) -> None:
        """Toggle skipping the photo example screen."""
        self._set(dont_show_photo_example=bool(enabled))

    def _set(self, **changes: bool) -> None:
        with self._lock:
            self._settings = replace(self._settings, **changes)
            self._persist()

    def _snapshot(self) -> dict[str, Any]:
        return asdict(self._settings)

    def _restore(self, state: dict[str, Any]) -> None:
        defaults = AppSettings()
        self._settings = AppSettings(
            save_photo_enabled=bool(
                state.get("save_photo_enabled", defaults.save_photo_enabled)
            ),
            dont_show_photo_example=bool(
                state.get("dont_show_photo_example", defaults.dont_show_photo_example)
            ),
        )
