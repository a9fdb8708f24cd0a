"""Domain models for app preferences."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AppSettings:
    """User-facing app toggles."""

    save_photo_enabled: bool = False
    dont_show_photo_example: bool = False
