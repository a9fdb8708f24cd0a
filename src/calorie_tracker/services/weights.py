"""Body weight store."""

import calendar
import logging
import math
from datetime import date
from typing import Any

from calorie_tracker.domain.dates import Clock, date_key, local_clock, parse_date_key
from calorie_tracker.domain.weights import WeightEntry, WeightPoint
from calorie_tracker.errors import ValidationError
from calorie_tracker.services.persistence import (
    ErrorCallback,
    PersistentStore,
    SnapshotRepository,
)

logger = logging.getLogger(__name__)


class WeightStore(PersistentStore):
    """One weight entry per day, kept sorted by date."""

    storage_key = "weight-storage"

    def __init__(
        self,
        repository: SnapshotRepository,
        *,
        clock: Clock | None = None,
        retries: int = 2,
        on_error: ErrorCallback | None = None,
    ) -> None:
        self._entries: list[WeightEntry] = []
        self._clock = clock or local_clock()
        super().__init__(repository, retries=retries, on_error=on_error)

    @property
    def entries(self) -> list[WeightEntry]:
        """Return all entries in ascending date order."""
        with self._lock:
            return list(self._entries)

    def add_entry(self, weight: float, day: str | None = None) -> WeightEntry:
        """Record a weight for a day (today by default), replacing any entry."""
        if (
            isinstance(weight, bool)
            or not isinstance(weight, int | float)
            or not math.isfinite(weight)
            or weight <= 0
        ):
            raise ValidationError("Weight must be a positive number")
        key = day if day is not None else date_key(self._clock())
        parse_date_key(key)

        entry = WeightEntry(date=key, weight=weight)
        with self._lock:
            kept = [item for item in self._entries if item.date != key]
            kept.append(entry)
            self._entries = sorted(kept, key=lambda item: item.date)
            self._persist()
        logger.info("Recorded weight for %s", key)
        return entry

    def get_entries_for_month(self, year: int, month: int) -> list[WeightEntry]:
        """Return entries within a calendar month (``month`` is 1-12)."""
        _validate_month(month)
        prefix = f"{year:04d}-{month:02d}-"
        with self._lock:
            return [item for item in self._entries if item.date.startswith(prefix)]

    def get_latest_weight(self) -> float | None:
        """Return the most recent weight, or None when nothing is recorded."""
        with self._lock:
            if not self._entries:
                return None
            return self._entries[-1].weight

    def get_month_series(
        self,
        year: int,
        month: int,
        current_weight: float,
        today: date | None = None,
    ) -> list[WeightPoint]:
        """Return one point per day of the month up to today, forward-filled.

        Days without an entry carry the most recent earlier weight. Before
        the first entry of the month that is the last entry before the
        month, or ``current_weight`` when there is none.
        """
        _validate_month(month)
        today = today or self._clock().date()
        days_in_month = calendar.monthrange(year, month)[1]
        first_key = date_key(date(year, month, 1))

        with self._lock:
            entries = list(self._entries)
        by_date = {item.date: item for item in entries}

        last_known = current_weight
        for item in entries:
            if item.date >= first_key:
                break
            last_known = item.weight

        series: list[WeightPoint] = []
        for day_number in range(1, days_in_month + 1):
            day = date(year, month, day_number)
            if day > today:
                break
            key = date_key(day)
            entry = by_date.get(key)
            if entry is not None:
                last_known = entry.weight
                series.append(WeightPoint(date=key, weight=entry.weight, is_entry=True))
            else:
                series.append(WeightPoint(date=key, weight=last_known, is_entry=False))

        if not series:
            day_number = min(today.day, days_in_month)
            series.append(
                WeightPoint(
                    date=date_key(date(year, month, day_number)),
                    weight=current_weight,
                    is_entry=False,
                )
            )
        return series

    def _snapshot(self) -> dict[str, Any]:
        return {
            "entries": [
                {"date": item.date, "weight": item.weight} for item in self._entries
            ]
        }

    def _restore(self, state: dict[str, Any]) -> None:
        entries = [
            WeightEntry(date=str(row["date"]), weight=float(row["weight"]))
            for row in state.get("entries", [])
        ]
        self._entries = sorted(entries, key=lambda item: item.date)


def _validate_month(month: int) -> None:
    if not 1 <= month <= 12:  # noqa: PLR2004
        raise ValidationError(f"Month must be 1-12, got {month}")
