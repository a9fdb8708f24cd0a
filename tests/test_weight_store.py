"""Tests for the weight record store."""

from datetime import date

import pytest

from calorie_tracker.domain.weights import WeightEntry, WeightPoint
from calorie_tracker.errors import ValidationError
from calorie_tracker.services.weights import WeightStore
from tests.conftest import InMemorySnapshotRepository


def test_same_day_entry_is_replaced(weight_store: WeightStore) -> None:
    weight_store.add_entry(72, "2024-06-01")
    weight_store.add_entry(73, "2024-06-01")

    entries = weight_store.get_entries_for_month(2024, 6)

    assert entries == [WeightEntry(date="2024-06-01", weight=73)]


def test_entries_stay_sorted(weight_store: WeightStore) -> None:
    weight_store.add_entry(71, "2024-03-03")
    weight_store.add_entry(72, "2024-03-01")
    weight_store.add_entry(70, "2024-02-28")

    assert [entry.date for entry in weight_store.entries] == [
        "2024-02-28",
        "2024-03-01",
        "2024-03-03",
    ]
    assert weight_store.get_latest_weight() == 71


def test_add_entry_defaults_to_today(weight_store: WeightStore) -> None:
    entry = weight_store.add_entry(70.5)

    assert entry.date == "2024-03-05"


def test_latest_weight_when_empty(weight_store: WeightStore) -> None:
    assert weight_store.get_latest_weight() is None


@pytest.mark.parametrize("weight", [0, -3, float("nan"), True])
def test_add_entry_rejects_invalid_weight(
    weight_store: WeightStore, weight: float
) -> None:
    with pytest.raises(ValidationError):
        weight_store.add_entry(weight, "2024-03-01")

    assert weight_store.entries == []


def test_add_entry_rejects_invalid_day(weight_store: WeightStore) -> None:
    with pytest.raises(ValidationError):
        weight_store.add_entry(70, "2024-02-30")


def test_month_filter(weight_store: WeightStore) -> None:
    weight_store.add_entry(70, "2024-02-29")
    weight_store.add_entry(71, "2024-03-01")
    weight_store.add_entry(72, "2024-04-01")

    assert [entry.weight for entry in weight_store.get_entries_for_month(2024, 3)] == [
        71
    ]


def test_month_is_one_based(weight_store: WeightStore) -> None:
    with pytest.raises(ValidationError):
        weight_store.get_entries_for_month(2024, 0)
    with pytest.raises(ValidationError):
        weight_store.get_month_series(2024, 13, 70)


def test_month_series_forward_fills(weight_store: WeightStore) -> None:
    weight_store.add_entry(80, "2024-02-20")
    weight_store.add_entry(79, "2024-03-02")
    weight_store.add_entry(78, "2024-03-04")

    series = weight_store.get_month_series(2024, 3, current_weight=75)

    assert series == [
        WeightPoint(date="2024-03-01", weight=80, is_entry=False),
        WeightPoint(date="2024-03-02", weight=79, is_entry=True),
        WeightPoint(date="2024-03-03", weight=79, is_entry=False),
        WeightPoint(date="2024-03-04", weight=78, is_entry=True),
        WeightPoint(date="2024-03-05", weight=78, is_entry=False),
    ]


def test_month_series_uses_current_weight_without_history(
    weight_store: WeightStore,
) -> None:
    series = weight_store.get_month_series(2024, 3, current_weight=75)

    assert [point.weight for point in series] == [75] * 5
    assert not any(point.is_entry for point in series)


def test_past_month_series_covers_every_day(weight_store: WeightStore) -> None:
    series = weight_store.get_month_series(2024, 2, current_weight=75)

    assert len(series) == 29
    assert series[-1].date == "2024-02-29"


def test_future_month_series_is_a_single_point(weight_store: WeightStore) -> None:
    series = weight_store.get_month_series(
        2024, 4, current_weight=75, today=date(2024, 3, 31)
    )

    assert series == [WeightPoint(date="2024-04-30", weight=75, is_entry=False)]


def test_weights_survive_reload(
    repository: InMemorySnapshotRepository, weight_store: WeightStore
) -> None:
    weight_store.add_entry(72, "2024-03-02")
    weight_store.add_entry(71, "2024-03-01")
    weight_store.flush()

    reloaded = WeightStore(repository)

    assert reloaded.entries == weight_store.entries
    assert repository.state("weight-storage") == {
        "entries": [
            {"date": "2024-03-01", "weight": 71},
            {"date": "2024-03-02", "weight": 72},
        ]
    }
    reloaded.close()
