"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field

from calorie_tracker.adapters.supabase_snapshot_repository import (
    SupabaseSnapshotRepository,
)
from calorie_tracker.services.app_settings import SettingsStore


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "upsert": []}
    )
    last_payload: object | None = None
    last_conflict: str | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def upsert(self, payload, on_conflict: str = "") -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "upsert"
        self.last_payload = payload
        self.last_conflict = on_conflict
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def test_supabase_snapshot_repository_load() -> None:
    client = FakeSupabaseClient()
    table = client.table("app_storage")
    table.queue(
        "select",
        [{"key": "meal-storage", "version": 1, "state": {"meals": []}}],
    )

    repository = SupabaseSnapshotRepository(client)
    envelope = repository.load("meal-storage")

    assert envelope == {"version": 1, "state": {"meals": []}}
    assert table.last_filters == [("key", "meal-storage")]


def test_supabase_snapshot_repository_missing_row() -> None:
    client = FakeSupabaseClient()

    repository = SupabaseSnapshotRepository(client)

    assert repository.load("meal-storage") is None


def test_supabase_snapshot_repository_legacy_row() -> None:
    client = FakeSupabaseClient()
    client.table("app_storage").queue(
        "select",
        [{"key": "settings-storage", "version": None, "state": {"save_photo_enabled": True}}],
    )

    repository = SupabaseSnapshotRepository(client)

    assert repository.load("settings-storage") == {"save_photo_enabled": True}


def test_supabase_snapshot_repository_save() -> None:
    client = FakeSupabaseClient()
    table = client.table("snapshots")

    repository = SupabaseSnapshotRepository(client, table="snapshots")
    repository.save("weight-storage", {"version": 1, "state": {"entries": []}})

    assert isinstance(table.last_payload, dict)
    assert table.last_payload["key"] == "weight-storage"
    assert table.last_payload["version"] == 1
    assert table.last_payload["state"] == {"entries": []}
    assert "updated_at" in table.last_payload
    assert table.last_conflict == "key"


def test_store_persists_through_supabase() -> None:
    client = FakeSupabaseClient()
    table = client.table("app_storage")

    store = SettingsStore(SupabaseSnapshotRepository(client))
    store.set_dont_show_photo_example(True)
    store.flush()
    store.close()

    assert table.last_payload["state"] == {  # type: ignore[index]
        "save_photo_enabled": False,
        "dont_show_photo_example": True,
    }
