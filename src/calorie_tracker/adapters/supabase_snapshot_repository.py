"""Supabase repository for store snapshots."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from supabase import Client

from calorie_tracker.services.persistence import SnapshotRepository


@dataclass
class SupabaseSnapshotRepository(SnapshotRepository):
    """Supabase implementation storing one row per store key."""

    client: Client
    table: str = "app_storage"

    def load(self, key: str) -> dict[str, Any] | None:
        """Return the stored envelope for a key."""
        response = (
            self.client.table(self.table)
            .select("key, version, state")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        if row.get("version") is None:
            return row.get("state") or {}
        return {"version": row.get("version"), "state": row.get("state")}

    def save(self, key: str, envelope: dict[str, Any]) -> None:
        """Insert or replace the row for a key."""
        self.client.table(self.table).upsert(
            {
                "key": key,
                "version": envelope.get("version"),
                "state": envelope.get("state"),
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="key",
        ).execute()
