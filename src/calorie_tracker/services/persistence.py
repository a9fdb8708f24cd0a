"""Snapshot persistence for in-memory stores.

Each store keeps its whole collection in memory and persists it as a
single versioned blob after every mutation. Writes go through a
single-worker queue per store, so they never interleave, and the caller
does not wait for them. A failed write is retried, then logged and kept
as ``last_error`` until a later write succeeds.
"""

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, ClassVar, Protocol

from calorie_tracker.errors import PersistenceError

SNAPSHOT_VERSION = 1

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[PersistenceError], None]


class SnapshotRepository(Protocol):
    """Durable key-value storage for store snapshots."""

    def load(self, key: str) -> dict[str, Any] | None:
        """Return the stored envelope for ``key``, if any."""

    def save(self, key: str, envelope: dict[str, Any]) -> None:
        """Replace the stored envelope for ``key``."""


def wrap_snapshot(state: dict[str, Any]) -> dict[str, Any]:
    """Wrap store state in a versioned envelope."""
    return {"version": SNAPSHOT_VERSION, "state": state}


def unwrap_snapshot(key: str, envelope: dict[str, Any]) -> dict[str, Any]:
    """Return the state from an envelope, accepting unversioned blobs."""
    if "version" not in envelope:
        # Bare state written before snapshots carried a version tag.
        return envelope
    version = envelope["version"]
    if not isinstance(version, int) or version > SNAPSHOT_VERSION:
        raise PersistenceError(f"Unsupported snapshot version {version!r}", key=key)
    state = envelope.get("state")
    if not isinstance(state, dict):
        raise PersistenceError("Snapshot has no state", key=key)
    return state


class SnapshotWriter:
    """Serialized, fire-and-forget writer for one store key."""

    def __init__(
        self,
        key: str,
        repository: SnapshotRepository,
        *,
        retries: int = 2,
        on_error: ErrorCallback | None = None,
    ) -> None:
        self.key = key
        self.repository = repository
        self.retries = max(retries, 0)
        self.on_error = on_error
        self.last_error: PersistenceError | None = None
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix=f"persist-{key}"
        )
        self._pending: set[Future[None]] = set()
        self._pending_lock = threading.Lock()

    def submit(self, state: dict[str, Any]) -> Future[None]:
        """Queue a snapshot write and return immediately."""
        envelope = wrap_snapshot(state)
        future = self._executor.submit(self._write, envelope)
        with self._pending_lock:
            self._pending.add(future)
        future.add_done_callback(self._discard)
        return future

    def flush(self, timeout: float | None = None) -> None:
        """Wait for queued writes; raise if the most recent one failed."""
        with self._pending_lock:
            pending = set(self._pending)
        if pending:
            wait(pending, timeout=timeout)
        if self.last_error is not None:
            raise self.last_error

    def close(self) -> None:
        """Drain the queue and stop the worker thread."""
        self._executor.shutdown(wait=True)

    def _discard(self, future: Future[None]) -> None:
        with self._pending_lock:
            self._pending.discard(future)

    def _write(self, envelope: dict[str, Any]) -> None:
        cause: Exception | None = None
        for attempt in range(self.retries + 1):
            try:
                self.repository.save(self.key, envelope)
            except Exception as exc:  # noqa: BLE001
                logger.warning(
                    "Snapshot write for %s failed (attempt %d/%d): %s",
                    self.key,
                    attempt + 1,
                    self.retries + 1,
                    exc,
                )
                cause = exc
                continue
            self.last_error = None
            return

        error = PersistenceError(
            f"Failed to persist {self.key}; data may not survive a restart",
            key=self.key,
        )
        error.__cause__ = cause
        self.last_error = error
        logger.error("Giving up on snapshot write for %s", self.key, exc_info=cause)
        if self.on_error is not None:
            self.on_error(error)


class PersistentStore:
    """Base for stores that hold state in memory and persist snapshots.

    Subclasses set ``storage_key`` and implement ``_snapshot`` and
    ``_restore``. Mutations must run under ``self._lock`` and end with
    ``self._persist()`` so memory is updated before the write is queued.
    """

    storage_key: ClassVar[str]

    def __init__(
        self,
        repository: SnapshotRepository,
        *,
        retries: int = 2,
        on_error: ErrorCallback | None = None,
    ) -> None:
        self._lock = threading.RLock()
        self._writer = SnapshotWriter(
            self.storage_key, repository, retries=retries, on_error=on_error
        )
        state = self._load(repository)
        if state is not None:
            try:
                self._restore(state)
            except (KeyError, TypeError, ValueError) as exc:
                raise PersistenceError(
                    f"Corrupt {self.storage_key} snapshot", key=self.storage_key
                ) from exc

    @property
    def last_error(self) -> PersistenceError | None:
        """Return the error from the latest failed write, if unresolved."""
        return self._writer.last_error

    def flush(self, timeout: float | None = None) -> None:
        """Wait for pending writes and surface a failed latest write."""
        self._writer.flush(timeout)

    def close(self) -> None:
        """Finish pending writes and release the writer thread."""
        self._writer.close()

    def _persist(self) -> None:
        self._writer.submit(self._snapshot())

    def _load(self, repository: SnapshotRepository) -> dict[str, Any] | None:
        try:
            envelope = repository.load(self.storage_key)
        except PersistenceError:
            raise
        except Exception as exc:
            raise PersistenceError(
                f"Failed to load {self.storage_key}", key=self.storage_key
            ) from exc
        if envelope is None:
            return None
        state = unwrap_snapshot(self.storage_key, envelope)
        logger.info("Loaded %s snapshot", self.storage_key)
        return state

    def _snapshot(self) -> dict[str, Any]:
        raise NotImplementedError

    def _restore(self, state: dict[str, Any]) -> None:
        raise NotImplementedError
