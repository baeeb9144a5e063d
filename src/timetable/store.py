"""In-process view of all current snapshots for fast bulk reads.

Writers never mutate the published mapping: they build a new one under an
exclusive lock and swap the reference. Readers take the reference without
locking and always see one complete generation of snapshots.
"""

import threading
from collections.abc import Mapping
from types import MappingProxyType

from src.timetable.models import Schedule


class SnapshotStore:
    """Copy-on-write mapping of group key -> latest Schedule."""

    def __init__(self, initial: Mapping[str, Schedule] | None = None) -> None:
        self._write_lock = threading.Lock()
        self._current: Mapping[str, Schedule] = MappingProxyType(dict(initial or {}))

    def snapshot(self) -> Mapping[str, Schedule]:
        """Read-only mapping of every published snapshot."""
        return self._current

    def get(self, key: str) -> Schedule | None:
        return self._current.get(key)

    def publish(self, key: str, schedule: Schedule) -> None:
        """Replace the snapshot for one key."""
        with self._write_lock:
            updated = dict(self._current)
            updated[key] = schedule
            self._current = MappingProxyType(updated)

    def replace_all(self, snapshots: Mapping[str, Schedule]) -> None:
        """Swap in a whole new generation of snapshots."""
        with self._write_lock:
            self._current = MappingProxyType(dict(snapshots))

    def __len__(self) -> int:
        return len(self._current)

    def __contains__(self, key: object) -> bool:
        return key in self._current
