"""
Unit tests for SnapshotStore.
"""

import pytest

from src.timetable.models import Schedule
from src.timetable.store import SnapshotStore


class TestSnapshotStore:
    """Test cases for SnapshotStore."""

    def test_empty_store(self):
        store = SnapshotStore()

        assert store.get("ИС502.1") is None
        assert len(store) == 0

    def test_publish_and_get(self):
        store = SnapshotStore()
        schedule = Schedule.empty()

        store.publish("ИС502.1", schedule)

        assert store.get("ИС502.1") == schedule
        assert "ИС502.1" in store

    def test_snapshot_is_read_only(self):
        store = SnapshotStore()

        with pytest.raises(TypeError):
            store.snapshot()["ИС502.1"] = Schedule.empty()

    def test_old_snapshot_unaffected_by_publish(self):
        """Readers holding a snapshot keep a consistent generation."""
        store = SnapshotStore({"ИС502.1": Schedule.empty(current_week=1)})
        before = store.snapshot()

        store.publish("ИС502.1", Schedule.empty(current_week=2))
        store.publish("ИС502.2", Schedule.empty())

        assert before["ИС502.1"].current_week == 1
        assert "ИС502.2" not in before
        assert store.get("ИС502.1").current_week == 2

    def test_replace_all_swaps_whole_mapping(self):
        store = SnapshotStore({"ИС502.1": Schedule.empty()})

        store.replace_all({"ИС502.2": Schedule.empty()})

        assert set(store.snapshot()) == {"ИС502.2"}
