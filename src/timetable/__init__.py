"""Group timetable watcher.

Parses a university group's biweekly schedule page into a fixed grid,
detects changes for today/tomorrow against the cached snapshot, and keeps
the latest snapshot per group in a cache.
"""

from src.timetable.cache import (
    JsonDirScheduleCache,
    MemoryScheduleCache,
    ScheduleCache,
    SqliteScheduleCache,
    open_cache,
)
from src.timetable.diff import ScheduleChange, diff_schedules, find_change
from src.timetable.models import Day, Lesson, Schedule, Week
from src.timetable.pages.schedule import SchedulePage, parse_schedule
from src.timetable.refresh import BatchReport, ScheduleRefresher
from src.timetable.session import DocumentSession
from src.timetable.store import SnapshotStore

__all__ = [
    "Lesson",
    "Day",
    "Week",
    "Schedule",
    "SchedulePage",
    "parse_schedule",
    "ScheduleChange",
    "find_change",
    "diff_schedules",
    "ScheduleCache",
    "MemoryScheduleCache",
    "SqliteScheduleCache",
    "JsonDirScheduleCache",
    "open_cache",
    "DocumentSession",
    "ScheduleRefresher",
    "BatchReport",
    "SnapshotStore",
]
