"""
Snapshot differencer for group timetables.

Compares a freshly parsed Schedule against the previously cached one and
produces at most one human-readable notice: a change to today's slot wins
over a change to tomorrow's, and nothing is reported when both match.

Only the active week of each snapshot is looked at, so a week rollover on
the upstream page shows up as a change when the two weeks differ.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict

from src.timetable.errors import OutOfRangeDayIndexError
from src.timetable.models import DAYS_PER_WEEK, Day, Schedule

# Latest day that still has a "tomorrow" inside the same week
MAX_TODAY_DAY_ID = DAYS_PER_WEEK - 2

_DAY_WORDS = {
    "today": "сегодня",
    "tomorrow": "завтра",
}


class ScheduleChange(BaseModel):
    """One detected change for today or tomorrow."""

    model_config = ConfigDict(frozen=True)

    day: Literal["today", "tomorrow"]
    kind: Literal["changed", "disappeared"]
    fresh: Day | None = None  # new content of the slot, None when it disappeared

    def render(self) -> str:
        word = _DAY_WORDS[self.day]
        if self.kind == "disappeared":
            return f"Расписание на {word} пропало..."
        return f"Изменилось расписание на {word}: {self.fresh.render()}"


# ---------------------------------------------------------------------------
# Day index validation
# ---------------------------------------------------------------------------
def check_today_day_id(today_day_id: int) -> int:
    """Validate a caller-supplied 'today' slot.

    Tomorrow must stay inside the week, so Sunday is rejected too.

    Raises:
        OutOfRangeDayIndexError: If today_day_id is outside 0..5.
    """
    if not 0 <= today_day_id <= MAX_TODAY_DAY_ID:
        raise OutOfRangeDayIndexError(
            f"today_day_id must be within 0..{MAX_TODAY_DAY_ID}, got {today_day_id}"
        )
    return today_day_id


# ---------------------------------------------------------------------------
# Diff
# ---------------------------------------------------------------------------
def _compare_slot(
    fresh: Schedule,
    previous: Schedule,
    day_id: int,
    day: Literal["today", "tomorrow"],
) -> ScheduleChange | None:
    new_day = fresh.current(day_id)
    if new_day == previous.current(day_id):
        return None
    if new_day is None:
        return ScheduleChange(day=day, kind="disappeared")
    return ScheduleChange(day=day, kind="changed", fresh=new_day)


def find_change(
    fresh: Schedule,
    previous: Schedule,
    today_day_id: int,
) -> ScheduleChange | None:
    """Detect the change worth reporting between two snapshots.

    Args:
        fresh: Newly parsed snapshot.
        previous: Last cached snapshot for the same group.
        today_day_id: Day slot treated as today (0=Monday, at most 5).

    Returns:
        The today change if any, else the tomorrow change, else None.

    Raises:
        OutOfRangeDayIndexError: If today_day_id is outside 0..5.
    """
    check_today_day_id(today_day_id)
    change = _compare_slot(fresh, previous, today_day_id, "today")
    if change is not None:
        return change
    return _compare_slot(fresh, previous, today_day_id + 1, "tomorrow")


def diff_schedules(
    fresh: Schedule,
    previous: Schedule,
    today_day_id: int,
) -> str | None:
    """Rendered change notice, or None when nothing changed for today/tomorrow."""
    change = find_change(fresh, previous, today_day_id)
    return change.render() if change is not None else None
