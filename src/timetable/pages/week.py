"""Week/day resolution rules for the schedule page.

The page marks the active week of the biweekly rotation with a single
blinking cell (td#blink) and labels day rows with short weekday names.
"""

from enum import Enum
from typing import NamedTuple

from bs4 import BeautifulSoup

from src.timetable.errors import MalformedDocumentError
from src.timetable.logging import get_logger

log = get_logger(__name__)

ACTIVE_WEEK_CELL = "td#blink"

FIRST_WEEK_LABEL = "Первая неделя"
SECOND_WEEK_LABEL = "Вторая неделя"

# Short day-header labels -> week slot (case-sensitive, exhaustive)
WEEKDAY_LABELS: dict[str, int] = {
    "пн": 0,
    "вт": 1,
    "ср": 2,
    "чт": 3,
    "пт": 4,
    "сб": 5,
    "вс": 6,
}


class WeekMarker(str, Enum):
    """What the active-week cell said."""

    FIRST = "first"
    SECOND = "second"
    ABSENT = "absent"  # no marker cell on the page
    UNKNOWN = "unknown"  # marker present, text not recognized


class WeekResolution(NamedTuple):
    current_week: int
    marker: WeekMarker


def day_index(label: str) -> int:
    """Map a trimmed day-header label to its week slot.

    Raises:
        MalformedDocumentError: If the label is not a known weekday.
    """
    try:
        return WEEKDAY_LABELS[label]
    except KeyError:
        raise MalformedDocumentError(f"Unknown day header {label!r}") from None


def resolve_week(soup: BeautifulSoup) -> WeekResolution:
    """Find which of the two weeks is active.

    Anything other than the explicit second-week label falls back to week 1;
    the marker tells callers which case applied.
    """
    cell = soup.select_one(ACTIVE_WEEK_CELL)
    if cell is None:
        return WeekResolution(1, WeekMarker.ABSENT)

    text = cell.get_text().strip()
    if text == SECOND_WEEK_LABEL:
        return WeekResolution(2, WeekMarker.SECOND)
    if text == FIRST_WEEK_LABEL:
        return WeekResolution(1, WeekMarker.FIRST)

    log.warning("active_week_marker_unknown", text=text, fallback_week=1)
    return WeekResolution(1, WeekMarker.UNKNOWN)
