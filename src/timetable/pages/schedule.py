"""SchedulePage - extracts the biweekly timetable grid from a group page.

The group page (/group/<code>/<subgroup>) renders both weeks side by side in
one table. Each body row is one clock slot:

  table.table
    tr -> td.day-header ("пн", "вт", ...) on the first row of each weekday
    tr -> td (slot) | td (time: .time, .extend_time) | td week 1 | td week 2
      week cell with a lesson:
        .mainScheduleInfo  subject on the first text line
        .small.text-muted  lesson type
        .Teacher a         teacher name

Rows with fewer than four cells are headers or spacers. Week cells without
.mainScheduleInfo are free slots.
"""

from bs4 import BeautifulSoup, Tag

from src.timetable.logging import get_logger
from src.timetable.models import (
    DAYS_PER_WEEK,
    WEEKS_PER_SCHEDULE,
    Day,
    Lesson,
    Schedule,
    Week,
)
from src.timetable.pages.week import day_index, resolve_week
from src.timetable.utils import node_text, select_text

log = get_logger(__name__)

# First week column; week 2 sits right after it
WEEK_CELL_OFFSET = 2
MIN_ROW_CELLS = WEEK_CELL_OFFSET + WEEKS_PER_SCHEDULE


class SchedulePage:
    """One fetched group page.

    Parsing is pure: the same markup always yields an equal Schedule.
    """

    ROW = "table.table tr"
    CELL = "td"
    DAY_HEADER = "td.day-header"
    TIME = "td .time"
    EXTENDED_TIME = "td .extend_time"
    LESSON_INFO = ".mainScheduleInfo"
    LESSON_TYPE = ".small.text-muted"
    TEACHER = ".Teacher a"

    def __init__(self, html: str, group_key: str | None = None) -> None:
        self.html = html
        self.group_key = group_key

    def parse(self, today_day_id: int = 0) -> Schedule:
        """Build the Schedule for this page.

        Args:
            today_day_id: Day slot the caller treats as today (0=Monday).

        Returns:
            Schedule with both weeks, each a fixed 7-slot grid.

        Raises:
            MalformedDocumentError: If a day header carries an unknown label.
        """
        soup = BeautifulSoup(self.html, "lxml")
        resolution = resolve_week(soup)

        # grid[week][day] stays None until the first lesson lands there
        grid: list[list[list[Lesson] | None]] = [
            [None] * DAYS_PER_WEEK for _ in range(WEEKS_PER_SCHEDULE)
        ]
        current_day = 0
        lesson_count = 0

        for row in soup.select(self.ROW):
            cells = row.select(self.CELL)
            if len(cells) < MIN_ROW_CELLS:
                continue

            day_cell = row.select_one(self.DAY_HEADER)
            if day_cell is not None:
                current_day = day_index(day_cell.get_text().strip())

            for week in range(WEEKS_PER_SCHEDULE):
                cell = cells[WEEK_CELL_OFFSET + week]
                info = cell.select_one(self.LESSON_INFO)
                if info is None:
                    continue

                lesson = self._build_lesson(row, cell, info)
                slot = grid[week][current_day]
                if slot is None:
                    grid[week][current_day] = [lesson]
                else:
                    slot.append(lesson)
                lesson_count += 1

        schedule = Schedule(
            weeks=[
                Week(days=[Day(lessons=lessons) if lessons else None for lessons in days])
                for days in grid
            ],
            current_week=resolution.current_week,
            today_day_id=today_day_id,
        )

        log.info(
            "schedule_parsed",
            group=self.group_key,
            current_week=schedule.current_week,
            week_marker=resolution.marker.value,
            lessons=lesson_count,
        )
        return schedule

    def _build_lesson(self, row: Tag, cell: Tag, info: Tag) -> Lesson:
        # Time fields belong to the row and are shared by both week columns
        extended = node_text(row.select_one(self.EXTENDED_TIME))
        return Lesson(
            time=select_text(row, self.TIME),
            time_extended=extended.replace("--", "-").strip(),
            subject=_first_line(node_text(info)),
            lesson_type=select_text(cell, self.LESSON_TYPE),
            teacher=select_text(cell, self.TEACHER),
        )


def _first_line(text: str) -> str:
    lines = text.strip().splitlines()
    return lines[0].strip() if lines else ""


def parse_schedule(
    html: str, today_day_id: int = 0, group_key: str | None = None
) -> Schedule:
    """Parse a group page into a Schedule. See SchedulePage.parse."""
    return SchedulePage(html, group_key=group_key).parse(today_day_id)
