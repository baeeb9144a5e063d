"""
Unit tests for the schedule page grid parser.
"""

import pytest

from builders import document, empty_cell, lesson_cell, row
from src.timetable.errors import MalformedDocumentError
from src.timetable.models import Lesson
from src.timetable.pages.schedule import SchedulePage, parse_schedule


class TestParseSchedule:
    """Test cases for parse_schedule."""

    def test_both_weeks_get_monday_lesson(self):
        """Day header 'пн' and lessons in both week columns fill Monday of both weeks."""
        html = document(row(lesson_cell(), lesson_cell(), day="пн"))

        schedule = parse_schedule(html)

        for week in schedule.weeks:
            day = week.days[0]
            assert day is not None
            assert len(day.lessons) == 1
            assert day.lessons[0].subject == "Математика"

    def test_grid_shape_is_fixed(self):
        """Two weeks of seven slots regardless of how many days appear."""
        schedule = parse_schedule(document(row(lesson_cell(), day="ср")))

        assert len(schedule.weeks) == 2
        assert all(len(week.days) == 7 for week in schedule.weeks)

    def test_empty_document_has_no_days(self):
        """A page without lessons yields only empty slots."""
        schedule = parse_schedule("<html><body></body></html>")

        assert len(schedule.weeks) == 2
        assert all(day is None for week in schedule.weeks for day in week.days)
        assert schedule.current_week == 1

    def test_lesson_fields(self):
        """All lesson fields are read from the row and the cell."""
        html = document(
            row(
                lesson_cell("Физика", "практика", "Петров П.П."),
                day="вт",
                time="2",
                extended=" 10:40--12:10 ",
            )
        )

        lesson = parse_schedule(html).weeks[0].days[1].lessons[0]

        assert lesson == Lesson(
            time="2",
            time_extended="10:40-12:10",
            subject="Физика",
            lesson_type="практика",
            teacher="Петров П.П.",
        )

    def test_extended_time_double_dash_normalized(self):
        """'09:00--10:30' becomes '09:00-10:30'."""
        html = document(row(lesson_cell(), day="пн", extended="09:00--10:30"))

        lesson = parse_schedule(html).weeks[0].days[0].lessons[0]

        assert lesson.time_extended == "09:00-10:30"

    def test_missing_elements_become_empty_strings(self):
        """Absent type, teacher and time elements are not errors."""
        html = document(
            row(
                lesson_cell("История", lesson_type=None, teacher=None),
                day="пн",
                time=None,
                extended=None,
            )
        )

        lesson = parse_schedule(html).weeks[0].days[0].lessons[0]

        assert lesson.subject == "История"
        assert lesson.lesson_type == ""
        assert lesson.teacher == ""
        assert lesson.time == ""
        assert lesson.time_extended == ""

    def test_cell_without_info_marker_is_skipped(self):
        """Only week 1 has a lesson; week 2 Monday stays empty."""
        html = document(row(lesson_cell(), empty_cell(), day="пн"))

        schedule = parse_schedule(html)

        assert schedule.weeks[0].days[0] is not None
        assert schedule.weeks[1].days[0] is None

    def test_rows_for_same_day_append_in_order(self):
        """Rows without a day header belong to the last seen day."""
        html = document(
            row(lesson_cell("Первая"), day="пн", time="1"),
            row(lesson_cell("Вторая"), time="2"),
            row(lesson_cell("Третья"), time="3"),
        )

        day = parse_schedule(html).weeks[0].days[0]

        assert [lesson.subject for lesson in day.lessons] == ["Первая", "Вторая", "Третья"]
        assert [lesson.time for lesson in day.lessons] == ["1", "2", "3"]

    def test_day_header_switches_day(self):
        """A new day header moves lessons to its slot."""
        html = document(
            row(lesson_cell("Пн"), day="пн"),
            row(lesson_cell("Пт"), day="пт"),
            row(None, lesson_cell("Сб"), day="сб"),
        )

        schedule = parse_schedule(html)

        assert schedule.weeks[0].days[0].lessons[0].subject == "Пн"
        assert schedule.weeks[0].days[4].lessons[0].subject == "Пт"
        assert schedule.weeks[0].days[5] is None
        assert schedule.weeks[1].days[5].lessons[0].subject == "Сб"

    def test_rows_before_first_header_go_to_monday(self):
        """Current day starts at Monday."""
        html = document(row(lesson_cell("Рано")))

        assert parse_schedule(html).weeks[0].days[0].lessons[0].subject == "Рано"

    def test_unknown_day_label_raises(self):
        """An unmapped day header makes the whole document unusable."""
        html = document(row(lesson_cell(), day="пн"), row(lesson_cell(), day="Пн"))

        with pytest.raises(MalformedDocumentError):
            parse_schedule(html)

    def test_short_rows_are_ignored(self):
        """Rows with fewer than four cells never touch the day index."""
        html = document(
            row(lesson_cell("Пн"), day="пн"),
            '<tr><td class="day-header">праздник</td><td></td></tr>',
            row(lesson_cell("Тоже пн")),
        )

        day = parse_schedule(html).weeks[0].days[0]

        assert [lesson.subject for lesson in day.lessons] == ["Пн", "Тоже пн"]

    def test_subject_uses_first_line(self):
        """Subject is the first non-blank line of the info block.

        The block text is stripped before splitting, so markup that opens
        with a newline still yields the subject rather than an empty string.
        """
        html = document(
            row('<td><div class="mainScheduleInfo">\n   Химия  \n  ауд. 101\n</div></td>', day="чт")
        )

        assert parse_schedule(html).weeks[0].days[3].lessons[0].subject == "Химия"

    def test_current_week_and_today_passed_through(self):
        """Active-week marker and the supplied today slot end up in the schedule."""
        html = document(row(lesson_cell(), day="пн"), week_marker="Вторая неделя")

        schedule = parse_schedule(html, today_day_id=4)

        assert schedule.current_week == 2
        assert schedule.today_day_id == 4

    def test_parsing_is_idempotent(self):
        """Same document twice -> equal schedules."""
        html = document(
            row(lesson_cell("А"), lesson_cell("Б"), day="пн"),
            row(lesson_cell("В"), day="ср"),
            week_marker="Первая неделя",
        )

        assert parse_schedule(html) == parse_schedule(html)

    def test_schedule_page_object(self):
        """SchedulePage keeps the group key and parses on demand."""
        page = SchedulePage(document(row(lesson_cell(), day="пн")), group_key="ИС502.1")

        assert page.group_key == "ИС502.1"
        assert page.parse(today_day_id=1).today_day_id == 1
