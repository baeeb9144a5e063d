"""Pydantic models for the two-week group timetable grid.

All data structures use Pydantic v2 for validation, serialization, and type
safety. Models are frozen: a Schedule is built once per fetch and only ever
compared, cached or replaced afterwards. Equality is structural, which is
what the differencer and the cache round-trip rely on.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

DAYS_PER_WEEK = 7
WEEKS_PER_SCHEDULE = 2

# Full localized day names used when rendering a week (index 0 = Monday)
WEEKDAY_NAMES: tuple[str, ...] = (
    "Понедельник",
    "Вторник",
    "Среда",
    "Четверг",
    "Пятница",
    "Суббота",
    "Воскресенье",
)


class Lesson(BaseModel):
    """A single class in one day slot.

    Missing markup yields empty strings, never missing fields.
    """

    model_config = ConfigDict(frozen=True)

    time: str = ""  # "1" / "09:00" short clock slot
    time_extended: str = ""  # "09:00-10:30"
    subject: str = ""
    lesson_type: str = ""  # "лекция", "практика", may be empty
    teacher: str = ""

    def render(self) -> str:
        return (
            f"<code>{self.time_extended}</code> {self.subject} "
            f"({self.lesson_type}) | {self.teacher}"
        )


class Day(BaseModel):
    """Lessons of one weekday, in document row order."""

    model_config = ConfigDict(frozen=True)

    lessons: list[Lesson] = Field(default_factory=list)

    def render(self) -> str:
        return "\n".join(lesson.render() for lesson in self.lessons)


class Week(BaseModel):
    """Fixed Monday..Sunday grid; an empty slot is None, not an empty Day."""

    model_config = ConfigDict(frozen=True)

    days: list[Day | None] = Field(
        default_factory=lambda: [None] * DAYS_PER_WEEK
    )

    @field_validator("days")
    @classmethod
    def _seven_days(cls, days: list[Day | None]) -> list[Day | None]:
        if len(days) != DAYS_PER_WEEK:
            raise ValueError(f"week must have {DAYS_PER_WEEK} day slots, got {len(days)}")
        return days

    def render(self) -> str:
        blocks = []
        for name, day in zip(WEEKDAY_NAMES, self.days):
            if day is not None:
                blocks.append(f"{name}:\n{day.render()}\n")
        return "\n".join(blocks)


class Schedule(BaseModel):
    """One snapshot of a group's biweekly timetable.

    `current_week` is 1-based. `today_day_id` is supplied by the caller and
    never derived from the clock.
    """

    model_config = ConfigDict(frozen=True)

    weeks: list[Week]
    current_week: int = Field(default=1, ge=1, le=WEEKS_PER_SCHEDULE)
    today_day_id: int = Field(default=0, ge=0, lt=DAYS_PER_WEEK)

    @field_validator("weeks")
    @classmethod
    def _two_weeks(cls, weeks: list[Week]) -> list[Week]:
        if len(weeks) != WEEKS_PER_SCHEDULE:
            raise ValueError(
                f"schedule must have {WEEKS_PER_SCHEDULE} weeks, got {len(weeks)}"
            )
        return weeks

    @classmethod
    def empty(cls, current_week: int = 1, today_day_id: int = 0) -> "Schedule":
        return cls(
            weeks=[Week() for _ in range(WEEKS_PER_SCHEDULE)],
            current_week=current_week,
            today_day_id=today_day_id,
        )

    def current(self, day_id: int) -> Day | None:
        """Day slot `day_id` of the active week."""
        return self.weeks[self.current_week - 1].days[day_id]

    def render(self) -> str:
        parts = [f"Текущая неделя: {self.current_week}"]
        for i, week in enumerate(self.weeks, start=1):
            parts.append(f"Неделя {i}:")
            parts.append(week.render())
        return "\n".join(parts)
