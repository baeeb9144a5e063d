"""Builders for schedule page markup used across tests."""


def lesson_cell(
    subject: str = "Математика",
    lesson_type: str | None = "лекция",
    teacher: str | None = "Иванов И.И.",
) -> str:
    parts = [f'<div class="mainScheduleInfo">{subject}\nдоп.инфо</div>']
    if lesson_type is not None:
        parts.append(f'<div class="small text-muted">{lesson_type}</div>')
    if teacher is not None:
        parts.append(f'<div class="Teacher"><a href="#">{teacher}</a></div>')
    return f"<td>{''.join(parts)}</td>"


def empty_cell() -> str:
    return "<td></td>"


def row(
    week1: str | None = None,
    week2: str | None = None,
    *,
    day: str | None = None,
    time: str | None = "1",
    extended: str | None = "09:00--10:30",
) -> str:
    first = f'<td class="day-header">{day}</td>' if day is not None else "<td></td>"
    spans = ""
    if time is not None:
        spans += f'<span class="time">{time}</span>'
    if extended is not None:
        spans += f'<span class="extend_time">{extended}</span>'
    return (
        f"<tr>{first}<td>{spans}</td>"
        f"{week1 or empty_cell()}{week2 or empty_cell()}</tr>"
    )


def document(*rows: str, week_marker: str | None = None) -> str:
    marker = ""
    if week_marker is not None:
        marker = f'<table><tr><td id="blink">{week_marker}</td></tr></table>'
    return (
        "<html><body>"
        f"{marker}"
        '<table class="table">'
        "<tr><th>День</th><th>Время</th><th>Первая неделя</th><th>Вторая неделя</th></tr>"
        f"{''.join(rows)}"
        "</table></body></html>"
    )
