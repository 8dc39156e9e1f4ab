"""Day enumeration and work-window resolution for slot discovery."""

from __future__ import annotations

from datetime import date, datetime, time

from dateutil.rrule import DAILY, FR, MO, TH, TU, WE, rrule

from audiencias.domain.brformat import parse_time
from audiencias.domain.errors import ValidationError
from audiencias.domain.models import Venue, WorkWindow

_WEEKDAYS = (MO, TU, WE, TH, FR)


def iter_days(start: date, end: date, skip_weekends: bool = True) -> list[date]:
    """Return every date in ``[start, end]``, optionally without weekends."""
    rule = rrule(
        DAILY,
        dtstart=datetime.combine(start, time()),
        until=datetime.combine(end, time()),
        byweekday=_WEEKDAYS if skip_weekends else None,
    )
    return [dt.date() for dt in rule]


def parse_work_windows(text: str) -> list[WorkWindow]:
    """Parse ``"08:00-12:00,13:00-18:00"`` into work windows."""
    windows: list[WorkWindow] = []
    for chunk in text.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        start, sep, end = chunk.partition("-")
        if not sep:
            raise ValidationError(
                f"Janela de trabalho inválida: '{chunk}'. Use HH:mm-HH:mm"
            )
        windows.append(WorkWindow(start=parse_time(start), end=parse_time(end)))
    return windows


def resolve_windows(
    requested: list[WorkWindow] | None,
    venue: Venue,
    default: list[WorkWindow],
) -> list[WorkWindow]:
    """Pick the windows for *venue*: request > venue schedule > default.

    Windows come back sorted; overlapping windows are rejected.
    """
    if requested:
        windows = requested
    elif venue.work_windows:
        windows = venue.work_windows
    else:
        windows = default

    ordered = sorted(windows, key=lambda w: w.start)
    for previous, current in zip(ordered, ordered[1:]):
        if current.start < previous.end:
            raise ValidationError(
                f"Janelas de trabalho sobrepostas: {previous.start:%H:%M}-"
                f"{previous.end:%H:%M} e {current.start:%H:%M}-{current.end:%H:%M}"
            )
    return ordered
