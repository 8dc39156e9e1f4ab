"""Overlap predicate for hearing intervals, plus minute-of-day helpers."""

from __future__ import annotations

from datetime import time

from audiencias.domain.errors import ValidationError
from audiencias.domain.models import HearingInterval

MINUTES_PER_DAY = 24 * 60


def to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def from_minutes(minutes: int) -> time:
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValidationError(f"{minutes} minutes is outside a single day")
    return time(minutes // 60, minutes % 60)


def overlaps(
    a: HearingInterval,
    b: HearingInterval,
    buffer_before: int = 0,
    buffer_after: int = 0,
) -> bool:
    """Return True if candidate *a* collides with existing booking *b*.

    *b*'s occupied span is widened to ``[b.start - buffer_before,
    b.end + buffer_after)`` and compared against *a*'s half-open
    ``[a.start, a.end)``. Buffers belong to the existing booking (venue
    setup/teardown), so the predicate is only symmetric when both are equal.
    Intervals on different venues or dates never overlap.
    """
    if buffer_before < 0 or buffer_after < 0:
        raise ValidationError("Buffers não podem ser negativos")
    if a.venue_id != b.venue_id or a.date != b.date:
        return False

    occupied_start = to_minutes(b.start_time) - buffer_before
    occupied_end = to_minutes(b.end_time) + buffer_after
    return to_minutes(a.start_time) < occupied_end and occupied_start < to_minutes(
        a.end_time
    )
