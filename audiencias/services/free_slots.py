"""Service for finding open time slots in venue calendars.

For every (venue, day) pair in the query the day's work windows are walked
against that day's bookings. Each gap between bookings (or between a window
edge and a booking), shrunk by the requested buffers and snapped to the
grid, offers at most one slot of the requested duration unless tiling is
asked for.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from datetime import date

from audiencias.domain.errors import ValidationError
from audiencias.domain.models import (
    FreeSlotQuery,
    HearingInterval,
    Slot,
    Venue,
    WorkWindow,
)
from audiencias.repos.memory import HearingRepository, VenueRepository
from audiencias.services.bookings import load_day, resolve_venues
from audiencias.services.calendar import iter_days, parse_work_windows, resolve_windows
from audiencias.services.overlap import from_minutes, to_minutes
from audiencias.settings import Settings

logger = logging.getLogger(__name__)


def find_free_slots(
    query: FreeSlotQuery,
    hearings: HearingRepository,
    venues: VenueRepository,
    settings: Settings,
) -> list[Slot]:
    """Return open slots ordered by date, start time, then venue id.

    Raises ``ValidationError`` when the range is longer than
    ``settings.max_range_days`` and ``NotFoundError`` for an unknown venue.
    The whole list is computed before anything is returned.
    """
    if query.span_days > settings.max_range_days:
        raise ValidationError(
            f"Intervalo de datas excede o limite de {settings.max_range_days} dias"
        )

    default_windows = parse_work_windows(settings.default_work_windows)
    targets = resolve_venues(venues, query.venue_id)
    days = iter_days(query.date_start, query.date_end, settings.skip_weekends)
    logger.debug(
        "Free-slot search %s..%s: %d venue(s), %d day(s), duration=%d",
        query.date_start,
        query.date_end,
        len(targets),
        len(days),
        query.duration_minutes,
    )

    slots: list[Slot] = []
    for venue in targets:
        windows = resolve_windows(query.work_windows, venue, default_windows)
        if not windows:
            continue
        for day in days:
            bookings = load_day(hearings, venue.id, day)
            slots.extend(_slots_for_day(query, venue, day, windows, bookings))

    slots.sort(key=lambda s: (s.date, s.start_time, s.venue_id))
    logger.debug("Free-slot search found %d slot(s)", len(slots))
    return slots


def _slots_for_day(
    query: FreeSlotQuery,
    venue: Venue,
    day: date,
    windows: list[WorkWindow],
    bookings: list[HearingInterval],
) -> Iterator[Slot]:
    # Grid boundaries count from the opening of the day's first window.
    anchor = to_minutes(windows[0].start)
    before = max(query.buffer_before_minutes, venue.mandatory_buffer_minutes)
    after = max(query.buffer_after_minutes, venue.mandatory_buffer_minutes)

    for window in windows:
        for gap_start, gap_end in free_gaps(window, bookings, before, after):
            for start, end in slots_in_gap(
                gap_start,
                gap_end,
                anchor=anchor,
                duration=query.duration_minutes,
                grid=query.grid_minutes,
                min_gap=query.min_gap_minutes,
                tile=query.tile,
            ):
                yield Slot(
                    venue_id=venue.id,
                    venue_name=venue.name,
                    date=day,
                    start_time=from_minutes(start),
                    end_time=from_minutes(end),
                )


def free_gaps(
    window: WorkWindow,
    bookings: list[HearingInterval],
    buffer_before: int = 0,
    buffer_after: int = 0,
) -> Iterator[tuple[int, int]]:
    """Yield ``(start, end)`` minute spans of *window* not taken by *bookings*.

    *bookings* must be sorted by start time. Each booking blocks
    ``[start - buffer_before, end + buffer_after)``. The cursor only moves
    forward, so bookings that already overlap each other act as one block.
    """
    opens, closes = to_minutes(window.start), to_minutes(window.end)
    cursor = opens
    for booking in bookings:
        gap_end = min(to_minutes(booking.start_time) - buffer_before, closes)
        if gap_end > cursor:
            yield cursor, gap_end
        cursor = max(cursor, to_minutes(booking.end_time) + buffer_after)
        if cursor >= closes:
            return
    if closes > cursor:
        yield cursor, closes


def snap_to_grid(minutes: int, anchor: int, grid: int) -> int:
    """Round *minutes* up to the next multiple of *grid* counted from *anchor*."""
    if grid <= 0:
        return minutes
    steps = -(-(minutes - anchor) // grid)
    return anchor + steps * grid


def slots_in_gap(
    gap_start: int,
    gap_end: int,
    *,
    anchor: int,
    duration: int,
    grid: int = 0,
    min_gap: int = 0,
    tile: bool = False,
) -> Iterator[tuple[int, int]]:
    """Yield slot spans inside one gap.

    The gap is usable only if its width after grid snapping is at least
    *duration* and at least *min_gap*. By default only the earliest slot is
    offered; with *tile* the rest of the gap is filled too, each next slot
    starting ``duration + min_gap`` later and snapped again.
    """
    start = snap_to_grid(gap_start, anchor, grid)
    width = gap_end - start
    if width < duration or width < min_gap:
        return
    while start + duration <= gap_end:
        yield start, start + duration
        if not tile:
            return
        start = snap_to_grid(start + duration + min_gap, anchor, grid)
