"""Service for detecting scheduling conflicts between hearings."""

from __future__ import annotations

import logging

from audiencias.domain.models import ConflictQuery, HearingInterval
from audiencias.repos.memory import HearingRepository, VenueRepository
from audiencias.services.bookings import load_day, resolve_venues
from audiencias.services.overlap import overlaps

logger = logging.getLogger(__name__)


def conflicting_intervals(
    candidate: HearingInterval,
    existing: list[HearingInterval],
    buffer_minutes: int = 0,
) -> list[HearingInterval]:
    """Return the intervals in *existing* that collide with *candidate*.

    Overlap rule: conflict if candidate.start < existing.end AND
    existing.start < candidate.end, with *existing* widened by
    *buffer_minutes* on both sides. Exact boundary touches are NOT conflicts
    when the buffer is zero.
    """
    return [
        interval
        for interval in existing
        if overlaps(candidate, interval, buffer_minutes, buffer_minutes)
    ]


def find_conflicts(
    query: ConflictQuery,
    hearings: HearingRepository,
    venues: VenueRepository,
) -> list[HearingInterval]:
    """Return every booking that conflicts with the query's candidate.

    The venue must exist (``NotFoundError`` otherwise). Its
    ``mandatory_buffer_minutes`` is applied symmetrically; venues without one
    are checked with zero buffer. The result is advisory: the store
    re-validates on write.
    """
    (venue,) = resolve_venues(venues, query.venue_id)
    existing = [
        h
        for h in load_day(hearings, venue.id, query.date)
        if query.exclude_hearing_id is None or h.hearing_id != query.exclude_hearing_id
    ]
    conflicts = conflicting_intervals(
        query.candidate, existing, venue.mandatory_buffer_minutes
    )
    logger.debug(
        "Conflict check venue=%s %s %s-%s: %d of %d bookings conflict",
        venue.id,
        query.date,
        query.candidate.start_time,
        query.candidate.end_time,
        len(conflicts),
        len(existing),
    )
    return conflicts
