"""Reads from the hearing/venue stores on behalf of the engine.

Each engine call loads a fresh snapshot through these helpers; nothing is
cached between calls. Cancellation surfaces as ``Aborted`` and any other
store failure as ``StorageError``, neither of which is retried here.
"""

from __future__ import annotations

import asyncio
from datetime import date

from audiencias.domain.errors import (
    Aborted,
    NotFoundError,
    SchedulingError,
    StorageError,
)
from audiencias.domain.models import HearingInterval, Venue
from audiencias.repos.memory import HearingRepository, VenueRepository


def load_day(
    hearings: HearingRepository, venue_id: int, day: date
) -> list[HearingInterval]:
    """Return the bookings of *venue_id* on *day*, sorted by start time."""
    try:
        booked = hearings.list_for_venue_day(venue_id, day)
    except asyncio.CancelledError as exc:
        raise Aborted("Consulta de audiências cancelada") from exc
    except SchedulingError:
        raise
    except Exception as exc:
        raise StorageError(f"Falha ao consultar audiências: {exc}") from exc
    return sorted(booked, key=lambda h: (h.start_time, h.end_time))


def resolve_venues(venues: VenueRepository, venue_id: int | None) -> list[Venue]:
    """Return ``[venue]`` for a given id, or every venue when *venue_id* is None.

    An unknown id raises ``NotFoundError``.
    """
    try:
        if venue_id is None:
            return venues.list_all()
        venue = venues.get(venue_id)
    except asyncio.CancelledError as exc:
        raise Aborted("Consulta de varas cancelada") from exc
    except Exception as exc:
        raise StorageError(f"Falha ao consultar varas: {exc}") from exc
    if venue is None:
        raise NotFoundError(f"Vara não encontrada com ID: {venue_id}")
    return [venue]
