"""In-memory repositories for venues and booked hearings.

These stand in for the database. Both stores guard their dicts with a lock,
so readers always see a consistent snapshot. ``HearingRepository`` also
re-validates overlaps under that lock on every write, so two requests that
both saw "no conflict" cannot both commit overlapping bookings for the same
venue.
"""

from __future__ import annotations

import itertools
import logging
import threading
from datetime import date, time, timedelta

from audiencias.domain.errors import ConflictError, NotFoundError
from audiencias.domain.models import HearingInterval, Venue, WorkWindow
from audiencias.services.overlap import overlaps

logger = logging.getLogger(__name__)


class VenueRepository:
    """Dict-backed store for Venue instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[int, Venue] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def add(self, venue: Venue) -> Venue:
        with self._lock:
            if venue.id is None:
                venue = venue.model_copy(update={"id": next(self._ids)})
            self._store[venue.id] = venue
        return venue

    def get(self, venue_id: int) -> Venue | None:
        with self._lock:
            return self._store.get(venue_id)

    def list_all(self) -> list[Venue]:
        with self._lock:
            snapshot = list(self._store.values())
        return sorted(snapshot, key=lambda v: v.id)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
            self._ids = itertools.count(1)


class HearingRepository:
    """Dict-backed store for booked HearingIntervals, keyed by hearing id."""

    def __init__(self) -> None:
        self._store: dict[int, HearingInterval] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def add(self, interval: HearingInterval, buffer_minutes: int = 0) -> HearingInterval:
        """Book *interval*, assigning a hearing id.

        Raises ``ConflictError`` if it overlaps a stored booking of the same
        venue and day (widened by *buffer_minutes* on both sides).
        """
        with self._lock:
            self._ensure_free(interval, buffer_minutes, exclude_id=None)
            stored = interval.model_copy(update={"hearing_id": next(self._ids)})
            self._store[stored.hearing_id] = stored
        logger.info(
            "Hearing %s booked: venue=%s %s %s-%s",
            stored.hearing_id,
            stored.venue_id,
            stored.date,
            stored.start_time,
            stored.end_time,
        )
        return stored

    def update(
        self, hearing_id: int, interval: HearingInterval, buffer_minutes: int = 0
    ) -> HearingInterval:
        """Move hearing *hearing_id* to *interval*; its old slot is ignored."""
        with self._lock:
            if hearing_id not in self._store:
                raise NotFoundError(f"Audiência não encontrada com ID: {hearing_id}")
            self._ensure_free(interval, buffer_minutes, exclude_id=hearing_id)
            stored = interval.model_copy(update={"hearing_id": hearing_id})
            self._store[hearing_id] = stored
        logger.info("Hearing %s rescheduled", hearing_id)
        return stored

    def get(self, hearing_id: int) -> HearingInterval | None:
        with self._lock:
            return self._store.get(hearing_id)

    def delete(self, hearing_id: int) -> None:
        with self._lock:
            if self._store.pop(hearing_id, None) is None:
                raise NotFoundError(f"Audiência não encontrada com ID: {hearing_id}")
        logger.info("Hearing %s deleted", hearing_id)

    def list_all(self) -> list[HearingInterval]:
        with self._lock:
            snapshot = list(self._store.values())
        return sorted(snapshot, key=lambda h: (h.date, h.start_time, h.venue_id))

    def list_for_venue_day(self, venue_id: int, day: date) -> list[HearingInterval]:
        with self._lock:
            return self._bookings_on(venue_id, day)

    def list_in_range(self, start: date, end: date) -> list[HearingInterval]:
        return [h for h in self.list_all() if start <= h.date <= end]

    def force_add(self, interval: HearingInterval) -> HearingInterval:
        """Store *interval* without overlap validation (legacy data import)."""
        with self._lock:
            stored = interval.model_copy(update={"hearing_id": next(self._ids)})
            self._store[stored.hearing_id] = stored
        return stored

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
            self._ids = itertools.count(1)

    def _bookings_on(self, venue_id: int, day: date) -> list[HearingInterval]:
        # Caller holds self._lock, which is not re-entrant.
        return [
            h
            for h in list(self._store.values())
            if h.venue_id == venue_id and h.date == day
        ]

    def _ensure_free(
        self, interval: HearingInterval, buffer_minutes: int, exclude_id: int | None
    ) -> None:
        clashes = [
            h
            for h in self._bookings_on(interval.venue_id, interval.date)
            if h.hearing_id != exclude_id
            and overlaps(interval, h, buffer_minutes, buffer_minutes)
        ]
        if clashes:
            described = ", ".join(
                f"{h.process_number or h.hearing_id} "
                f"({h.start_time:%H:%M} - {h.end_time:%H:%M})"
                for h in sorted(clashes, key=lambda h: h.start_time)
            )
            raise ConflictError(
                f"Conflito de horário detectado! Audiências conflitantes: {described}"
            )


# ---------------------------------------------------------------------------
# Seed data – a couple of venues with bookings on the next business days
# ---------------------------------------------------------------------------


def _next_business_day(start: date, offset: int) -> date:
    day = start
    remaining = offset
    while True:
        day += timedelta(days=1)
        if day.weekday() < 5:
            remaining -= 1
            if remaining <= 0:
                return day


def seed_demo_data(
    venues: VenueRepository, hearings: HearingRepository, today: date
) -> None:
    """Load sample venues and hearings useful for manual testing."""
    criminal = venues.add(Venue(name="1ª Vara Criminal", comarca="Capital"))
    civel = venues.add(
        Venue(
            name="2ª Vara Cível",
            comarca="Capital",
            work_windows=[WorkWindow(start=time(9, 0), end=time(17, 0))],
            mandatory_buffer_minutes=10,
        )
    )

    first = _next_business_day(today, 1)
    second = _next_business_day(today, 2)
    bookings = [
        (criminal.id, first, time(9, 0), 60, "0001234-56.2024.8.26.0001"),
        (criminal.id, first, time(14, 0), 90, "0004321-12.2024.8.26.0001"),
        (civel.id, first, time(10, 0), 45, "0009876-01.2024.8.26.0100"),
        (civel.id, second, time(13, 30), 60, "0005555-22.2023.8.26.0100"),
    ]
    for venue_id, day, start, minutes, process in bookings:
        hearings.add(
            HearingInterval.from_duration(
                venue_id, day, start, minutes, process_number=process
            )
        )
