"""Domain models for the hearing scheduling engine."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field, model_validator

from audiencias.domain.errors import ValidationError


def _check_minute_resolution(value: dt.time, label: str) -> None:
    if value.second or value.microsecond:
        raise ValidationError(f"{label} must have minute resolution, got {value}")


def _minutes_between(start: dt.time, end: dt.time) -> int:
    return (end.hour * 60 + end.minute) - (start.hour * 60 + start.minute)


# ---------------------------------------------------------------------------
# Venues and their working hours
# ---------------------------------------------------------------------------


class WorkWindow(BaseModel):
    """One workable period of a day, e.g. 08:00-12:00."""

    model_config = ConfigDict(frozen=True)

    start: dt.time
    end: dt.time

    @model_validator(mode="after")
    def _end_after_start(self) -> WorkWindow:
        _check_minute_resolution(self.start, "window start")
        _check_minute_resolution(self.end, "window end")
        if self.end <= self.start:
            raise ValidationError(
                f"Janela de trabalho inválida: {self.start:%H:%M} deve ser "
                f"anterior a {self.end:%H:%M}"
            )
        return self


class Venue(BaseModel):
    """A judicial venue (vara) whose calendar is being scheduled."""

    id: int | None = None
    name: str
    comarca: str | None = None
    work_windows: list[WorkWindow] = Field(default_factory=list)
    mandatory_buffer_minutes: int = Field(default=0, ge=0)


# ---------------------------------------------------------------------------
# Intervals
# ---------------------------------------------------------------------------


class HearingInterval(BaseModel):
    """A booked (``hearing_id`` set) or candidate interval on a venue's day.

    Half-open: an interval ending at 10:00 leaves 10:00 free.
    """

    model_config = ConfigDict(frozen=True)

    venue_id: int
    date: dt.date
    start_time: dt.time
    end_time: dt.time
    hearing_id: int | None = None
    process_number: str | None = None

    @model_validator(mode="after")
    def _end_after_start(self) -> HearingInterval:
        _check_minute_resolution(self.start_time, "start_time")
        _check_minute_resolution(self.end_time, "end_time")
        if self.end_time <= self.start_time:
            raise ValidationError(
                f"Horário de início ({self.start_time:%H:%M}) deve ser anterior "
                f"ao horário de fim ({self.end_time:%H:%M})"
            )
        return self

    @classmethod
    def from_duration(
        cls,
        venue_id: int,
        date: dt.date,
        start_time: dt.time,
        duration_minutes: int,
        **extra,
    ) -> HearingInterval:
        """Build an interval from a start time and a length in minutes.

        The interval must end on the same day; a duration that crosses
        midnight is rejected.
        """
        if duration_minutes <= 0:
            raise ValidationError("Duração deve ser maior que zero")
        start = start_time.hour * 60 + start_time.minute
        # An end of exactly 24:00 is not representable as a time of day.
        if duration_minutes >= 24 * 60 - start:
            raise ValidationError("Audiência não pode ultrapassar a meia-noite")
        end = start + duration_minutes
        return cls(
            venue_id=venue_id,
            date=date,
            start_time=start_time,
            end_time=dt.time(end // 60, end % 60),
            **extra,
        )

    @property
    def duration_minutes(self) -> int:
        return _minutes_between(self.start_time, self.end_time)


# ---------------------------------------------------------------------------
# Queries and results
# ---------------------------------------------------------------------------


class ConflictQuery(BaseModel):
    candidate: HearingInterval
    # Edit mode: the hearing being rescheduled does not conflict with itself.
    exclude_hearing_id: int | None = None

    @property
    def venue_id(self) -> int:
        return self.candidate.venue_id

    @property
    def date(self) -> dt.date:
        return self.candidate.date


class FreeSlotQuery(BaseModel):
    date_start: dt.date
    date_end: dt.date
    venue_id: int | None = None
    duration_minutes: int
    buffer_before_minutes: int = 0
    buffer_after_minutes: int = 0
    grid_minutes: int = 0
    min_gap_minutes: int = 0
    work_windows: list[WorkWindow] | None = None
    tile: bool = False

    @model_validator(mode="after")
    def _check_ranges(self) -> FreeSlotQuery:
        if self.date_start > self.date_end:
            raise ValidationError(
                "Data de início deve ser anterior ou igual à data de fim"
            )
        if self.duration_minutes <= 0:
            raise ValidationError("Duração deve ser maior que zero")
        for label, value in (
            ("Buffer antes", self.buffer_before_minutes),
            ("Buffer depois", self.buffer_after_minutes),
            ("Grade", self.grid_minutes),
            ("Gap mínimo", self.min_gap_minutes),
        ):
            if value < 0:
                raise ValidationError(f"{label} não pode ser negativo")
        return self

    @property
    def span_days(self) -> int:
        return (self.date_end - self.date_start).days + 1


class Slot(BaseModel):
    """An open interval offered for booking."""

    model_config = ConfigDict(frozen=True)

    venue_id: int
    venue_name: str | None = None
    date: dt.date
    start_time: dt.time
    end_time: dt.time

    @property
    def duration_minutes(self) -> int:
        return _minutes_between(self.start_time, self.end_time)
