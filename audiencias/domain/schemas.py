"""Wire DTOs: the ``{success, message, dados}`` JSON contract of the API.

Field names are snake_case in Python and camelCase on the wire
(``data_inicio`` <-> ``dataInicio``). Dates travel as ``dd/MM/yyyy`` and
times as ``HH:mm[:ss]``; conversion to domain types happens in the
``to_*`` / ``from_*`` helpers below and nowhere else.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from audiencias.domain.brformat import format_date, format_time, parse_date, parse_time
from audiencias.domain.models import (
    ConflictQuery,
    FreeSlotQuery,
    HearingInterval,
    Slot,
    Venue,
    WorkWindow,
)


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _blank_to_none(value):
    # The browser client sends "" for "any venue".
    if isinstance(value, str) and not value.strip():
        return None
    return value


# ---------------------------------------------------------------------------
# Building blocks
# ---------------------------------------------------------------------------


class WorkWindowDTO(WireModel):
    inicio: str
    fim: str

    def to_window(self) -> WorkWindow:
        return WorkWindow(start=parse_time(self.inicio), end=parse_time(self.fim))

    @classmethod
    def from_window(cls, window: WorkWindow) -> WorkWindowDTO:
        return cls(inicio=format_time(window.start), fim=format_time(window.end))


class SlotDTO(WireModel):
    data: str
    horario_inicio: str
    horario_fim: str
    duracao_minutos: int
    vara_id: int
    vara_nome: str | None = None

    @classmethod
    def from_slot(cls, slot: Slot) -> SlotDTO:
        return cls(
            data=format_date(slot.date),
            horario_inicio=format_time(slot.start_time),
            horario_fim=format_time(slot.end_time),
            duracao_minutos=slot.duration_minutes,
            vara_id=slot.venue_id,
            vara_nome=slot.venue_name,
        )


class ConflictDTO(WireModel):
    id: int | None
    numero_processo: str | None = None
    data: str
    horario_inicio: str
    horario_fim: str
    vara_id: int
    vara_nome: str | None = None

    @classmethod
    def from_interval(
        cls, interval: HearingInterval, venue_name: str | None = None
    ) -> ConflictDTO:
        return cls(
            id=interval.hearing_id,
            numero_processo=interval.process_number,
            data=format_date(interval.date),
            horario_inicio=format_time(interval.start_time),
            horario_fim=format_time(interval.end_time),
            vara_id=interval.venue_id,
            vara_nome=venue_name,
        )


class HearingDTO(WireModel):
    id: int
    numero_processo: str | None = None
    vara_id: int
    data_audiencia: str
    horario_inicio: str
    horario_fim: str
    duracao: int

    @classmethod
    def from_interval(cls, interval: HearingInterval) -> HearingDTO:
        return cls(
            id=interval.hearing_id,
            numero_processo=interval.process_number,
            vara_id=interval.venue_id,
            data_audiencia=format_date(interval.date),
            horario_inicio=format_time(interval.start_time),
            horario_fim=format_time(interval.end_time),
            duracao=interval.duration_minutes,
        )


class VenueDTO(WireModel):
    id: int
    nome: str
    comarca: str | None = None
    janelas: list[WorkWindowDTO] = Field(default_factory=list)
    buffer_obrigatorio_minutos: int = 0

    @classmethod
    def from_venue(cls, venue: Venue) -> VenueDTO:
        return cls(
            id=venue.id,
            nome=venue.name,
            comarca=venue.comarca,
            janelas=[WorkWindowDTO.from_window(w) for w in venue.work_windows],
            buffer_obrigatorio_minutos=venue.mandatory_buffer_minutes,
        )


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class FreeSlotRequest(WireModel):
    data_inicio: str
    data_fim: str
    vara_id: int | None = None
    duracao_minutos: int
    buffer_antes_minutos: int = 0
    buffer_depois_minutos: int = 0
    grade_minutos: int = 0
    gap_minimo_minutos: int = 0
    janelas: list[WorkWindowDTO] | None = None
    fatiar: bool = False

    @field_validator("vara_id", mode="before")
    @classmethod
    def _any_venue_when_blank(cls, value):
        return _blank_to_none(value)

    def to_query(self) -> FreeSlotQuery:
        return FreeSlotQuery(
            date_start=parse_date(self.data_inicio),
            date_end=parse_date(self.data_fim),
            venue_id=self.vara_id,
            duration_minutes=self.duracao_minutos,
            buffer_before_minutes=self.buffer_antes_minutos,
            buffer_after_minutes=self.buffer_depois_minutos,
            grid_minutes=self.grade_minutos,
            min_gap_minutes=self.gap_minimo_minutos,
            work_windows=(
                [w.to_window() for w in self.janelas] if self.janelas else None
            ),
            tile=self.fatiar,
        )


def conflict_query_from_wire(
    data: str,
    horario_inicio: str,
    duracao: int,
    vara_id: int,
    audiencia_id_excluir: int | None = None,
) -> ConflictQuery:
    """Build a ConflictQuery from the conflict-check query parameters."""
    candidate = HearingInterval.from_duration(
        vara_id, parse_date(data), parse_time(horario_inicio), duracao
    )
    return ConflictQuery(candidate=candidate, exclude_hearing_id=audiencia_id_excluir)


class HearingRequest(WireModel):
    numero_processo: str | None = None
    vara_id: int
    data_audiencia: str
    horario_inicio: str
    duracao: int

    def to_interval(self) -> HearingInterval:
        return HearingInterval.from_duration(
            self.vara_id,
            parse_date(self.data_audiencia),
            parse_time(self.horario_inicio),
            self.duracao,
            process_number=self.numero_processo,
        )


class VenueRequest(WireModel):
    nome: str = Field(min_length=1)
    comarca: str | None = None
    janelas: list[WorkWindowDTO] = Field(default_factory=list)
    buffer_obrigatorio_minutos: int = Field(default=0, ge=0)

    def to_venue(self) -> Venue:
        return Venue(
            name=self.nome,
            comarca=self.comarca,
            work_windows=[w.to_window() for w in self.janelas],
            mandatory_buffer_minutes=self.buffer_obrigatorio_minutos,
        )


# ---------------------------------------------------------------------------
# Response envelopes
# ---------------------------------------------------------------------------


class Envelope(WireModel):
    success: bool = True
    message: str | None = None


class ErrorResponse(Envelope):
    success: bool = False


class ConflictCheckResponse(Envelope):
    dados: list[ConflictDTO] = Field(default_factory=list)
    # Same list as ``dados``, under the key older clients read.
    conflitos: list[ConflictDTO] = Field(default_factory=list)
    tem_conflito: bool = False

    @classmethod
    def from_conflicts(cls, conflicts: list[ConflictDTO]) -> ConflictCheckResponse:
        return cls(dados=conflicts, conflitos=conflicts, tem_conflito=bool(conflicts))


class FreeSlotResponse(Envelope):
    dados: list[SlotDTO] = Field(default_factory=list)
    total: int = 0


class HearingResponse(Envelope):
    dados: HearingDTO


class HearingListResponse(Envelope):
    dados: list[HearingDTO] = Field(default_factory=list)


class VenueResponse(Envelope):
    dados: VenueDTO


class VenueListResponse(Envelope):
    dados: list[VenueDTO] = Field(default_factory=list)
