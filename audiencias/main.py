"""FastAPI application: entry point for the hearing scheduling service."""

from __future__ import annotations

import logging
from datetime import date

from fastapi import Depends, FastAPI, Query

from audiencias.domain.errors import NotFoundError
from audiencias.domain.schemas import (
    ConflictCheckResponse,
    ConflictDTO,
    Envelope,
    FreeSlotRequest,
    FreeSlotResponse,
    HearingDTO,
    HearingListResponse,
    HearingRequest,
    HearingResponse,
    SlotDTO,
    VenueDTO,
    VenueListResponse,
    VenueRequest,
    VenueResponse,
    conflict_query_from_wire,
)
from audiencias.http_errors import register_error_handlers
from audiencias.repos.memory import HearingRepository, VenueRepository, seed_demo_data
from audiencias.services.bookings import resolve_venues
from audiencias.services.conflicts import find_conflicts
from audiencias.services.free_slots import find_free_slots
from audiencias.settings import Settings, get_settings

_settings = get_settings()
logging.basicConfig(
    level=_settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Hearing Scheduling Service")
register_error_handlers(app)

# ── Singletons (created at import time for simplicity) ────────────────
venue_repo = VenueRepository()
hearing_repo = HearingRepository()

if _settings.seed_demo_data:
    seed_demo_data(venue_repo, hearing_repo, date.today())


# ── Routes ────────────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/api/varas", response_model=VenueListResponse)
def list_venues() -> VenueListResponse:
    """Return all registered venues."""
    return VenueListResponse(dados=[VenueDTO.from_venue(v) for v in venue_repo.list_all()])


@app.post("/api/varas", response_model=VenueResponse, status_code=201)
def create_venue(body: VenueRequest) -> VenueResponse:
    """Register a venue, optionally with its own work windows."""
    venue = venue_repo.add(body.to_venue())
    logger.info("Venue %s registered: %s", venue.id, venue.name)
    return VenueResponse(dados=VenueDTO.from_venue(venue), message="Vara cadastrada")


@app.get("/api/audiencias/conflitos", response_model=ConflictCheckResponse)
def check_conflicts(
    data: str = Query(...),
    horario_inicio: str = Query(..., alias="horarioInicio"),
    duracao: int = Query(...),
    vara_id: int = Query(..., alias="varaId"),
    audiencia_id_excluir: int | None = Query(default=None, alias="audienciaIdExcluir"),
    audiencia_id: int | None = Query(default=None, alias="audienciaId"),
) -> ConflictCheckResponse:
    """Report every booking that a proposed hearing would collide with.

    ``audienciaIdExcluir`` (or ``audienciaId``) names the hearing being
    edited so that its current booking is ignored.
    """
    query = conflict_query_from_wire(
        data,
        horario_inicio,
        duracao,
        vara_id,
        audiencia_id_excluir if audiencia_id_excluir is not None else audiencia_id,
    )
    conflicts = find_conflicts(query, hearing_repo, venue_repo)
    venue = venue_repo.get(vara_id)
    venue_name = venue.name if venue else None

    if conflicts:
        logger.warning(
            "%d conflict(s) for venue %s on %s", len(conflicts), vara_id, query.date
        )
    return ConflictCheckResponse.from_conflicts(
        [ConflictDTO.from_interval(c, venue_name) for c in conflicts]
    )


@app.post("/api/audiencias/horarios-livres", response_model=FreeSlotResponse)
def search_free_slots(
    body: FreeSlotRequest, settings: Settings = Depends(get_settings)
) -> FreeSlotResponse:
    """Find open slots of the requested duration across a date range."""
    slots = find_free_slots(body.to_query(), hearing_repo, venue_repo, settings)
    return FreeSlotResponse(
        dados=[SlotDTO.from_slot(s) for s in slots],
        total=len(slots),
        message=f"{len(slots)} horários disponíveis encontrados",
    )


@app.get("/api/audiencias/horarios-livres/rapido", response_model=FreeSlotResponse)
def quick_search_free_slots(
    data_inicio: str = Query(..., alias="dataInicio"),
    data_fim: str = Query(..., alias="dataFim"),
    duracao: int = Query(...),
    vara_id: str | None = Query(default=None, alias="varaId"),
    buffer: int = Query(default=10),
    grade: int = Query(default=15),
    settings: Settings = Depends(get_settings),
) -> FreeSlotResponse:
    """Quick free-slot search with a 10 min buffer, 15 min grid and 5 min gap."""
    body = FreeSlotRequest(
        data_inicio=data_inicio,
        data_fim=data_fim,
        vara_id=vara_id,
        duracao_minutos=duracao,
        buffer_antes_minutos=buffer,
        buffer_depois_minutos=buffer,
        grade_minutos=grade,
        gap_minimo_minutos=5,
    )
    return search_free_slots(body, settings)


@app.get("/api/audiencias", response_model=HearingListResponse)
def list_hearings() -> HearingListResponse:
    """Return all booked hearings ordered by date and time."""
    return HearingListResponse(
        dados=[HearingDTO.from_interval(h) for h in hearing_repo.list_all()]
    )


@app.post("/api/audiencias", response_model=HearingResponse, status_code=201)
def book_hearing(body: HearingRequest) -> HearingResponse:
    """Book a hearing; the store rejects it with 409 if the slot is taken."""
    interval = body.to_interval()
    (venue,) = resolve_venues(venue_repo, interval.venue_id)
    stored = hearing_repo.add(interval, venue.mandatory_buffer_minutes)
    return HearingResponse(
        dados=HearingDTO.from_interval(stored), message="Audiência agendada"
    )


@app.get("/api/audiencias/{hearing_id}", response_model=HearingResponse)
def get_hearing(hearing_id: int) -> HearingResponse:
    """Return a single hearing by id."""
    hearing = hearing_repo.get(hearing_id)
    if hearing is None:
        raise NotFoundError(f"Audiência não encontrada com ID: {hearing_id}")
    return HearingResponse(dados=HearingDTO.from_interval(hearing))


@app.put("/api/audiencias/{hearing_id}", response_model=HearingResponse)
def reschedule_hearing(hearing_id: int, body: HearingRequest) -> HearingResponse:
    """Move a hearing; its own current booking never blocks the move."""
    interval = body.to_interval()
    (venue,) = resolve_venues(venue_repo, interval.venue_id)
    stored = hearing_repo.update(hearing_id, interval, venue.mandatory_buffer_minutes)
    return HearingResponse(
        dados=HearingDTO.from_interval(stored), message="Audiência atualizada"
    )


@app.delete("/api/audiencias/{hearing_id}", response_model=Envelope)
def cancel_hearing(hearing_id: int) -> Envelope:
    """Remove a hearing, freeing its slot."""
    hearing_repo.delete(hearing_id)
    return Envelope(message="Audiência removida")
