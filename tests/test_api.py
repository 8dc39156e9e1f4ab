"""API tests for the hearing scheduling endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from audiencias.main import app, hearing_repo, venue_repo
from audiencias.settings import Settings, get_settings

_TEST_SETTINGS = Settings(
    default_work_windows="09:00-12:00",
    skip_weekends=True,
    max_range_days=31,
)


@pytest.fixture(autouse=True)
def _clear_repos():
    venue_repo.clear()
    hearing_repo.clear()
    app.dependency_overrides[get_settings] = lambda: _TEST_SETTINGS
    yield
    venue_repo.clear()
    hearing_repo.clear()
    app.dependency_overrides.clear()


@pytest.fixture()
def client():
    return TestClient(app)


def _create_venue(client: TestClient, **overrides) -> dict:
    payload = {"nome": "1ª Vara Criminal", "comarca": "Capital"}
    payload.update(overrides)
    resp = client.post("/api/varas", json=payload)
    assert resp.status_code == 201
    return resp.json()["dados"]


def _book(client: TestClient, vara_id: int, horario: str = "09:00", duracao: int = 60) -> dict:
    resp = client.post(
        "/api/audiencias",
        json={
            "numeroProcesso": "0001234-56.2024.8.26.0001",
            "varaId": vara_id,
            "dataAudiencia": "04/03/2024",
            "horarioInicio": horario,
            "duracao": duracao,
        },
    )
    assert resp.status_code == 201, resp.json()
    return resp.json()["dados"]


def _conflicts(client: TestClient, **params):
    query = {"data": "04/03/2024", "horarioInicio": "09:30:00", "duracao": 60}
    query.update(params)
    return client.get("/api/audiencias/conflitos", params=query)


# ---------------------------------------------------------------------------
# Venues and hearings
# ---------------------------------------------------------------------------


def test_create_and_list_venues(client: TestClient):
    venue = _create_venue(
        client,
        janelas=[{"inicio": "09:00", "fim": "17:00"}],
        bufferObrigatorioMinutos=10,
    )

    assert venue["nome"] == "1ª Vara Criminal"
    assert venue["janelas"] == [{"inicio": "09:00:00", "fim": "17:00:00"}]
    assert venue["bufferObrigatorioMinutos"] == 10

    resp = client.get("/api/varas")
    assert resp.status_code == 200
    assert [v["id"] for v in resp.json()["dados"]] == [venue["id"]]


def test_book_hearing_returns_wire_format(client: TestClient):
    venue = _create_venue(client)
    hearing = _book(client, venue["id"])

    assert hearing["dataAudiencia"] == "04/03/2024"
    assert hearing["horarioInicio"] == "09:00:00"
    assert hearing["horarioFim"] == "10:00:00"
    assert hearing["duracao"] == 60

    resp = client.get(f"/api/audiencias/{hearing['id']}")
    assert resp.status_code == 200
    assert resp.json()["dados"] == hearing


def test_double_booking_is_rejected_at_write_time(client: TestClient):
    venue = _create_venue(client)
    _book(client, venue["id"])

    resp = client.post(
        "/api/audiencias",
        json={
            "varaId": venue["id"],
            "dataAudiencia": "04/03/2024",
            "horarioInicio": "09:30",
            "duracao": 30,
        },
    )
    assert resp.status_code == 409
    body = resp.json()
    assert body["success"] is False
    assert "Conflito" in body["message"]


def test_reschedule_ignores_own_booking(client: TestClient):
    venue = _create_venue(client)
    hearing = _book(client, venue["id"])

    resp = client.put(
        f"/api/audiencias/{hearing['id']}",
        json={
            "varaId": venue["id"],
            "dataAudiencia": "04/03/2024",
            "horarioInicio": "09:30",
            "duracao": 60,
        },
    )
    assert resp.status_code == 200
    assert resp.json()["dados"]["horarioFim"] == "10:30:00"


def test_cancel_hearing(client: TestClient):
    venue = _create_venue(client)
    hearing = _book(client, venue["id"])

    assert client.delete(f"/api/audiencias/{hearing['id']}").status_code == 200
    missing = client.get(f"/api/audiencias/{hearing['id']}")
    assert missing.status_code == 404
    assert missing.json() == {
        "success": False,
        "message": f"Audiência não encontrada com ID: {hearing['id']}",
    }


def test_booking_unknown_venue_is_404(client: TestClient):
    resp = client.post(
        "/api/audiencias",
        json={
            "varaId": 99,
            "dataAudiencia": "04/03/2024",
            "horarioInicio": "09:00",
            "duracao": 60,
        },
    )
    assert resp.status_code == 404
    assert resp.json()["success"] is False


# ---------------------------------------------------------------------------
# Conflict check
# ---------------------------------------------------------------------------


def test_conflict_check_reports_booking(client: TestClient):
    venue = _create_venue(client)
    hearing = _book(client, venue["id"])

    resp = _conflicts(client, varaId=venue["id"])
    assert resp.status_code == 200
    body = resp.json()

    assert body["success"] is True
    assert body["temConflito"] is True
    assert body["dados"] == [
        {
            "id": hearing["id"],
            "numeroProcesso": "0001234-56.2024.8.26.0001",
            "data": "04/03/2024",
            "horarioInicio": "09:00:00",
            "horarioFim": "10:00:00",
            "varaId": venue["id"],
            "varaNome": "1ª Vara Criminal",
        }
    ]
    assert body["conflitos"] == body["dados"]


def test_conflict_check_excludes_edited_hearing(client: TestClient):
    venue = _create_venue(client)
    hearing = _book(client, venue["id"])

    for param in ("audienciaIdExcluir", "audienciaId"):
        resp = _conflicts(client, varaId=venue["id"], **{param: hearing["id"]})
        assert resp.status_code == 200
        assert resp.json()["dados"] == []
        assert resp.json()["conflitos"] == []
        assert resp.json()["temConflito"] is False


def test_conflict_check_touching_boundary_is_free(client: TestClient):
    venue = _create_venue(client)
    _book(client, venue["id"])

    resp = _conflicts(client, varaId=venue["id"], horarioInicio="10:00")
    assert resp.json()["dados"] == []


def test_conflict_check_unknown_venue_is_404(client: TestClient):
    resp = _conflicts(client, varaId=99)
    assert resp.status_code == 404
    body = resp.json()
    assert body["success"] is False
    assert "dados" not in body


def test_conflict_check_bad_date_is_400(client: TestClient):
    venue = _create_venue(client)
    resp = _conflicts(client, varaId=venue["id"], data="2024-03-04")
    assert resp.status_code == 400
    assert "dd/MM/yyyy" in resp.json()["message"]


def test_conflict_check_huge_duration_is_400(client: TestClient):
    venue = _create_venue(client)
    resp = _conflicts(client, varaId=venue["id"], horarioInicio="09:00", duracao=10**15)
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert "meia-noite" in body["message"]


def test_booking_huge_duration_is_400(client: TestClient):
    venue = _create_venue(client)
    resp = client.post(
        "/api/audiencias",
        json={
            "varaId": venue["id"],
            "dataAudiencia": "04/03/2024",
            "horarioInicio": "09:00",
            "duracao": 10**15,
        },
    )
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_conflict_check_missing_parameter_is_422(client: TestClient):
    resp = client.get("/api/audiencias/conflitos", params={"data": "04/03/2024"})
    assert resp.status_code == 422
    assert resp.json()["success"] is False


# ---------------------------------------------------------------------------
# Free-slot search
# ---------------------------------------------------------------------------


def _free_slot_body(**overrides) -> dict:
    body = {
        "dataInicio": "04/03/2024",
        "dataFim": "04/03/2024",
        "duracaoMinutos": 30,
        "bufferAntesMinutos": 0,
        "bufferDepoisMinutos": 0,
        "gradeMinutos": 0,
        "gapMinimoMinutos": 0,
    }
    body.update(overrides)
    return body


def test_free_slots_after_booking(client: TestClient):
    venue = _create_venue(client)
    _book(client, venue["id"])

    resp = client.post(
        "/api/audiencias/horarios-livres",
        json=_free_slot_body(
            varaId=venue["id"], janelas=[{"inicio": "09:00", "fim": "12:00"}]
        ),
    )
    assert resp.status_code == 200
    body = resp.json()

    assert body["success"] is True
    assert body["total"] == 1
    assert body["dados"] == [
        {
            "data": "04/03/2024",
            "horarioInicio": "10:00:00",
            "horarioFim": "10:30:00",
            "duracaoMinutos": 30,
            "varaId": venue["id"],
            "varaNome": "1ª Vara Criminal",
        }
    ]


def test_free_slots_blank_venue_means_all(client: TestClient):
    first = _create_venue(client, nome="A")
    second = _create_venue(client, nome="B")

    resp = client.post("/api/audiencias/horarios-livres", json=_free_slot_body(varaId=""))
    assert resp.status_code == 200
    assert [s["varaId"] for s in resp.json()["dados"]] == [first["id"], second["id"]]


def test_free_slots_tiling(client: TestClient):
    venue = _create_venue(client)
    resp = client.post(
        "/api/audiencias/horarios-livres",
        json=_free_slot_body(
            varaId=venue["id"],
            duracaoMinutos=60,
            fatiar=True,
        ),
    )
    assert [s["horarioInicio"] for s in resp.json()["dados"]] == [
        "09:00:00",
        "10:00:00",
        "11:00:00",
    ]


def test_free_slots_reversed_range_is_400(client: TestClient):
    _create_venue(client)
    resp = client.post(
        "/api/audiencias/horarios-livres",
        json=_free_slot_body(dataInicio="05/03/2024", dataFim="04/03/2024"),
    )
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert "dados" not in body


def test_free_slots_range_limit_named_in_message(client: TestClient):
    _create_venue(client)
    resp = client.post(
        "/api/audiencias/horarios-livres",
        json=_free_slot_body(dataInicio="01/01/2024", dataFim="31/03/2024"),
    )
    assert resp.status_code == 400
    assert "31 dias" in resp.json()["message"]


def test_free_slots_unknown_venue_is_404(client: TestClient):
    resp = client.post("/api/audiencias/horarios-livres", json=_free_slot_body(varaId=7))
    assert resp.status_code == 404


def test_quick_search_uses_default_spacing(client: TestClient):
    venue = _create_venue(client)
    _book(client, venue["id"], horario="09:00", duracao=60)

    resp = client.get(
        "/api/audiencias/horarios-livres/rapido",
        params={
            "dataInicio": "04/03/2024",
            "dataFim": "04/03/2024",
            "duracao": 30,
            "varaId": venue["id"],
        },
    )
    assert resp.status_code == 200
    # 10:00 + 10 min buffer = 10:10, snapped to the 15 min grid.
    assert [s["horarioInicio"] for s in resp.json()["dados"]] == ["10:15:00"]


def test_health(client: TestClient):
    assert client.get("/health").json() == {"status": "ok"}
