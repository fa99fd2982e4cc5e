"""
Tests unitarios para los endpoints de sync Casafari.

Verifica el contrato HTTP con el use case mockeado:
- Los query params se convierten en filtros (solo los informados).
- Credenciales faltantes se traducen a 503.
"""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from app.application.dto.sync_dto import ConnectionTestDTO, SyncResultDTO
from app.api.v1.dependencies.use_case_deps import get_casafari_sync_use_cases
from app.shared.exceptions.domain import SyncUnavailableException


def _mock_sync_result(**overrides) -> SyncResultDTO:
    values = dict(
        success=True,
        message="Sync completado: 1 creada(s), 0 actualizada(s), 0 error(es)",
        total=1,
        created=1,
        updated=0,
        errors=0,
        pages=1,
        fetch_failed=False,
        filters={"country": "PT"},
    )
    values.update(overrides)
    return SyncResultDTO(**values)


@pytest.fixture
def mock_use_cases() -> MagicMock:
    uc = MagicMock()
    uc.run_sync.return_value = _mock_sync_result()
    uc.test_connection.return_value = ConnectionTestDTO(success=True, message="Conexion con Casafari OK")
    return uc


@pytest.fixture
def app_with_mock(mock_use_cases: MagicMock):
    """Crea la app FastAPI con el use case mockeado via dependency_overrides."""
    from main import create_application
    app = create_application()
    app.dependency_overrides[get_casafari_sync_use_cases] = lambda: mock_use_cases
    yield app
    app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_sync_endpoint_passes_filters(app_with_mock, mock_use_cases: MagicMock) -> None:
    """POST con filtros retorna las estadisticas de la corrida."""
    transport = ASGITransport(app=app_with_mock)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post("/api/v1/sync/casafari", params={"country": "PT", "type": "apartment"})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["created"] == 1
    assert data["fetch_failed"] is False
    mock_use_cases.run_sync.assert_called_once_with({"country": "PT", "type": "apartment"})


@pytest.mark.asyncio
async def test_sync_endpoint_without_filters(app_with_mock, mock_use_cases: MagicMock) -> None:
    transport = ASGITransport(app=app_with_mock)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post("/api/v1/sync/casafari")

    assert response.status_code == 200
    mock_use_cases.run_sync.assert_called_once_with({})


@pytest.mark.asyncio
async def test_sync_endpoint_reports_partial_failure(app_with_mock, mock_use_cases: MagicMock) -> None:
    mock_use_cases.run_sync.return_value = _mock_sync_result(success=False, errors=2, fetch_failed=True)

    transport = ASGITransport(app=app_with_mock)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post("/api/v1/sync/casafari")

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is False
    assert data["errors"] == 2
    assert data["fetch_failed"] is True


@pytest.mark.asyncio
async def test_sync_endpoint_without_credentials_returns_503(app_with_mock, mock_use_cases: MagicMock) -> None:
    mock_use_cases.run_sync.side_effect = SyncUnavailableException("Faltan CASAFARI_API_KEY / CASAFARI_API_SECRET")

    transport = ASGITransport(app=app_with_mock)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post("/api/v1/sync/casafari")

    assert response.status_code == 503
    assert response.json()["error"] == "SYNC_UNAVAILABLE"


@pytest.mark.asyncio
async def test_connection_endpoint(app_with_mock, mock_use_cases: MagicMock) -> None:
    transport = ASGITransport(app=app_with_mock)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/v1/sync/casafari/test")

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Conexion con Casafari OK"}
