"""
Endpoints para sincronizacion de datos externos.
Permite sincronizar Casafari con la base local desde la UI.
"""
import asyncio

from fastapi import APIRouter, Depends, status
from loguru import logger

from app.application.dto.sync_dto import ConnectionTestDTO, SyncFiltersDTO, SyncResultDTO
from app.application.use_cases.casafari_sync_use_cases import CasafariSyncUseCases
from app.api.v1.dependencies.use_case_deps import get_casafari_sync_use_cases


router = APIRouter(prefix="/sync", tags=["Sync"])


@router.post(
    "/casafari",
    response_model=SyncResultDTO,
    status_code=status.HTTP_200_OK,
    summary="Sincronizar propiedades de Casafari"
)
async def sync_casafari(
    filters: SyncFiltersDTO = Depends(),
    use_cases: CasafariSyncUseCases = Depends(get_casafari_sync_use_cases)
) -> SyncResultDTO:
    """
    Ejecuta la sincronizacion Casafari -> base local.
    
    La sincronizacion:
    - Recorre todas las paginas del API con los filtros dados (country, city, type)
    - Crea o actualiza cada propiedad por casafari_id
    - Un registro con error no corta la corrida (se cuenta en `errors`)
    
    Returns:
        SyncResultDTO con las estadisticas de la corrida
    """
    filter_values = filters.to_filters()
    logger.info(f"Iniciando sincronizacion Casafari desde API (filtros={filter_values})")

    # Ejecutar sync en thread separado para no bloquear el event loop
    result = await asyncio.to_thread(use_cases.run_sync, filter_values)

    logger.info(f"Sync completado: {result.message}")
    return result


@router.get(
    "/casafari/test",
    response_model=ConnectionTestDTO,
    summary="Probar la conexion con Casafari"
)
async def test_casafari_connection(
    use_cases: CasafariSyncUseCases = Depends(get_casafari_sync_use_cases)
) -> ConnectionTestDTO:
    """Hace un request minimo al API; no escribe en la base."""
    return await asyncio.to_thread(use_cases.test_connection)
