"""
Casos de uso para el sync Casafari -> base local.

Son sincronos: desde FastAPI se ejecutan con asyncio.to_thread para no
bloquear el event loop. Cada corrida abre su propia sesion.
"""
from typing import Any, Callable, Dict, Optional

from loguru import logger
from sqlalchemy.orm import Session

from app.application.dto.sync_dto import ConnectionTestDTO, SyncResultDTO
from app.core.config import Settings, settings as default_settings
from app.infrastructure.database.session import SessionLocal
from app.infrastructure.external.casafari_sync.errors import SyncConfigError
from app.infrastructure.external.casafari_sync.sync_service import build_client, build_from_settings
from app.shared.exceptions.domain import SyncUnavailableException


class CasafariSyncUseCases:
    """
    Orquesta una corrida de sync o un test de conexion desde la API.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        config: Settings = default_settings,
    ):
        self.session_factory = session_factory
        self.config = config

    def run_sync(self, filters: Optional[Dict[str, Any]] = None) -> SyncResultDTO:
        """
        Ejecuta la sincronizacion con los filtros dados.

        Raises:
            SyncUnavailableException: Si faltan las credenciales de Casafari
        """
        filters = filters or {}
        with self.session_factory() as db:
            try:
                service = build_from_settings(db, self.config)
            except SyncConfigError as e:
                logger.error(f"Sync Casafari no disponible: {e}")
                raise SyncUnavailableException(str(e)) from e

            stats = service.sync_properties(filters)

        if stats.fetch_failed:
            message = f"Sync interrumpido por un fallo del API tras {stats.total} registro(s)"
        elif stats.total == 0:
            message = "Casafari no devolvio propiedades"
        else:
            message = (
                f"Sync completado: {stats.created} creada(s), {stats.updated} actualizada(s), "
                f"{stats.errors} error(es)"
            )

        return SyncResultDTO(
            success=stats.errors == 0 and not stats.fetch_failed,
            message=message,
            filters=filters,
            **stats.as_dict(),
        )

    def test_connection(self) -> ConnectionTestDTO:
        try:
            client = build_client(self.config)
        except SyncConfigError as e:
            return ConnectionTestDTO(success=False, message=str(e))

        if client.test_connection():
            return ConnectionTestDTO(success=True, message="Conexion con Casafari OK")
        return ConnectionTestDTO(
            success=False,
            message="Conexion fallida. Verifica las credenciales de Casafari.",
        )
