"""
Manejadores de eventos de inicio y cierre de la aplicacion.
"""
from typing import Callable

from fastapi import FastAPI
from loguru import logger

from app.core.config import settings
from app.core.logging_config import setup_logging
from app.infrastructure.database.session import close_db, init_db


def startup_handler(app: FastAPI) -> Callable:
    """
    Retorna la corrutina de inicio: logging, tablas y chequeo de credenciales.
    """
    async def startup() -> None:
        setup_logging(settings)
        logger.info(f"Iniciando {settings.APP_NAME} v{settings.APP_VERSION} (entorno: {settings.ENVIRONMENT})")

        try:
            init_db()
        except Exception:
            logger.exception("No se pudo inicializar la base de datos")
            raise
        logger.info("Base de datos inicializada")

        if not settings.casafari_configured:
            logger.warning(
                "CONFIG: CASAFARI_API_KEY / CASAFARI_API_SECRET no configuradas; "
                "POST /api/v1/sync/casafari respondera 503"
            )

        logger.success("Aplicacion iniciada correctamente")
        _log_available_urls()

    return startup


def _log_available_urls() -> None:
    base_url = f"http://{settings.access_host}:{settings.PORT}"
    logger.opt(colors=True).info("<bold><green>" + "=" * 60 + "</green></bold>")
    logger.opt(colors=True).info(f"<cyan>  Swagger UI:  {base_url}/docs</cyan>")
    logger.opt(colors=True).info(f"<cyan>  Propiedades: {base_url}/api/v1/properties/</cyan>")
    logger.opt(colors=True).info(f"<cyan>  Sync:        {base_url}/api/v1/sync/casafari</cyan>")
    logger.opt(colors=True).info("<bold><green>" + "=" * 60 + "</green></bold>")


def shutdown_handler(app: FastAPI) -> Callable:
    """
    Retorna la corrutina de cierre: libera el pool de conexiones.
    """
    async def shutdown() -> None:
        close_db()
        logger.info("Conexiones de base de datos cerradas")

    return shutdown
