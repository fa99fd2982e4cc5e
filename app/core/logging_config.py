"""
Configuracion de loguru compartida por la API y el CLI de sync.
"""
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from app.core.config import Settings, settings as default_settings

_CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def setup_logging(config: Settings = default_settings, log_file: Optional[str] = None) -> None:
    """
    Reemplaza los sinks por defecto: consola con LOG_LEVEL y archivo con rotacion.

    log_file permite al CLI escribir en un archivo propio; por defecto LOG_FILE.
    """
    logger.remove()
    logger.add(sys.stderr, level=config.LOG_LEVEL, format=_CONSOLE_FORMAT, colorize=True)

    target = log_file or config.LOG_FILE
    if not target:
        return

    Path(target).parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        target,
        rotation="500 MB",
        retention="10 days",
        level=config.LOG_LEVEL,
    )
