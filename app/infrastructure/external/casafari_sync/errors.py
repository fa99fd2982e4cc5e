"""
Errores del pipeline Casafari -> base local.

Ninguno es fatal para una corrida de sync: el orquestador los registra y
los cuenta. Se propagan solo fuera del pipeline (p.ej. al construirlo).
"""

from __future__ import annotations

from typing import Optional


class CasafariSyncError(RuntimeError):
    """Error base del pipeline."""


class CasafariApiError(CasafariSyncError):
    """
    Fallo de transporte con el API: red, timeout o status no-2xx.
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MappingError(CasafariSyncError):
    """Registro externo malformado o con una forma inesperada."""


class PersistenceError(CasafariSyncError):
    """Fallo de la base de datos durante un upsert."""


class SyncConfigError(CasafariSyncError):
    """Error de configuración del pipeline."""
