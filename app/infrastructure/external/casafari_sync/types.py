"""
Tipos y utilidades puras para el pipeline Casafari -> base local.

Se mantienen libres de I/O para poder testearlos fácilmente.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Mapping

# Un listing tal cual llega del API (estructura anidada JSON).
ExternalListing = Mapping[str, Any]

# fetch_page(filters, page, per_page) -> payload {"data": [...], "pagination": {...}}
FetchPage = Callable[[dict[str, Any], int, int], dict[str, Any]]

DEFAULT_PER_PAGE = 100


def utc_now() -> datetime:
    """Retorna la hora actual en UTC, como datetime aware."""
    return datetime.now(timezone.utc)


@dataclass
class SyncStats:
    """
    Estadísticas de una corrida de sync. No se persisten.

    - total: registros recibidos del API
    - created / updated: resultado del upsert
    - errors: registros que fallaron en el mapeo o en el upsert
    - pages: páginas que trajeron datos
    - fetch_failed: la paginación terminó por un fallo de transporte,
      no porque se acabaran los datos
    """

    total: int = 0
    created: int = 0
    updated: int = 0
    errors: int = 0
    pages: int = 0
    fetch_failed: bool = False

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)
