"""
Servicio de sincronización Casafari -> base local.

Diseño (resumen):
- Recorre las páginas del API (PaginationWalker) con los filtros dados
- Mapea cada listing a columnas planas (field_mapper)
- UPSERT por casafari_id, una transacción por registro
- Acumula estadísticas (SyncStats)

Aislamiento de fallos:
- Un registro que falla en el mapeo o en el upsert cuenta como error y se
  sigue con el próximo.
- Un fetch fallido corta la paginación; queda registrado en
  SyncStats.fetch_failed. sync_properties nunca levanta.

Sin lock entre corridas: se asume un único job programado.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from loguru import logger
from sqlalchemy.orm import Session

from app.core.config import Settings, settings as default_settings
from app.infrastructure.repositories.property_repository import PropertyRepository

from .casafari_client import CasafariClient, CasafariCredentials
from .errors import MappingError, SyncConfigError
from .field_mapper import map_listing_to_row
from .pagination import PaginationWalker
from .types import DEFAULT_PER_PAGE, ExternalListing, SyncStats, utc_now


def _listing_id(listing: Any) -> Optional[str]:
    if not isinstance(listing, Mapping):
        return None
    value = listing.get("id")
    if value is None or value == "":
        return None
    return str(value)


class CasafariSyncService:
    """
    Orquestador del pipeline: fetch -> paginar -> mapear -> upsert -> agregar.
    """

    def __init__(
        self,
        *,
        repository: PropertyRepository,
        client: CasafariClient,
        per_page: int = DEFAULT_PER_PAGE,
    ) -> None:
        self._repo = repository
        self._client = client
        self._per_page = per_page

    def sync_properties(self, filters: Optional[dict[str, Any]] = None) -> SyncStats:
        """
        Ejecuta una corrida completa para los filtros dados (country, city, type, ...).
        """
        filters = dict(filters or {})
        stats = SyncStats()
        logger.info(f"Sync Casafari iniciado (filtros={filters or 'ninguno'})")

        walker = PaginationWalker(self._client.fetch_page, filters, per_page=self._per_page)
        for batch in walker:
            stats.pages += 1
            for listing in batch:
                stats.total += 1
                self._sync_one(listing, stats)

        if walker.failure is not None:
            stats.fetch_failed = True
            logger.warning(
                f"Sync Casafari cortado por fallo de fetch tras {stats.pages} página(s): {walker.failure}"
            )

        logger.info(
            f"Sync Casafari completado. total={stats.total}, created={stats.created}, "
            f"updated={stats.updated}, errors={stats.errors}"
        )
        return stats

    def _sync_one(self, listing: ExternalListing, stats: SyncStats) -> None:
        listing_id = _listing_id(listing)
        try:
            if listing_id is None:
                raise MappingError("Listing sin 'id'")
            row = map_listing_to_row(listing, synced_at=utc_now())
            _, created = self._repo.upsert(listing_id, row)
        except Exception as e:
            stats.errors += 1
            logger.error(
                f"Error sincronizando propiedad {listing_id or 'unknown'}: "
                f"{type(e).__name__}: {e}"
            )
            return

        if created:
            stats.created += 1
        else:
            stats.updated += 1

    def test_connection(self) -> bool:
        """Probe de salud: un fetch mínimo, sin tocar la base."""
        return self._client.test_connection()


def build_client(config: Settings = default_settings) -> CasafariClient:
    """
    Construye el cliente HTTP desde la configuración.

    Requiere CASAFARI_API_KEY y CASAFARI_API_SECRET.
    """
    if not config.casafari_configured:
        raise SyncConfigError("Faltan CASAFARI_API_KEY / CASAFARI_API_SECRET")

    return CasafariClient(
        CasafariCredentials(api_key=config.CASAFARI_API_KEY, api_secret=config.CASAFARI_API_SECRET),
        base_url=config.CASAFARI_BASE_URL,
        timeout_s=config.CASAFARI_TIMEOUT,
    )


def build_from_settings(db: Session, config: Settings = default_settings) -> CasafariSyncService:
    """
    Constructor "oficial" del pipeline sobre una sesión ya abierta.
    """
    return CasafariSyncService(
        repository=PropertyRepository(db),
        client=build_client(config),
        per_page=config.CASAFARI_PER_PAGE,
    )
