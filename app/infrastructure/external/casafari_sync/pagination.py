"""
Recorrido secuencial de páginas del API de Casafari.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterator, Optional

from loguru import logger

from .errors import CasafariApiError
from .types import DEFAULT_PER_PAGE, ExternalListing, FetchPage


class PaginationWalker:
    """
    Produce lotes de listings, página a página, empezando siempre en la 1.

    Termina cuando:
    - la página trae `data` vacío (o sin `data`), o
    - `pagination.next_page` falta o es null, o
    - el fetch falla (CasafariApiError) o la página no tiene el formato
      esperado (`data` lista, `pagination` objeto). No se reintenta; el fallo queda en
      `failure` para que el caller distinga "terminó" de "se cortó".

    Cada iteración reinicia en la página 1.
    """

    def __init__(
        self,
        fetch_page: FetchPage,
        filters: Optional[dict[str, Any]] = None,
        *,
        per_page: int = DEFAULT_PER_PAGE,
    ) -> None:
        self._fetch_page = fetch_page
        self._filters = dict(filters or {})
        self._per_page = per_page
        self.failure: Optional[CasafariApiError] = None
        self.pages_fetched = 0

    def __iter__(self) -> Iterator[list[ExternalListing]]:
        self.failure = None
        self.pages_fetched = 0
        page = 1

        while True:
            try:
                payload = self._fetch_page(self._filters, page, self._per_page)
            except CasafariApiError as e:
                logger.error(f"Fetch de página {page} falló, se corta la paginación: {e}")
                self.failure = e
                return

            self.pages_fetched += 1
            records, pagination, problem = _split_page(payload)
            if problem is not None:
                logger.error(f"Página {page} con formato inválido, se corta la paginación: {problem}")
                self.failure = CasafariApiError(f"Página {page} con formato inválido: {problem}")
                return

            if not records:
                return

            yield list(records)

            if not pagination.get("next_page"):
                return
            page += 1


def _split_page(payload: Any) -> tuple[list, Mapping[str, Any], Optional[str]]:
    """Separa `data` y `pagination`; el tercer valor describe un envelope inválido."""
    if not isinstance(payload, Mapping):
        return [], {}, f"se esperaba un objeto, llegó {type(payload).__name__}"

    records = payload.get("data")
    if records is None:
        records = []
    elif not isinstance(records, list):
        return [], {}, f"'data' debe ser una lista, llegó {type(records).__name__}"

    pagination = payload.get("pagination")
    if pagination is None:
        pagination = {}
    elif not isinstance(pagination, Mapping):
        return [], {}, f"'pagination' debe ser un objeto, llegó {type(pagination).__name__}"

    return records, pagination, None
