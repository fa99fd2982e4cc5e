"""
Cliente mínimo del REST API de Casafari (sin SDKs externos).

Requisitos cubiertos:
- requests, basic auth (key/secret) y headers JSON en cada request
- timeout acotado por request
- listados paginados por page/per_page
- propiedad individual, alertas (leads FSBO) y comparables

Sin reintentos ni backoff: un fallo se reporta como CasafariApiError y el
caller decide. Los métodos `get_*` conservan el contrato "vacío en caso de
fallo" para consumidores que no distinguen errores; el pipeline usa
`fetch_page`, que sí levanta.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import requests
from loguru import logger

from .errors import CasafariApiError
from .types import DEFAULT_PER_PAGE

PROPERTIES_PATH = "/api/v1/properties"
ALERTS_PATH = "/api/v1/alerts"


@dataclass(frozen=True)
class CasafariCredentials:
    api_key: str
    api_secret: str


class CasafariClient:
    """
    Cliente HTTP de Casafari.

    Importante:
    - No interpreta los listings: eso se decide en el field_mapper.
    - Solo GETs; no hay efectos sobre el API remoto.
    """

    def __init__(
        self,
        credentials: CasafariCredentials,
        *,
        session: Optional[requests.Session] = None,
        base_url: str = "https://api.casafari.com",
        timeout_s: int = 30,
    ) -> None:
        self._creds = credentials
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._session = session or requests.Session()

    def fetch_page(
        self,
        filters: dict[str, Any],
        page: int,
        per_page: int = DEFAULT_PER_PAGE,
    ) -> dict[str, Any]:
        """
        Trae una página de listings. Levanta CasafariApiError si falla.

        Respuesta esperada: {"data": [...], "pagination": {"next_page": ...}}
        """
        query = {**filters, "page": page, "per_page": per_page}
        return self._request_json("GET", PROPERTIES_PATH, params=query)

    def get_properties(
        self,
        filters: Optional[dict[str, Any]] = None,
        page: int = 1,
        per_page: int = DEFAULT_PER_PAGE,
    ) -> dict[str, Any]:
        """Como fetch_page, pero retorna {} ante cualquier fallo."""
        try:
            return self.fetch_page(filters or {}, page, per_page)
        except CasafariApiError as e:
            logger.error(f"Casafari API error (page={page}): {e}")
            return {}

    def get_property(self, property_id: str) -> Optional[dict[str, Any]]:
        try:
            return self._request_json("GET", f"{PROPERTIES_PATH}/{property_id}")
        except CasafariApiError as e:
            logger.error(f"Casafari API error obteniendo propiedad {property_id}: {e}")
            return None

    def search_by_location(self, location: str) -> dict[str, Any]:
        return self.get_properties({"location": location})

    def get_properties_by_type(self, property_type: str) -> dict[str, Any]:
        return self.get_properties({"type": property_type})

    def get_alerts(self) -> dict[str, Any]:
        """Alertas de propiedades (leads FSBO)."""
        try:
            return self._request_json("GET", ALERTS_PATH)
        except CasafariApiError as e:
            logger.error(f"Casafari API error obteniendo alertas: {e}")
            return {}

    def get_comparables(self, property_id: str) -> dict[str, Any]:
        try:
            return self._request_json("GET", f"{PROPERTIES_PATH}/{property_id}/comparables")
        except CasafariApiError as e:
            logger.error(f"Casafari API error obteniendo comparables de {property_id}: {e}")
            return {}

    def test_connection(self) -> bool:
        """
        Request mínimo (per_page=1). True si el API responde 2xx; el body no se interpreta.
        """
        try:
            resp = self._send("GET", PROPERTIES_PATH, params={"per_page": 1})
        except CasafariApiError as e:
            logger.error(f"Test de conexión con Casafari falló: {e}")
            return False

        if not 200 <= resp.status_code < 300:
            logger.error(f"Test de conexión con Casafari falló: status {resp.status_code}")
            return False
        return True

    def _send(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any]] = None,
    ) -> requests.Response:
        """Request HTTP sin reintentos. Error de red / timeout: CasafariApiError sin status."""
        url = f"{self._base_url}{path}"
        try:
            return self._session.request(
                method=method,
                url=url,
                params=params,
                headers={
                    "Accept": "application/json",
                    "Content-Type": "application/json",
                },
                auth=(self._creds.api_key, self._creds.api_secret),
                timeout=self._timeout_s,
            )
        except requests.RequestException as e:
            raise CasafariApiError(f"Request a Casafari falló ({url}): {e}") from e

    def _request_json(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """
        Como _send, pero exige respuesta JSON.

        - Status no-2xx: CasafariApiError con status_code
        - Body que no es un objeto JSON: CasafariApiError
        """
        resp = self._send(method, path, params=params)

        if not 200 <= resp.status_code < 300:
            raise CasafariApiError(
                f"Casafari respondió {resp.status_code}: {resp.text[:500]}",
                status_code=resp.status_code,
            )

        try:
            payload = resp.json()
        except ValueError as e:
            raise CasafariApiError(f"Casafari devolvió un body que no es JSON ({resp.url})") from e

        if not isinstance(payload, dict):
            raise CasafariApiError(f"Casafari devolvió {type(payload).__name__}, se esperaba un objeto")
        return payload
