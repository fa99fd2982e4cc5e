"""
Mapeo de un listing de Casafari (JSON anidado) a una fila plana de
`casafari_properties`.

Reglas:
- Función pura: sin I/O, sin estado parcial.
- Campos opcionales ausentes (o null) toman su default, nunca levantan error.
- Siempre se emiten TODAS las columnas mapeadas (ver MAPPED_COLUMNS); el
  upsert hace reemplazo completo apoyándose en esto.
- raw_data guarda el registro original sin modificar.
- No valida la presencia de `id`: eso es precondición del caller.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional

from .errors import MappingError
from .types import ExternalListing

Transform = Callable[[Any], Any]

_MISSING = object()


def _to_decimal(places: int) -> Transform:
    quantum = Decimal(1).scaleb(-places)

    def transform(value: Any) -> Decimal:
        if isinstance(value, bool):
            raise MappingError(f"Valor numérico inválido: {value!r}")
        try:
            return Decimal(str(value)).quantize(quantum)
        except (InvalidOperation, ValueError) as e:
            raise MappingError(f"Valor numérico inválido: {value!r}") from e

    return transform


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise MappingError(f"Entero inválido: {value!r}")
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise MappingError(f"Entero inválido: {value!r}") from e
    if number != number.to_integral_value():
        raise MappingError(f"Entero inválido: {value!r}")
    return int(number)


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str) and value.strip().lower() in ("true", "false", "1", "0"):
        return value.strip().lower() in ("true", "1")
    raise MappingError(f"Booleano inválido: {value!r}")


def _to_list(value: Any) -> list:
    if not isinstance(value, list):
        raise MappingError(f"Se esperaba una lista, llegó {type(value).__name__}")
    return list(value)


def _to_collection(value: Any) -> Any:
    # features llega como lista de tags o como mapa clave/valor
    if isinstance(value, Mapping):
        return dict(value)
    return _to_list(value)


@dataclass(frozen=True)
class FieldMapping:
    """
    Define el mapeo de un campo del API a una columna local.

    - source: ruta dentro del listing, p.ej. ("address", "city")
    - column: nombre de la columna local
    - transform: función opcional para normalizar el valor antes de persistir
    - default: valor cuando el campo falta o viene null
    """

    source: tuple[str, ...]
    column: str
    transform: Optional[Transform] = None
    default: Any = None


PROPERTY_FIELD_MAPPINGS: list[FieldMapping] = [
    FieldMapping(("reference",), "reference"),
    FieldMapping(("type",), "property_type"),
    FieldMapping(("listing_type",), "listing_type"),
    FieldMapping(("status",), "status", default="active"),
    FieldMapping(("address", "street"), "address"),
    FieldMapping(("address", "city"), "city"),
    FieldMapping(("address", "region"), "region"),
    FieldMapping(("address", "postal_code"), "postal_code"),
    FieldMapping(("address", "country"), "country"),
    FieldMapping(("coordinates", "latitude"), "latitude", transform=_to_decimal(7)),
    FieldMapping(("coordinates", "longitude"), "longitude", transform=_to_decimal(7)),
    FieldMapping(("price", "amount"), "price", transform=_to_decimal(2)),
    FieldMapping(("price", "currency"), "currency", default="EUR"),
    FieldMapping(("details", "bedrooms"), "bedrooms", transform=_to_int),
    FieldMapping(("details", "bathrooms"), "bathrooms", transform=_to_int),
    FieldMapping(("details", "area_total"), "area_total", transform=_to_decimal(2)),
    FieldMapping(("details", "area_built"), "area_built", transform=_to_decimal(2)),
    FieldMapping(("details", "area_unit"), "area_unit", default="m2"),
    FieldMapping(("details", "year_built"), "year_built", transform=_to_int),
    FieldMapping(("description",), "description"),
    FieldMapping(("photos",), "photos", transform=_to_list, default=[]),
    FieldMapping(("features",), "features", transform=_to_collection, default=[]),
    FieldMapping(("is_active",), "is_active", transform=_to_bool, default=True),
]

# Columnas derivadas/técnicas que el mapeo también emite.
DERIVED_COLUMNS: tuple[str, ...] = ("main_photo_url", "raw_data", "last_synced_at")

MAPPED_COLUMNS: tuple[str, ...] = tuple(m.column for m in PROPERTY_FIELD_MAPPINGS) + DERIVED_COLUMNS

# Valor al que se resetea una columna que no viene en el payload (reemplazo completo).
MAPPED_DEFAULTS: dict[str, Any] = {
    **{m.column: m.default for m in PROPERTY_FIELD_MAPPINGS},
    **{c: None for c in DERIVED_COLUMNS},
}


def default_for(column: str) -> Any:
    """Copia del default de la columna (las listas no se comparten entre filas)."""
    return copy.deepcopy(MAPPED_DEFAULTS.get(column))


def _get_path(listing: ExternalListing, path: tuple[str, ...]) -> Any:
    """
    Recorre la ruta anidada. Retorna _MISSING si algún tramo falta o es null.

    Un tramo intermedio presente pero que no es un objeto es un registro
    malformado (p.ej. "address": "Rua X").
    """
    current: Any = listing
    for depth, key in enumerate(path):
        if not isinstance(current, Mapping):
            section = ".".join(path[:depth]) or "<root>"
            raise MappingError(f"Se esperaba un objeto en '{section}', llegó {type(current).__name__}")
        current = current.get(key)
        if current is None:
            return _MISSING
    return current


def _resolve_main_photo(listing: ExternalListing, photos: list) -> Optional[str]:
    main_photo = listing.get("main_photo") or (photos[0] if photos else None)
    if main_photo is None:
        return None
    if not isinstance(main_photo, str):
        raise MappingError(f"URL de foto inválida: se esperaba texto, llegó {type(main_photo).__name__}")
    return main_photo


def map_listing_to_row(listing: ExternalListing, *, synced_at: datetime) -> dict[str, Any]:
    """
    Mapea un listing de Casafari a un dict listo para el upsert.

    No incluye casafari_id: el identificador se pasa aparte al repositorio.
    """
    if not isinstance(listing, Mapping):
        raise MappingError(f"Se esperaba un objeto, llegó {type(listing).__name__}")

    row: dict[str, Any] = {}
    for m in PROPERTY_FIELD_MAPPINGS:
        raw = _get_path(listing, m.source)
        if raw is _MISSING:
            row[m.column] = default_for(m.column)
            continue
        row[m.column] = m.transform(raw) if m.transform else raw

    row["main_photo_url"] = _resolve_main_photo(listing, row["photos"])
    row["raw_data"] = copy.deepcopy(dict(listing))
    row["last_synced_at"] = synced_at
    return row
