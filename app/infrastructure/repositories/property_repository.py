"""
Repositorio para propiedades de Casafari (tabla casafari_properties).

Dos consumidores:
- El pipeline de sync: find_by_external_id / create / update / upsert.
- Los endpoints de administración: listados con filtros, soft delete,
  restore y borrado definitivo.
"""
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger
from sqlalchemy import Select, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.infrastructure.database.models import CasafariPropertyModel
from app.infrastructure.external.casafari_sync.errors import PersistenceError
from app.infrastructure.external.casafari_sync.field_mapper import MAPPED_COLUMNS, default_for
from app.infrastructure.external.casafari_sync.types import utc_now

TRASHED_MODES = ("without", "with", "only")


def scope_active(stmt: Select) -> Select:
    return stmt.where(CasafariPropertyModel.is_active.is_(True))


def scope_of_type(stmt: Select, property_type: str) -> Select:
    return stmt.where(CasafariPropertyModel.property_type == property_type)


def scope_in_city(stmt: Select, city: str) -> Select:
    return stmt.where(CasafariPropertyModel.city == city)


def scope_in_price_range(
    stmt: Select,
    min_price: Optional[Decimal] = None,
    max_price: Optional[Decimal] = None,
) -> Select:
    if min_price is not None:
        stmt = stmt.where(CasafariPropertyModel.price >= min_price)
    if max_price is not None:
        stmt = stmt.where(CasafariPropertyModel.price <= max_price)
    return stmt


def scope_trashed(stmt: Select, trashed: str = "without") -> Select:
    """
    - without: excluye filas con soft delete (default)
    - with: incluye todas
    - only: solo las borradas
    """
    if trashed not in TRASHED_MODES:
        raise ValueError(f"Modo trashed inválido: {trashed}")
    if trashed == "without":
        return stmt.where(CasafariPropertyModel.deleted_at.is_(None))
    if trashed == "only":
        return stmt.where(CasafariPropertyModel.deleted_at.is_not(None))
    return stmt


class PropertyRepository:
    """
    Gestiona la tabla casafari_properties.

    Contrato de update: REEMPLAZO COMPLETO de las columnas mapeadas. Una
    columna que no viene en `fields` vuelve a su default de mapeo; nunca se
    conserva el valor anterior (last_synced_at lo marca upsert). La identidad
    interna (id) y casafari_id no cambian.
    """

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Sync
    # ------------------------------------------------------------------

    def find_by_external_id(self, casafari_id: str) -> Optional[CasafariPropertyModel]:
        """
        Match exacto (case-sensitive) por casafari_id.

        Incluye filas con soft delete: el UNIQUE de casafari_id también las cubre.
        """
        query = select(CasafariPropertyModel).where(CasafariPropertyModel.casafari_id == casafari_id)
        return self.db.execute(query).scalar_one_or_none()

    def create(self, casafari_id: str, fields: Dict[str, Any]) -> CasafariPropertyModel:
        values = {column: fields.get(column, default_for(column)) for column in MAPPED_COLUMNS}
        entity = CasafariPropertyModel(casafari_id=casafari_id, **values)
        self.db.add(entity)
        self.db.flush()
        return entity

    def update(self, entity: CasafariPropertyModel, fields: Dict[str, Any]) -> CasafariPropertyModel:
        for column in MAPPED_COLUMNS:
            setattr(entity, column, fields.get(column, default_for(column)))
        self.db.flush()
        return entity

    def upsert(self, casafari_id: str, fields: Dict[str, Any]) -> Tuple[CasafariPropertyModel, bool]:
        """
        Crea o actualiza por casafari_id. Retorna (entidad, was_created).

        Cada upsert es su propia transacción: commit al final, rollback y
        PersistenceError si la base falla. last_synced_at se marca siempre:
        el valor de `fields` o, si no viene, la hora actual.
        """
        fields = {**fields, "last_synced_at": fields.get("last_synced_at") or utc_now()}
        try:
            existing = self.find_by_external_id(casafari_id)
            if existing is None:
                entity = self.create(casafari_id, fields)
                created = True
            else:
                entity = self.update(existing, fields)
                created = False
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(f"Upsert de {casafari_id} falló: {e}") from e

        return entity, created

    # ------------------------------------------------------------------
    # Administración
    # ------------------------------------------------------------------

    def get_by_id(self, property_id: int, include_trashed: bool = False) -> Optional[CasafariPropertyModel]:
        query = select(CasafariPropertyModel).where(CasafariPropertyModel.id == property_id)
        if not include_trashed:
            query = scope_trashed(query, "without")
        return self.db.execute(query).scalar_one_or_none()

    def _filtered(
        self,
        query: Select,
        *,
        property_type: Optional[str] = None,
        listing_type: Optional[str] = None,
        status: Optional[str] = None,
        city: Optional[str] = None,
        country: Optional[str] = None,
        is_active: Optional[bool] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        trashed: str = "without",
    ) -> Select:
        query = scope_trashed(query, trashed)
        if property_type:
            query = scope_of_type(query, property_type)
        if listing_type:
            query = query.where(CasafariPropertyModel.listing_type == listing_type)
        if status:
            query = query.where(CasafariPropertyModel.status == status)
        if city:
            query = scope_in_city(query, city)
        if country:
            query = query.where(CasafariPropertyModel.country == country)
        if is_active is True:
            query = scope_active(query)
        elif is_active is False:
            query = query.where(CasafariPropertyModel.is_active.is_(False))
        return scope_in_price_range(query, min_price, max_price)

    def list_properties(self, *, limit: int = 100, offset: int = 0, **filters: Any) -> List[CasafariPropertyModel]:
        query = self._filtered(select(CasafariPropertyModel), **filters)
        query = query.order_by(
            CasafariPropertyModel.created_at.desc(), CasafariPropertyModel.id.desc()
        ).limit(limit).offset(offset)
        return list(self.db.execute(query).scalars().all())

    def count(self, **filters: Any) -> int:
        query = self._filtered(select(func.count(CasafariPropertyModel.id)), **filters)
        return self.db.execute(query).scalar_one()

    def apply_changes(self, entity: CasafariPropertyModel, changes: Dict[str, Any]) -> CasafariPropertyModel:
        """
        Edición parcial desde la administración. casafari_id es inmutable.
        """
        if "casafari_id" in changes:
            raise ValueError("casafari_id es inmutable")
        for key, value in changes.items():
            setattr(entity, key, value)
        self.db.flush()
        return entity

    def soft_delete(self, entity: CasafariPropertyModel) -> CasafariPropertyModel:
        entity.deleted_at = utc_now()
        self.db.flush()
        logger.info(f"Propiedad {entity.casafari_id} marcada como borrada")
        return entity

    def restore(self, entity: CasafariPropertyModel) -> CasafariPropertyModel:
        entity.deleted_at = None
        self.db.flush()
        logger.info(f"Propiedad {entity.casafari_id} restaurada")
        return entity

    def commit(self) -> None:
        self.db.commit()

    def force_delete(self, entity: CasafariPropertyModel) -> None:
        casafari_id = entity.casafari_id
        self.db.delete(entity)
        self.db.flush()
        logger.info(f"Propiedad {casafari_id} eliminada definitivamente")
