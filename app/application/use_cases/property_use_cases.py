"""
Casos de uso para la administracion de propiedades sincronizadas desde Casafari.
"""
from decimal import Decimal
from typing import Optional

from loguru import logger

from app.application.dto.property_dto import (
    PropertyCreateDTO,
    PropertyListResponseDTO,
    PropertyResponseDTO,
    PropertyUpdateDTO,
)
from app.infrastructure.database.models import CasafariPropertyModel
from app.infrastructure.external.casafari_sync.field_mapper import MAPPED_COLUMNS, default_for
from app.infrastructure.repositories.property_repository import PropertyRepository
from app.shared.exceptions.domain import (
    EntityAlreadyExistsException,
    PropertyNotFoundException,
    ValidationException,
)


class PropertyUseCases:
    """
    Casos de uso para gestion de propiedades.

    Las filas con soft delete siguen siendo direccionables por ID (para
    verlas, restaurarlas o borrarlas definitivamente).
    """

    def __init__(self, repository: PropertyRepository):
        self.repository = repository

    def list_properties(
        self,
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
        limit: int = 50,
        offset: int = 0,
    ) -> PropertyListResponseDTO:
        """
        Lista propiedades con filtros, ordenadas por fecha de creacion descendente.
        """
        if min_price is not None and max_price is not None and min_price > max_price:
            raise ValidationException("min_price no puede ser mayor que max_price", field="min_price")

        filters = dict(
            property_type=property_type,
            listing_type=listing_type,
            status=status,
            city=city,
            country=country,
            is_active=is_active,
            min_price=min_price,
            max_price=max_price,
            trashed=trashed,
        )
        rows = self.repository.list_properties(limit=limit, offset=offset, **filters)
        return PropertyListResponseDTO(
            items=[PropertyResponseDTO.model_validate(r) for r in rows],
            total=self.repository.count(**filters),
            limit=limit,
            offset=offset,
        )

    def get_property(self, property_id: int) -> PropertyResponseDTO:
        return PropertyResponseDTO.model_validate(self._get_or_404(property_id))

    def create_property(self, data: PropertyCreateDTO) -> PropertyResponseDTO:
        """
        Alta manual. Los campos no informados toman los defaults del mapeo
        (status=active, currency=EUR, area_unit=m2, is_active=True).

        Raises:
            EntityAlreadyExistsException: Si el casafari_id ya existe (incluso borrado)
        """
        if self.repository.find_by_external_id(data.casafari_id) is not None:
            raise EntityAlreadyExistsException("Propiedad", "casafari_id", data.casafari_id)

        fields = data.model_dump(exclude={"casafari_id"}, exclude_none=True)
        entity = self.repository.create(data.casafari_id, fields)
        self.repository.commit()
        logger.info(f"Propiedad {data.casafari_id} creada manualmente (id={entity.id})")
        return PropertyResponseDTO.model_validate(entity)

    def update_property(self, property_id: int, data: PropertyUpdateDTO) -> PropertyResponseDTO:
        entity = self._get_or_404(property_id)
        changes = data.model_dump(exclude_unset=True)

        # Un null explicito en columnas con default vuelve al default
        for key, value in changes.items():
            if value is None and key in MAPPED_COLUMNS and default_for(key) is not None:
                changes[key] = default_for(key)

        self.repository.apply_changes(entity, changes)
        self.repository.commit()
        logger.info(f"Propiedad {entity.casafari_id} editada: {sorted(changes)}")
        return PropertyResponseDTO.model_validate(entity)

    def delete_property(self, property_id: int) -> PropertyResponseDTO:
        entity = self._get_or_404(property_id)
        if not entity.is_trashed:
            self.repository.soft_delete(entity)
            self.repository.commit()
        return PropertyResponseDTO.model_validate(entity)

    def restore_property(self, property_id: int) -> PropertyResponseDTO:
        entity = self._get_or_404(property_id)
        if entity.is_trashed:
            self.repository.restore(entity)
            self.repository.commit()
        return PropertyResponseDTO.model_validate(entity)

    def force_delete_property(self, property_id: int) -> None:
        entity = self._get_or_404(property_id)
        self.repository.force_delete(entity)
        self.repository.commit()

    def _get_or_404(self, property_id: int) -> CasafariPropertyModel:
        entity = self.repository.get_by_id(property_id, include_trashed=True)
        if entity is None:
            raise PropertyNotFoundException(property_id)
        return entity
