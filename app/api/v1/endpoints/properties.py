"""
Endpoints de administracion de propiedades sincronizadas desde Casafari.

Los handlers son `def` (no async): la sesion de base de datos es sincrona
y FastAPI los ejecuta en su threadpool.
"""
from decimal import Decimal
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status

from app.application.use_cases.property_use_cases import PropertyUseCases
from app.application.dto.property_dto import (
    PropertyCreateDTO,
    PropertyListResponseDTO,
    PropertyResponseDTO,
    PropertyUpdateDTO,
)
from app.api.v1.dependencies.use_case_deps import get_property_use_cases


router = APIRouter(prefix="/properties", tags=["Properties"])


@router.get(
    "/",
    response_model=PropertyListResponseDTO,
    summary="Listar propiedades"
)
def list_properties(
    property_type: Optional[str] = None,
    listing_type: Optional[str] = None,
    status_filter: Optional[str] = Query(None, alias="status"),
    city: Optional[str] = None,
    country: Optional[str] = None,
    is_active: Optional[bool] = None,
    min_price: Optional[Decimal] = Query(None, ge=0),
    max_price: Optional[Decimal] = Query(None, ge=0),
    trashed: Literal["without", "with", "only"] = Query(
        "without",
        description="without: excluye borradas, with: incluye borradas, only: solo borradas"
    ),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    use_cases: PropertyUseCases = Depends(get_property_use_cases)
) -> PropertyListResponseDTO:
    """
    Lista propiedades con filtros, ordenadas por fecha de creacion (mas nuevas primero).
    """
    return use_cases.list_properties(
        property_type=property_type,
        listing_type=listing_type,
        status=status_filter,
        city=city,
        country=country,
        is_active=is_active,
        min_price=min_price,
        max_price=max_price,
        trashed=trashed,
        limit=limit,
        offset=offset,
    )


@router.get(
    "/{property_id}",
    response_model=PropertyResponseDTO,
    summary="Obtener una propiedad por ID"
)
def get_property(
    property_id: int,
    use_cases: PropertyUseCases = Depends(get_property_use_cases)
) -> PropertyResponseDTO:
    """
    Obtiene una propiedad por su ID interno. Incluye propiedades borradas.
    """
    return use_cases.get_property(property_id)


@router.post(
    "/",
    response_model=PropertyResponseDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Crear una propiedad manualmente"
)
def create_property(
    dto: PropertyCreateDTO,
    use_cases: PropertyUseCases = Depends(get_property_use_cases)
) -> PropertyResponseDTO:
    return use_cases.create_property(dto)


@router.patch(
    "/{property_id}",
    response_model=PropertyResponseDTO,
    summary="Editar una propiedad"
)
def update_property(
    property_id: int,
    dto: PropertyUpdateDTO,
    use_cases: PropertyUseCases = Depends(get_property_use_cases)
) -> PropertyResponseDTO:
    """
    Edicion parcial. casafari_id no es editable.

    Nota: el proximo sync reemplaza todos los campos mapeados con los de Casafari.
    """
    return use_cases.update_property(property_id, dto)


@router.delete(
    "/{property_id}",
    response_model=PropertyResponseDTO,
    summary="Borrar una propiedad (soft delete)"
)
def delete_property(
    property_id: int,
    use_cases: PropertyUseCases = Depends(get_property_use_cases)
) -> PropertyResponseDTO:
    return use_cases.delete_property(property_id)


@router.post(
    "/{property_id}/restore",
    response_model=PropertyResponseDTO,
    summary="Restaurar una propiedad borrada"
)
def restore_property(
    property_id: int,
    use_cases: PropertyUseCases = Depends(get_property_use_cases)
) -> PropertyResponseDTO:
    return use_cases.restore_property(property_id)


@router.delete(
    "/{property_id}/force",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Eliminar una propiedad definitivamente"
)
def force_delete_property(
    property_id: int,
    use_cases: PropertyUseCases = Depends(get_property_use_cases)
) -> None:
    use_cases.force_delete_property(property_id)
