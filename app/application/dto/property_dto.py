"""
DTOs relacionados con propiedades de Casafari.
Definen la estructura de datos para la administracion de propiedades sincronizadas.
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field


class PropertyFieldsDTO(BaseModel):
    """Campos editables desde la administracion."""
    reference: Optional[str] = None
    property_type: Optional[str] = Field(None, description="apartment, house, villa, land, commercial, office")
    listing_type: Optional[str] = Field(None, description="sale, rent")
    status: Optional[str] = Field(None, description="active, sold, rented, inactive")
    is_active: Optional[bool] = None

    # Ubicacion
    address: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = Field(None, max_length=2, description="Codigo ISO de 2 letras")
    latitude: Optional[Decimal] = Field(None, ge=-90, le=90)
    longitude: Optional[Decimal] = Field(None, ge=-180, le=180)

    # Detalles
    price: Optional[Decimal] = Field(None, ge=0)
    currency: Optional[str] = Field(None, max_length=3)
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    year_built: Optional[int] = None
    area_total: Optional[Decimal] = Field(None, ge=0)
    area_built: Optional[Decimal] = Field(None, ge=0)
    area_unit: Optional[str] = Field(None, max_length=10)
    description: Optional[str] = None

    # Media y datos adicionales
    main_photo_url: Optional[str] = None
    photos: Optional[List[str]] = None
    features: Optional[Union[List[Any], dict]] = None

    class Config:
        extra = "forbid"


class PropertyCreateDTO(PropertyFieldsDTO):
    """DTO para crear una propiedad manualmente."""
    casafari_id: str = Field(..., min_length=1, description="ID de la propiedad en Casafari")


class PropertyUpdateDTO(PropertyFieldsDTO):
    """
    DTO para edicion parcial. casafari_id no se acepta (es inmutable).
    """


class PropertyResponseDTO(BaseModel):
    """DTO de respuesta con una propiedad sincronizada."""
    id: int
    casafari_id: str
    reference: Optional[str] = None
    property_type: Optional[str] = None
    listing_type: Optional[str] = None
    status: str
    is_active: bool

    address: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    full_address: str
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None

    price: Optional[Decimal] = None
    currency: str
    formatted_price: str
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    year_built: Optional[int] = None
    area_total: Optional[Decimal] = None
    area_built: Optional[Decimal] = None
    area_unit: str
    description: Optional[str] = None

    main_photo_url: Optional[str] = None
    photos: Optional[List[Any]] = None
    features: Optional[Union[List[Any], dict]] = None
    raw_data: Optional[dict] = None

    last_synced_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None
    is_trashed: bool

    class Config:
        from_attributes = True


class PropertyListResponseDTO(BaseModel):
    """DTO de respuesta paginada."""
    items: List[PropertyResponseDTO]
    total: int
    limit: int
    offset: int
