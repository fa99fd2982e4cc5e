"""
Data Transfer Objects (DTOs) para la capa de aplicacion.
"""
from .property_dto import (
    PropertyCreateDTO,
    PropertyUpdateDTO,
    PropertyResponseDTO,
    PropertyListResponseDTO,
)
from .sync_dto import SyncFiltersDTO, SyncResultDTO, ConnectionTestDTO

__all__ = [
    "PropertyCreateDTO",
    "PropertyUpdateDTO",
    "PropertyResponseDTO",
    "PropertyListResponseDTO",
    "SyncFiltersDTO",
    "SyncResultDTO",
    "ConnectionTestDTO",
]
