"""
DTOs del sync Casafari -> base local.
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class SyncFiltersDTO(BaseModel):
    """Filtros que se pasan tal cual al API de Casafari."""
    country: Optional[str] = Field(None, description="Codigo de pais (PT, ES, ...)")
    city: Optional[str] = Field(None, description="Nombre de ciudad")
    type: Optional[str] = Field(None, description="Tipo de propiedad")

    def to_filters(self) -> Dict[str, Any]:
        """Solo los filtros con valor."""
        return {k: v for k, v in self.model_dump().items() if v}


class SyncResultDTO(BaseModel):
    """Resultado de la sincronizacion."""
    success: bool
    message: str
    total: int
    created: int
    updated: int
    errors: int
    pages: int
    fetch_failed: bool
    filters: Dict[str, Any] = Field(default_factory=dict)


class ConnectionTestDTO(BaseModel):
    """Resultado del test de conexion."""
    success: bool
    message: str
