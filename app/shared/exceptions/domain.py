"""
Excepciones relacionadas con la lógica de dominio.
"""
from typing import Any

from app.shared.exceptions.base import AppException


class DomainException(AppException):
    """Excepción base para errores de dominio."""
    
    def __init__(self, message: str, error_code: str = "DOMAIN_ERROR", details=None):
        super().__init__(
            message=message,
            status_code=400,
            error_code=error_code,
            details=details
        )


class EntityNotFoundException(DomainException):
    """Excepción cuando no se encuentra una entidad."""
    
    def __init__(self, entity_name: str, entity_id: Any):
        super().__init__(
            message=f"{entity_name} con ID {entity_id} no encontrado",
            error_code="ENTITY_NOT_FOUND",
            details={"entity": entity_name, "id": str(entity_id)}
        )
        self.status_code = 404


class EntityAlreadyExistsException(DomainException):
    """Excepción cuando una entidad ya existe."""
    
    def __init__(self, entity_name: str, field: str, value: Any):
        super().__init__(
            message=f"{entity_name} con {field}={value} ya existe",
            error_code="ENTITY_ALREADY_EXISTS",
            details={"entity": entity_name, "field": field, "value": str(value)}
        )
        self.status_code = 409


class ValidationException(DomainException):
    """Excepción para errores de validación."""
    
    def __init__(self, message: str, field: str = None):
        details = {"field": field} if field else None
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details=details
        )


class PropertyNotFoundException(EntityNotFoundException):
    """Excepcion cuando no se encuentra una propiedad de Casafari."""
    
    def __init__(self, property_id: int):
        super().__init__("Propiedad", property_id)
        self.error_code = "PROPERTY_NOT_FOUND"


class SyncUnavailableException(AppException):
    """Excepcion cuando el sync no puede construirse (credenciales faltantes)."""
    
    def __init__(self, message: str):
        super().__init__(
            message=message,
            status_code=503,
            error_code="SYNC_UNAVAILABLE"
        )
