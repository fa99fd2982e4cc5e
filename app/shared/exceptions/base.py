"""
Excepcion base de la aplicacion.

Toda excepcion que deba llegar al cliente HTTP como respuesta controlada
hereda de AppException; el handler registrado en main la serializa con
to_dict().
"""
from typing import Any, Dict, Optional


class AppException(Exception):
    """
    Error con status HTTP y codigo estable para el cliente.

    Args:
        message: Mensaje legible
        status_code: Status HTTP de la respuesta
        error_code: Codigo estable (p.ej. PROPERTY_NOT_FOUND)
        details: Datos adicionales, siempre serializables a JSON
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error_code, "message": self.message, "details": self.details}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.error_code}, status={self.status_code}, message={self.message!r})"
