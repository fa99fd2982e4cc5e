"""
Dependencias para inyección de repositorios.
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from app.infrastructure.database.session import get_db
from app.infrastructure.repositories.property_repository import PropertyRepository


def get_property_repository(
    session: Session = Depends(get_db)
) -> PropertyRepository:
    """
    Dependencia para obtener el repositorio de propiedades.
    
    Args:
        session: Sesión de base de datos
        
    Returns:
        PropertyRepository: Instancia del repositorio de propiedades
    """
    return PropertyRepository(session)
