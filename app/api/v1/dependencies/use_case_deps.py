"""
Dependencias para inyeccion de casos de uso.
"""
from fastapi import Depends

from app.application.use_cases.casafari_sync_use_cases import CasafariSyncUseCases
from app.application.use_cases.property_use_cases import PropertyUseCases
from app.api.v1.dependencies.repository_deps import get_property_repository
from app.infrastructure.repositories.property_repository import PropertyRepository


def get_property_use_cases(
    repository: PropertyRepository = Depends(get_property_repository)
) -> PropertyUseCases:
    """
    Dependencia para obtener los casos de uso de propiedades.
    
    Args:
        repository: Repositorio de propiedades
        
    Returns:
        PropertyUseCases: Instancia de casos de uso de propiedades
    """
    return PropertyUseCases(repository)


def get_casafari_sync_use_cases() -> CasafariSyncUseCases:
    """
    Dependencia para obtener los casos de uso del sync.
    Abren su propia sesion por corrida (se ejecutan en otro thread).
    """
    return CasafariSyncUseCases()
