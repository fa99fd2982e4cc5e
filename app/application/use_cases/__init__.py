"""
Casos de uso de la aplicacion.
"""
from .casafari_sync_use_cases import CasafariSyncUseCases
from .property_use_cases import PropertyUseCases

__all__ = ["CasafariSyncUseCases", "PropertyUseCases"]
