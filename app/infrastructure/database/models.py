"""
Modelos de base de datos (ORM).
"""
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Index,
    Integer,
    JSON,
    Numeric,
    String,
    Text,
)
from sqlalchemy.sql import func

from app.infrastructure.database.session import Base


class CasafariPropertyModel(Base):
    """
    Modelo de base de datos para propiedades sincronizadas desde Casafari.

    Registro plano: los campos anidados del API se aplanan en el mapeo
    (ver casafari_sync.field_mapper). `casafari_id` es la clave natural
    (única, inmutable) y `raw_data` guarda el payload original tal cual.

    Soft delete: `deleted_at` marca la fila como borrada sin eliminarla;
    las consultas por defecto la excluyen (ver PropertyRepository).
    """

    __tablename__ = "casafari_properties"

    id = Column(Integer, primary_key=True, index=True)

    # Identificadores del API externo
    casafari_id = Column(String(255), nullable=False, unique=True, index=True)
    reference = Column(String(255), nullable=True)

    # Tipo y estado
    property_type = Column(String(255), nullable=True, index=True)
    listing_type = Column(String(255), nullable=True)  # sale, rent
    status = Column(String(255), nullable=False, default="active", index=True)

    # Ubicacion
    address = Column(String(255), nullable=True)
    city = Column(String(255), nullable=True, index=True)
    region = Column(String(255), nullable=True)
    postal_code = Column(String(255), nullable=True)
    country = Column(String(2), nullable=True, index=True)
    latitude = Column(Numeric(10, 7), nullable=True)
    longitude = Column(Numeric(10, 7), nullable=True)

    # Detalles
    price = Column(Numeric(15, 2), nullable=True, index=True)
    currency = Column(String(3), nullable=False, default="EUR")
    bedrooms = Column(Integer, nullable=True)
    bathrooms = Column(Integer, nullable=True)
    area_total = Column(Numeric(10, 2), nullable=True)
    area_built = Column(Numeric(10, 2), nullable=True)
    area_unit = Column(String(10), nullable=False, default="m2")
    year_built = Column(Integer, nullable=True)
    description = Column(Text, nullable=True)

    # Media
    photos = Column(JSON, nullable=True)
    main_photo_url = Column(String(2048), nullable=True)

    # Datos adicionales
    features = Column(JSON, nullable=True)
    raw_data = Column(JSON, nullable=True)

    # Tracking del sync
    last_synced_at = Column(DateTime(timezone=True), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)

    __table_args__ = (
        Index("ix_casafari_properties_type_city_active", "property_type", "city", "is_active"),
        Index("ix_casafari_properties_price_bedrooms_active", "price", "bedrooms", "is_active"),
    )

    @property
    def formatted_price(self) -> str:
        """Precio con separador de miles y moneda, p.ej. '250,000.00 EUR'."""
        return f"{float(self.price or 0):,.2f} {self.currency}"

    @property
    def full_address(self) -> str:
        """Direccion completa con las partes no vacias."""
        parts = [self.address, self.city, self.region, self.postal_code, self.country]
        return ", ".join(p for p in parts if p)

    @property
    def is_trashed(self) -> bool:
        return self.deleted_at is not None

    def __repr__(self):
        return f"<CasafariProperty(id={self.id}, casafari_id={self.casafari_id}, city={self.city})>"
