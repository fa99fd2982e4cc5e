"""
Configuración de fixtures para pytest.
"""
import os

# La app construye su engine al importar settings: en tests apuntamos a SQLite
# para no requerir Postgres. Las sesiones de los tests usan su propio engine.
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

import copy
from typing import Any, Dict, Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.infrastructure.database.session import Base
from app.infrastructure.database import models  # noqa: F401


# URL de base de datos de prueba
TEST_DATABASE_URL = "sqlite+pysqlite:///:memory:"


SAMPLE_LISTING: Dict[str, Any] = {
    "id": "test-id-1",
    "reference": "REF-001",
    "type": "apartment",
    "listing_type": "sale",
    "status": "active",
    "address": {
        "street": "123 Main St",
        "city": "Lisbon",
        "region": "Lisboa",
        "postal_code": "1000-001",
        "country": "PT",
    },
    "coordinates": {
        "latitude": 38.7223,
        "longitude": -9.1393,
    },
    "price": {
        "amount": 250000,
        "currency": "EUR",
    },
    "details": {
        "bedrooms": 2,
        "bathrooms": 1,
        "area_total": 80,
        "area_built": 75,
        "area_unit": "m2",
        "year_built": 1998,
    },
    "description": "Beautiful apartment",
    "photos": ["photo1.jpg", "photo2.jpg"],
    "features": ["balcony", "parking"],
    "is_active": True,
}


@pytest.fixture
def sample_listing() -> Dict[str, Any]:
    """Listing completo tal como lo devuelve el API de Casafari."""
    return copy.deepcopy(SAMPLE_LISTING)


@pytest.fixture
def make_listing():
    """Factory de listings: parte del ejemplo y sobreescribe claves de primer nivel."""
    def _make(**overrides: Any) -> Dict[str, Any]:
        listing = copy.deepcopy(SAMPLE_LISTING)
        listing.update(overrides)
        return listing
    return _make


@pytest.fixture(scope="function")
def db_engine():
    """
    Engine SQLite en memoria compartido entre threads (los endpoints
    sincronos de FastAPI corren en el threadpool).
    """
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """
    Fixture que proporciona una sesión de base de datos para tests.
    Crea una base de datos en memoria para cada test.
    """
    session_factory = sessionmaker(db_engine, class_=Session, expire_on_commit=False, autoflush=False)
    with session_factory() as session:
        yield session
