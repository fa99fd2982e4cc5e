"""
Engine y sesiones de base de datos.

Todo el acceso es sincrono: el pipeline de sync usa requests y una
transaccion por upsert. Los endpoints que usan la sesion se declaran como
`def` y FastAPI los corre en su threadpool.
"""
from typing import Any, Dict, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.core.config import settings

Base = declarative_base()


def _engine_options(database_url: str) -> Dict[str, Any]:
    """Pool solo para PostgreSQL; SQLite (tests, desarrollo) usa el default."""
    options: Dict[str, Any] = {"echo": settings.DEBUG}
    if make_url(database_url).get_backend_name() == "postgresql":
        options.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_pre_ping=True,
        )
    return options


engine = create_engine(settings.effective_database_url, **_engine_options(settings.effective_database_url))

SessionLocal = sessionmaker(engine, class_=Session, expire_on_commit=False, autoflush=False)


def get_db() -> Generator[Session, None, None]:
    """
    Dependencia de FastAPI: una sesion por request.

    Commit al terminar el request, rollback si el handler levanta.
    """
    with SessionLocal() as session:
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise


def init_db() -> None:
    """Crea las tablas que falten. En produccion el esquema lo maneja alembic."""
    from app.infrastructure.database import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def close_db() -> None:
    engine.dispose()
