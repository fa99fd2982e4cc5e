"""
Configuracion central de la aplicacion, leida de variables de entorno y .env.

La usan tanto la API como el CLI de sync (scripts/casafari_sync.py).
"""
import json
from typing import List

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings

_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """
    Configuracion de la aplicacion.

    - La base se configura con DATABASE_URL completa o por componentes
      (DATABASE_HOST, DATABASE_PORT, ...).
    - Las credenciales de Casafari viajan con basic auth en cada request;
      sin ellas el pipeline de sync no se construye.
    """

    APP_NAME: str = "Casafari Sync"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "production"

    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Base de datos por componentes
    DATABASE_HOST: str = "localhost"
    DATABASE_PORT: int = 5432
    DATABASE_USER: str = "casafari_user"
    DATABASE_PASSWORD: str = "casafari_pass"
    DATABASE_NAME: str = "casafari_db"

    # URL completa, tiene prioridad sobre los componentes
    DATABASE_URL: str = ""
    DB_POOL_SIZE: int = Field(default=5, ge=1)
    DB_MAX_OVERFLOW: int = Field(default=10, ge=0)

    # Casafari API
    CASAFARI_API_KEY: str = ""
    CASAFARI_API_SECRET: str = ""
    CASAFARI_BASE_URL: str = "https://api.casafari.com"
    CASAFARI_TIMEOUT: int = Field(default=30, ge=1, description="Timeout por request, en segundos")
    CASAFARI_PER_PAGE: int = Field(default=100, ge=1, le=1000)

    # "*", lista JSON o valores separados por coma
    CORS_ORIGINS: str = "*"

    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/app.log"

    @field_validator("LOG_LEVEL")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL invalido: {value}")
        return level

    @computed_field
    @property
    def effective_database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}"
            f"@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"
        )

    @computed_field
    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

    @property
    def casafari_configured(self) -> bool:
        """True si hay key y secret de Casafari."""
        return bool(self.CASAFARI_API_KEY and self.CASAFARI_API_SECRET)

    @property
    def access_host(self) -> str:
        """Host para mostrar en URLs (0.0.0.0 no es navegable)."""
        return "localhost" if self.HOST == "0.0.0.0" else self.HOST

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


def get_cors_origins(cors_string: str) -> List[str]:
    if cors_string == "*":
        return ["*"]
    try:
        return json.loads(cors_string)
    except json.JSONDecodeError:
        return [origin.strip() for origin in cors_string.split(",") if origin.strip()]


settings = Settings()
