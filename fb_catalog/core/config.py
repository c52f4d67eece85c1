"""
Configuración centralizada del cliente de catálogos.

Este módulo maneja las variables de entorno del cliente de la Graph API
usando Pydantic Settings para validación automática.
"""

import re
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

DEFAULT_LOGIN_SCOPES = "catalog_management,business_management,pages_show_list"


class Settings(BaseSettings):
    """
    Configuración del cliente usando Pydantic Settings.

    Todas las configuraciones se cargan desde variables de entorno
    con valores por defecto apropiados para desarrollo.
    """

    # === CONFIGURACIÓN BÁSICA ===
    APP_NAME: str = "Facebook Catalog Client"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = Field(default="development")
    DEBUG: bool = Field(default=False)

    # === CONFIGURACIÓN DE LA GRAPH API ===
    FACEBOOK_APP_ID: Optional[str] = Field(default=None)
    GRAPH_API_HOST: str = Field(default="graph.facebook.com")
    GRAPH_API_VERSION: str = Field(default="v19.0")
    # Separados por comas, tal como los recibe FB.login
    GRAPH_LOGIN_SCOPES: str = Field(default=DEFAULT_LOGIN_SCOPES)
    GRAPH_PRODUCTS_PAGE_LIMIT: int = Field(default=100)
    # None = sin timeout, la llamada espera indefinidamente
    GRAPH_REQUEST_TIMEOUT: Optional[float] = Field(default=None)

    # === CONFIGURACIÓN DE LOGGING ===
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE_PATH: Optional[str] = Field(default=None)
    LOG_MAX_SIZE_MB: int = Field(default=10)
    LOG_BACKUP_COUNT: int = Field(default=5)
    LOG_FORMAT: str = Field(default="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore",
    }

    @field_validator("GRAPH_API_VERSION")
    @classmethod
    def validate_api_version(cls, v):
        """Valida que la versión tenga el formato vNN.N de la Graph API."""
        if not re.fullmatch(r"v\d+\.\d+", v):
            raise ValueError("GRAPH_API_VERSION debe tener el formato vNN.N (ej: v19.0)")
        return v

    @field_validator("GRAPH_PRODUCTS_PAGE_LIMIT")
    @classmethod
    def validate_page_limit(cls, v):
        """Valida que el tamaño de página sea positivo."""
        if v < 1:
            raise ValueError("GRAPH_PRODUCTS_PAGE_LIMIT debe ser mayor que 0")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Valida que el nivel de log sea válido."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL debe ser uno de: {valid_levels}")
        return v.upper()

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v):
        """Valida que el entorno sea válido."""
        valid_envs = ["development", "staging", "production", "testing"]
        if v.lower() not in valid_envs:
            raise ValueError(f"ENVIRONMENT debe ser uno de: {valid_envs}")
        return v.lower()

    @property
    def is_production(self) -> bool:
        """Verifica si está en entorno de producción."""
        return self.ENVIRONMENT == "production"

    @property
    def graph_api_base_url(self) -> str:
        """Genera URL base versionada de la Graph API."""
        return f"https://{self.GRAPH_API_HOST}/{self.GRAPH_API_VERSION}"

    @property
    def login_scopes(self) -> List[str]:
        """Lista de scopes de login sin espacios ni vacíos."""
        return [scope.strip() for scope in self.GRAPH_LOGIN_SCOPES.split(",") if scope.strip()]

    @property
    def login_scope(self) -> str:
        """Scopes de login en el formato separado por comas que espera el SDK."""
        return ",".join(self.login_scopes)


@lru_cache()
def get_settings() -> Settings:
    """
    Obtiene instancia singleton de configuración.

    Returns:
        Settings: Configuración del cliente
    """
    return Settings()
