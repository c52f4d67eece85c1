"""Fixtures compartidos para los tests del cliente de catálogos."""

import pytest

from fb_catalog.core.config import get_settings


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Cada test lee la configuración desde cero (las variables de entorno pueden cambiar)."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
