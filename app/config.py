"""
Configuración del servicio de helpers de pago.
Carga variables de entorno y define settings globales.
"""

from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Literal


class Settings(BaseSettings):
    """Configuración principal del servicio."""

    # Aplicación
    APP_NAME: str = "Checkout Payment Helpers"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # Base de datos (órdenes, quotes y configuración por tienda)
    DATABASE_URL: str

    # Redis para el lock de donaciones por orden
    REDIS_URL: str = "redis://localhost:6379/0"

    # Comando de captura activo: "adyen" o "mock"
    PAYMENT_PROVIDER: Literal["adyen", "mock"] = "mock"

    # Credenciales del proveedor (valores por defecto, la tabla config_data tiene prioridad)
    ADYEN_API_KEY_TEST: str = ""
    ADYEN_API_KEY_LIVE: str = ""
    ADYEN_DEMO_MODE: bool = True
    ADYEN_MERCHANT_ACCOUNT: str = ""
    # Prefijo del endpoint live de Checkout (ej: "1797a841fbb37ca7-AdyenDemo")
    ADYEN_LIVE_ENDPOINT_PREFIX: str = ""

    # Moneda cobrada: "base" o "display"
    CHARGED_CURRENCY: Literal["base", "display"] = "base"

    # Montos de donación permitidos, en unidad mayor y separados por coma
    DONATION_AMOUNTS: str = "1,5,10"

    DEFAULT_STORE_ID: int = 1

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Retorna instancia cacheada de settings."""
    return Settings()


settings = get_settings()
