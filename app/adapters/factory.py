"""
Factory para obtener el comando de captura correcto.
Implementa el patrón Factory para instanciar adapters.
"""

from functools import lru_cache
import structlog

from app.adapters.base import CaptureCommand
from app.adapters.adyen_adapter import AdyenCaptureAdapter
from app.adapters.mock_adapter import MockCaptureAdapter
from app.config import settings


logger = structlog.get_logger(__name__)


# Registro de proveedores disponibles
PROVIDERS: dict[str, type[CaptureCommand]] = {
    "adyen": AdyenCaptureAdapter,
    "mock": MockCaptureAdapter,
}


@lru_cache()
def get_capture_command() -> CaptureCommand:
    """
    Factory que retorna el comando de captura configurado.

    Lee la configuración PAYMENT_PROVIDER y retorna la instancia
    correspondiente. La instancia es cacheada para reutilización.

    Raises:
        ValueError: Si el proveedor no está soportado
    """
    provider_name = settings.PAYMENT_PROVIDER.lower()

    if provider_name not in PROVIDERS:
        raise ValueError(
            f"Payment provider '{provider_name}' not supported. "
            f"Available: {list(PROVIDERS.keys())}"
        )

    provider = PROVIDERS[provider_name]()

    logger.info(
        "Capture command initialized",
        provider=provider_name,
    )

    return provider
