"""
Adapters para proveedores de pago.
Implementación del patrón Adapter para abstraer el comando de captura
y la API remota de gestión de merchants.
"""

from app.adapters.base import CaptureCommand, CaptureResult, CaptureResultStatus
from app.adapters.adyen_adapter import AdyenCaptureAdapter
from app.adapters.mock_adapter import MockCaptureAdapter
from app.adapters.factory import get_capture_command
from app.adapters.management_client import ManagementClient

__all__ = [
    "CaptureCommand",
    "CaptureResult",
    "CaptureResultStatus",
    "AdyenCaptureAdapter",
    "MockCaptureAdapter",
    "get_capture_command",
    "ManagementClient",
]
