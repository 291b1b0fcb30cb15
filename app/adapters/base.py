"""
Interfaz base abstracta para el comando de captura del proveedor de pago.
Define el contrato que todos los adapters deben implementar.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class CaptureResultStatus(str, Enum):
    """Estado del resultado de una captura."""

    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class CaptureResult:
    """
    Resultado normalizado de una captura.
    Todos los adapters deben retornar esta estructura.
    """

    status: CaptureResultStatus
    provider: str  # "adyen", "mock"
    psp_reference: str | None = None

    # Información adicional
    result_code: str | None = None
    failure_reason: str | None = None
    raw_response: dict[str, Any] = field(default_factory=dict)

    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def succeeded(self) -> bool:
        return self.status == CaptureResultStatus.SUCCESS


class CaptureCommand(ABC):
    """
    Comando genérico de captura.

    Recibe un mapa de comando ({"payment": {...}}) y lo ejecuta contra el
    proveedor. Un fallo se reporta lanzando CaptureCommandError.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Nombre del proveedor (ej: 'adyen', 'mock')."""
        pass

    @abstractmethod
    async def execute(self, command_subject: dict[str, Any]) -> CaptureResult:
        """
        Ejecuta la captura.

        Args:
            command_subject: Mapa con la clave "payment" y el payload, y
                opcionalmente "store" con las credenciales de la tienda
                (merchant_account, api_key, demo_mode)

        Returns:
            CaptureResult con el resultado

        Raises:
            CaptureCommandError: Si el proveedor rechaza o falla la captura
        """
        pass
