"""
Mock Adapter para desarrollo y testing.
Simula el comando de captura de una pasarela de pago.
"""

import random
from typing import Any
from uuid import uuid4

import structlog

from app.adapters.base import CaptureCommand, CaptureResult, CaptureResultStatus
from app.utils.exceptions import CaptureCommandError


logger = structlog.get_logger(__name__)


class MockCaptureAdapter(CaptureCommand):
    """
    Adapter mock para desarrollo y testing.

    Simula el comportamiento de una captura real:
    - 90% de capturas exitosas
    - 10% de capturas fallidas (para testing)

    Útil para desarrollo local sin necesidad de credenciales reales.
    """

    def __init__(self, success_rate: float = 0.9):
        """
        Inicializa el adapter mock.

        Args:
            success_rate: Probabilidad de éxito (0.0 a 1.0)
        """
        self._success_rate = success_rate
        # Comandos recibidos, en orden
        self.executed: list[dict[str, Any]] = []
        logger.info("MockCaptureAdapter initialized", success_rate=success_rate)

    @property
    def provider_name(self) -> str:
        return "mock"

    def _generate_psp_reference(self) -> str:
        """Genera una referencia mock de 16 caracteres."""
        return uuid4().hex[:16].upper()

    def _should_succeed(self) -> bool:
        """Determina si la captura debe ser exitosa basado en success_rate."""
        return random.random() < self._success_rate

    async def execute(self, command_subject: dict[str, Any]) -> CaptureResult:
        self.executed.append(command_subject)
        payment = command_subject.get("payment") or {}

        if not self._should_succeed():
            logger.info(
                "Mock capture failed",
                reference=payment.get("donationOriginalPspReference"),
            )
            raise CaptureCommandError(self.provider_name, "Simulated refusal")

        psp_reference = self._generate_psp_reference()

        logger.info(
            "Mock capture succeeded",
            psp_reference=psp_reference,
            amount=payment.get("amount"),
        )

        return CaptureResult(
            status=CaptureResultStatus.SUCCESS,
            provider=self.provider_name,
            psp_reference=psp_reference,
            result_code="Authorised",
            raw_response={
                "status": "completed",
                "payment": {"pspReference": psp_reference, "resultCode": "Authorised"},
            },
        )
