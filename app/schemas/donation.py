"""
Schemas para donaciones post-compra.
"""

from typing import Any

from pydantic import ConfigDict, Field

from app.schemas.common import BaseSchema


class DonationAmount(BaseSchema):
    """Monto en unidad menor (ej: 500 = 5.00 EUR)."""

    currency: str = Field(..., min_length=3, max_length=3)
    value: int = Field(..., ge=0)


class DonationRequest(BaseSchema):
    """
    Payload de donación enviado por el cliente.

    Se aceptan campos adicionales (returnUrl, etc.), que se reenvían al
    proveedor tal cual.
    """

    model_config = ConfigDict(extra="allow")

    amount: DonationAmount

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class DonationResponse(BaseSchema):
    """Resultado de una donación exitosa."""

    order_id: int
    status: str = "completed"
    psp_reference: str | None = None
