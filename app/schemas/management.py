"""
Schemas para la gestión de merchants (Management API).
"""

from typing import Any, Literal

from pydantic import Field, field_validator

from app.schemas.common import BaseSchema


# ============================================
# Request Schemas (entrada)
# ============================================

class MerchantAccountsRequest(BaseSchema):
    """Request para listar merchant accounts y el client key."""

    api_key: str = Field(..., min_length=1, description="API key de la Management API")
    demo_mode: bool = Field(True, description="True para el entorno de test")


class WebhookSetupRequest(BaseSchema):
    """Request para crear o actualizar el webhook del merchant."""

    api_key: str = Field(..., min_length=1)
    merchant_id: str = Field(..., min_length=1, description="Merchant account")
    username: str = Field(..., description="Usuario de basic auth del webhook")
    password: str = Field(..., description="Contraseña de basic auth del webhook")
    url: str = Field(..., description="URL que recibe las notificaciones")
    demo_mode: bool = True
    store_id: int | None = Field(None, description="Tienda (usa la tienda por defecto si no se indica)")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("url must be an http(s) URL")
        return v


class WebhookTestRequest(BaseSchema):
    """Request para enviar una notificación de prueba."""

    merchant_id: str = Field(..., min_length=1)
    store_id: int | None = None


class AllowedOriginsQuery(BaseSchema):
    """Credenciales para listar los orígenes permitidos."""

    api_key: str = Field(..., min_length=1, description="API key; '****' usa la guardada")
    mode: Literal["test", "live"] = "test"


class AllowedOriginCreateRequest(AllowedOriginsQuery):
    """Request para agregar un origen permitido."""

    domain: str = Field(..., min_length=1, description="Origen, ej: https://shop.example.com")


# ============================================
# Response Schemas (salida)
# ============================================

class MerchantAccountsResponse(BaseSchema):
    """Client key y merchant accounts asociados a la API key."""

    client_key: str
    associated_merchant_accounts: list[str]


class WebhookSetupResponse(BaseSchema):
    """Resultado de la configuración del webhook."""

    webhook_id: str
    mode: Literal["test", "live"]
    created: bool = Field(..., description="True si el webhook se creó, False si se actualizó")


class WebhookTestResult(BaseSchema):
    """
    Resultado de la notificación de prueba.

    Un error remoto no se propaga: se reporta con success=False y el mensaje.
    """

    success: bool
    response: dict[str, Any] | None = None
    error: str | None = None


class AllowedOriginsResponse(BaseSchema):
    """Orígenes permitidos del client key."""

    domains: list[str]
