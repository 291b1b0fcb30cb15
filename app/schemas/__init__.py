"""
Schemas del servicio de helpers de pago.
Exporta todos los schemas para fácil acceso.
"""

# Common
from app.schemas.common import (
    APIResponse,
    BaseSchema,
    ErrorResponse,
)

# Amount
from app.schemas.amount import (
    AmountCurrencyResponse,
    CreditMemoItemSnapshot,
    CreditMemoSnapshot,
    InvoiceItemSnapshot,
    InvoiceSnapshot,
    OrderAmountRequest,
    OrderSnapshot,
    QuoteItemSnapshot,
    QuoteSnapshot,
    ShippingAddressSnapshot,
)

# Donation
from app.schemas.donation import (
    DonationAmount,
    DonationRequest,
    DonationResponse,
)

# Management
from app.schemas.management import (
    AllowedOriginCreateRequest,
    AllowedOriginsQuery,
    AllowedOriginsResponse,
    MerchantAccountsRequest,
    MerchantAccountsResponse,
    WebhookSetupRequest,
    WebhookSetupResponse,
    WebhookTestRequest,
    WebhookTestResult,
)

__all__ = [
    # Common
    "APIResponse",
    "BaseSchema",
    "ErrorResponse",
    # Amount
    "AmountCurrencyResponse",
    "CreditMemoItemSnapshot",
    "CreditMemoSnapshot",
    "InvoiceItemSnapshot",
    "InvoiceSnapshot",
    "OrderAmountRequest",
    "OrderSnapshot",
    "QuoteItemSnapshot",
    "QuoteSnapshot",
    "ShippingAddressSnapshot",
    # Donation
    "DonationAmount",
    "DonationRequest",
    "DonationResponse",
    # Management
    "AllowedOriginCreateRequest",
    "AllowedOriginsQuery",
    "AllowedOriginsResponse",
    "MerchantAccountsRequest",
    "MerchantAccountsResponse",
    "WebhookSetupRequest",
    "WebhookSetupResponse",
    "WebhookTestRequest",
    "WebhookTestResult",
]
