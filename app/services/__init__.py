"""
Servicios de negocio del servicio de helpers de pago.
"""

from app.services.charged_currency import ChargedCurrency, StaticChargedCurrencyConfig
from app.services.config_service import ConfigService
from app.services.order_service import OrderService
from app.services.quote_service import QuoteService
from app.services.management_service import ManagementService
from app.services.donation_service import DonationService

__all__ = [
    "ChargedCurrency",
    "StaticChargedCurrencyConfig",
    "ConfigService",
    "OrderService",
    "QuoteService",
    "ManagementService",
    "DonationService",
]
