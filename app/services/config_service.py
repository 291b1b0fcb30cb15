"""
Servicio de configuración por tienda.

Los valores guardados en config_data tienen prioridad; si no existen se usan
los defaults de settings.
"""

from typing import Literal

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.db.repositories import ConfigRepository
from app.db.repositories.config_repo import SCOPE_STORES
from app.services.charged_currency import StaticChargedCurrencyConfig
from app.utils.currency import parse_amount_list


logger = structlog.get_logger(__name__)

Mode = Literal["test", "live"]

# Paths de configuración
XML_ADYEN_ABSTRACT_PREFIX = "payment/adyen_abstract/"
CHARGED_CURRENCY_PATH = XML_ADYEN_ABSTRACT_PREFIX + "charged_currency"
WEBHOOK_ID_PATH = XML_ADYEN_ABSTRACT_PREFIX + "webhook_id"
NOTIFICATION_HMAC_KEY_PATH = XML_ADYEN_ABSTRACT_PREFIX + "notification_hmac_key_{mode}"
API_KEY_PATH = XML_ADYEN_ABSTRACT_PREFIX + "api_key_{mode}"
DEMO_MODE_PATH = XML_ADYEN_ABSTRACT_PREFIX + "demo_mode"
MERCHANT_ACCOUNT_PATH = XML_ADYEN_ABSTRACT_PREFIX + "merchant_account"
DONATION_AMOUNTS_PATH = "payment/adyen_giving/donation_amounts"

_TRUE_VALUES = {"1", "true", "yes", "on"}


class ConfigService:
    """Acceso a la configuración del proveedor de pago."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = ConfigRepository(db)

    # ============================================
    # Moneda cobrada
    # ============================================

    async def build_charged_currency_config(self) -> StaticChargedCurrencyConfig:
        """
        Snapshot en memoria de la moneda cobrada de todas las tiendas, para
        el reconciliador (que es síncrono).
        """
        default = settings.CHARGED_CURRENCY
        per_store: dict[int, str] = {}

        for row in await self.repo.list_by_path(CHARGED_CURRENCY_PATH):
            if not row.value:
                continue
            if row.scope == SCOPE_STORES:
                per_store[row.scope_id] = row.value
            else:
                default = row.value

        return StaticChargedCurrencyConfig(default=default, per_store=per_store)

    # ============================================
    # Webhooks
    # ============================================

    async def get_webhook_id(self, store_id: int | None = None) -> str | None:
        return await self.repo.get_value(WEBHOOK_ID_PATH, store_id)

    async def set_webhook_id(self, webhook_id: str) -> None:
        await self.repo.set_value(WEBHOOK_ID_PATH, webhook_id)

    async def get_notification_hmac_key(self, mode: Mode) -> str | None:
        return await self.repo.get_value(NOTIFICATION_HMAC_KEY_PATH.format(mode=mode))

    async def set_notification_hmac_key(self, hmac_key: str, mode: Mode) -> None:
        await self.repo.set_value(NOTIFICATION_HMAC_KEY_PATH.format(mode=mode), hmac_key)

    # ============================================
    # Credenciales
    # ============================================

    async def get_api_key(self, mode: Mode, store_id: int | None = None) -> str:
        value = await self.repo.get_value(API_KEY_PATH.format(mode=mode), store_id)
        if value:
            return value
        return settings.ADYEN_API_KEY_TEST if mode == "test" else settings.ADYEN_API_KEY_LIVE

    async def is_demo_mode(self, store_id: int | None = None) -> bool:
        value = await self.repo.get_value(DEMO_MODE_PATH, store_id)
        if value is None:
            return settings.ADYEN_DEMO_MODE
        return value.strip().lower() in _TRUE_VALUES

    async def get_merchant_account(self, store_id: int | None = None) -> str:
        value = await self.repo.get_value(MERCHANT_ACCOUNT_PATH, store_id)
        return value or settings.ADYEN_MERCHANT_ACCOUNT

    # ============================================
    # Donaciones
    # ============================================

    async def get_donation_amounts(self, store_id: int) -> list[str]:
        """Montos de donación permitidos, en unidad mayor ("1,5,10")."""
        value = await self.repo.get_value(DONATION_AMOUNTS_PATH, store_id)
        return parse_amount_list(value if value is not None else settings.DONATION_AMOUNTS)
