"""
Servicio de donaciones post-compra.

Valida el payload de donación contra la orden y la configuración, y delega
la captura al comando del proveedor.
"""

from decimal import InvalidOperation
from typing import Any
from uuid import uuid4

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters import CaptureCommand, CaptureResult, get_capture_command
from app.db.repositories import OrderRepository
from app.domain import Order, OrderPayment
from app.services.charged_currency import ChargedCurrency
from app.services.config_service import ConfigService
from app.utils.currency import format_amount, pad_shopper_reference
from app.utils.exceptions import (
    CaptureCommandError,
    DonationFailedError,
    DonationInProgressError,
    OrderNotFoundError,
)
from app.utils.locks import DonationLockManager, InMemoryDonationLockManager


logger = structlog.get_logger(__name__)

# Intentos fallidos tras los cuales se invalida el donation token
MAX_DONATION_TRIES = 5

CC_METHOD_CODE = "adyen_cc"
ADYEN_METHOD_PREFIX = "adyen_"

# Métodos del proveedor que no son métodos alternativos
NON_ALTERNATIVE_METHODS = {
    "adyen_cc",
    "adyen_cc_vault",
    "adyen_oneclick",
    "adyen_hpp",
    "adyen_moto",
    "adyen_pos_cloud",
    "adyen_pay_by_link",
}

# Claves de additional_information del pago
DONATION_TOKEN_KEY = "donationToken"
DONATION_TRY_COUNT_KEY = "donationTryCount"
PSP_REFERENCE_KEY = "pspReference"


def resolve_payment_method(method_code: str) -> str | None:
    """
    Tipo de método de pago para la donación.

    Tarjeta -> "scheme"; método alternativo -> su tx variant
    (adyen_ideal -> ideal); cualquier otro -> None.
    """
    if method_code == CC_METHOD_CODE:
        return "scheme"
    if method_code.startswith(ADYEN_METHOD_PREFIX) and method_code not in NON_ALTERNATIVE_METHODS:
        return method_code[len(ADYEN_METHOD_PREFIX):]
    return None


class DonationService:
    """
    Servicio para donaciones.

    Coordina el repositorio de órdenes, la configuración, el reconciliador
    de montos y el comando de captura.
    """

    def __init__(
        self,
        db: AsyncSession,
        capture_command: CaptureCommand | None = None,
        lock_manager: DonationLockManager | InMemoryDonationLockManager | None = None,
    ):
        self.db = db
        self.repo = OrderRepository(db)
        self.config_service = ConfigService(db)
        self._capture_command = capture_command or get_capture_command()
        self._lock_manager = lock_manager or InMemoryDonationLockManager()

    @property
    def capture_command(self) -> CaptureCommand:
        return self._capture_command

    async def donate(self, order_id: int, payload: dict[str, Any]) -> CaptureResult:
        """
        Procesa una donación para la orden.

        Raises:
            OrderNotFoundError: Si la orden no existe
            DonationInProgressError: Si otra donación de la orden está en curso
            DonationFailedError: Ante cualquier fallo de validación o captura
        """
        if not await self._lock_manager.acquire(order_id):
            raise DonationInProgressError(str(order_id))

        try:
            return await self._donate(order_id, payload)
        finally:
            await self._lock_manager.release(order_id)

    async def _donate(self, order_id: int, payload: dict[str, Any]) -> CaptureResult:
        order_row = await self.repo.get_by_id(order_id)
        if order_row is None:
            raise OrderNotFoundError(str(order_id))

        order = order_row.to_entity()
        payment = order.payment

        donation_token = payment.get_additional_information(DONATION_TOKEN_KEY)
        if not donation_token:
            self._reject(order_id, "missing donation token")

        config = await self.config_service.build_charged_currency_config()
        currency_code = ChargedCurrency(config).get_order_amount_currency(
            order,
            order_placement=False,
        ).currency_code

        amount = payload.get("amount") or {}
        if amount.get("currency") != currency_code:
            self._reject(order_id, "currency mismatch", currency=amount.get("currency"))

        allowed_values = await self._allowed_values(order.store_id, currency_code)
        if amount.get("value") not in allowed_values:
            self._reject(order_id, "amount not allowed", value=amount.get("value"))

        payment_method = resolve_payment_method(payment.method)
        if payment_method is None:
            self._reject(order_id, "unsupported payment method", method=payment.method)

        payload = dict(payload)
        payload["donationToken"] = donation_token
        payload["donationOriginalPspReference"] = payment.get_additional_information(
            PSP_REFERENCE_KEY
        )
        payload["paymentMethod"] = payment_method
        payload["shopperReference"] = self._shopper_reference(order)

        try:
            result = await self.capture_command.execute(
                {
                    "payment": payload,
                    "store": await self._store_credentials(order.store_id),
                }
            )
        except CaptureCommandError as e:
            try_count = await self._register_failed_try(order_row, payment)
            logger.warning(
                "Donation capture failed",
                order_id=order_id,
                try_count=try_count,
                error=e.message,
            )
            raise DonationFailedError() from None

        payment.unset_additional_information(DONATION_TOKEN_KEY)
        await self.repo.save_payment_additional_information(
            order_row,
            payment.additional_information,
        )

        logger.info(
            "Donation captured",
            order_id=order_id,
            value=amount.get("value"),
            currency=currency_code,
            psp_reference=result.psp_reference,
        )
        return result

    async def _allowed_values(self, store_id: int, currency_code: str) -> list[int]:
        """Montos permitidos en unidad menor; las entradas inválidas se ignoran."""
        allowed_values = []
        for value in await self.config_service.get_donation_amounts(store_id):
            try:
                allowed_values.append(format_amount(value, currency_code))
            except (InvalidOperation, ValueError):
                logger.warning(
                    "Invalid donation amount in config",
                    store_id=store_id,
                    value=value,
                )
        return allowed_values

    async def _store_credentials(self, store_id: int) -> dict[str, Any]:
        demo_mode = await self.config_service.is_demo_mode(store_id)
        return {
            "merchant_account": await self.config_service.get_merchant_account(store_id),
            "api_key": await self.config_service.get_api_key(
                "test" if demo_mode else "live",
                store_id,
            ),
            "demo_mode": demo_mode,
        }

    def _reject(self, order_id: int, reason: str, **context: Any) -> None:
        logger.warning("Donation rejected", order_id=order_id, reason=reason, **context)
        raise DonationFailedError()

    @staticmethod
    def _shopper_reference(order: Order) -> str:
        if order.customer_id:
            return pad_shopper_reference(order.customer_id)
        return f"{order.increment_id}{uuid4()}"

    async def _register_failed_try(self, order_row, payment: OrderPayment) -> int:
        """
        Incrementa donationTryCount; al llegar a MAX_DONATION_TRIES se
        elimina el donation token.
        """
        try_count = int(payment.get_additional_information(DONATION_TRY_COUNT_KEY) or 0) + 1
        payment.set_additional_information(DONATION_TRY_COUNT_KEY, try_count)

        if try_count >= MAX_DONATION_TRIES:
            payment.unset_additional_information(DONATION_TOKEN_KEY)
            logger.info("Donation token removed after max tries", tries=try_count)

        await self.repo.save_payment_additional_information(
            order_row,
            payment.additional_information,
        )
        # La sesión hace rollback al propagarse DonationFailedError
        await self.db.commit()
        return try_count
