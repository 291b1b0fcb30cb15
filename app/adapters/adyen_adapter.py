"""
Adapter para Adyen.
Implementa CaptureCommand contra el endpoint /donations de la Checkout API.
"""

from typing import Any

import httpx
import structlog

from app.adapters.base import CaptureCommand, CaptureResult, CaptureResultStatus
from app.config import settings
from app.utils.exceptions import CaptureCommandError


logger = structlog.get_logger(__name__)

CHECKOUT_API_VERSION = "v71"
CHECKOUT_TEST_URL = f"https://checkout-test.adyen.com/{CHECKOUT_API_VERSION}"
CHECKOUT_LIVE_URL = (
    "https://{prefix}-checkout-live.adyenpayments.com/checkout/" + CHECKOUT_API_VERSION
)

CAPTURE_TIMEOUT_SECONDS = 30


class AdyenCaptureAdapter(CaptureCommand):
    """
    Captura de donaciones en Adyen.

    Agrega el merchantAccount al payload y envía el pedido a /donations.
    Un estado "refused" o un error HTTP se reporta con CaptureCommandError.
    """

    # Estados de donación aceptados por la Checkout API
    ACCEPTED_STATUSES = {"completed", "pending"}

    def __init__(
        self,
        api_key: str | None = None,
        merchant_account: str | None = None,
        demo_mode: bool | None = None,
        live_endpoint_prefix: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Inicializa el adapter de Adyen.

        Args:
            api_key: API key (usa config si no se proporciona)
            merchant_account: Merchant account (usa config si no se proporciona)
            demo_mode: True para el entorno de test
            live_endpoint_prefix: Prefijo del endpoint live
            transport: Transporte httpx alternativo (tests)
        """
        self._demo_mode = settings.ADYEN_DEMO_MODE if demo_mode is None else demo_mode
        self._api_key = api_key or (
            settings.ADYEN_API_KEY_TEST if self._demo_mode else settings.ADYEN_API_KEY_LIVE
        )
        self._merchant_account = merchant_account or settings.ADYEN_MERCHANT_ACCOUNT
        self._live_endpoint_prefix = (
            live_endpoint_prefix or settings.ADYEN_LIVE_ENDPOINT_PREFIX
        )
        self._transport = transport

        logger.info("AdyenCaptureAdapter initialized", demo_mode=self._demo_mode)

    @property
    def provider_name(self) -> str:
        return "adyen"

    def _base_url(self, demo_mode: bool) -> str:
        if demo_mode:
            return CHECKOUT_TEST_URL
        if not self._live_endpoint_prefix:
            raise CaptureCommandError(self.provider_name, "Live endpoint prefix is not configured")
        return CHECKOUT_LIVE_URL.format(prefix=self._live_endpoint_prefix)

    async def execute(self, command_subject: dict[str, Any]) -> CaptureResult:
        # Credenciales de la tienda de la orden; si faltan se usan las del adapter
        store = command_subject.get("store") or {}
        demo_mode = store.get("demo_mode", self._demo_mode)
        api_key = store.get("api_key") or self._api_key
        merchant_account = store.get("merchant_account") or self._merchant_account

        payload = dict(command_subject.get("payment") or {})
        payload.setdefault("merchantAccount", merchant_account)

        try:
            async with httpx.AsyncClient(
                base_url=self._base_url(demo_mode),
                timeout=CAPTURE_TIMEOUT_SECONDS,
                transport=self._transport,
                headers={
                    "X-API-Key": api_key,
                    "Content-Type": "application/json",
                },
            ) as client:
                response = await client.post("/donations", json=payload)
                response.raise_for_status()

        except httpx.HTTPStatusError as e:
            logger.error(
                "Adyen donation request rejected",
                status_code=e.response.status_code,
                body=e.response.text[:500],
            )
            raise CaptureCommandError(
                self.provider_name,
                f"HTTP {e.response.status_code}",
            ) from e

        except httpx.HTTPError as e:
            logger.error("Adyen donation request failed", error=str(e))
            raise CaptureCommandError(self.provider_name, str(e)) from e

        try:
            data = response.json()
        except ValueError as e:
            logger.error("Adyen donation response is not JSON", body=response.text[:500])
            raise CaptureCommandError(self.provider_name, "Invalid response body") from e

        if not isinstance(data, dict):
            logger.error("Adyen donation response is not an object", body=response.text[:500])
            raise CaptureCommandError(self.provider_name, "Invalid response body")

        status = data.get("status")
        payment = data.get("payment")
        if not isinstance(payment, dict):
            payment = {}

        if status not in self.ACCEPTED_STATUSES:
            logger.warning(
                "Adyen donation refused",
                status=status,
                result_code=payment.get("resultCode"),
            )
            raise CaptureCommandError(
                self.provider_name,
                f"Donation status: {status}",
            )

        logger.info(
            "Adyen donation captured",
            donation_id=data.get("id"),
            status=status,
            psp_reference=payment.get("pspReference"),
        )

        return CaptureResult(
            status=CaptureResultStatus.SUCCESS,
            provider=self.provider_name,
            psp_reference=payment.get("pspReference"),
            result_code=payment.get("resultCode"),
            raw_response=data,
        )
