"""
Servicio de gestión de merchants.
Envuelve la Management API: merchant accounts, webhook, HMAC y orígenes
permitidos.
"""

import re

import httpx
import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.management_client import ManagementClient
from app.config import settings
from app.schemas.management import (
    AllowedOriginsResponse,
    MerchantAccountsResponse,
    WebhookSetupResponse,
    WebhookTestResult,
)
from app.services.config_service import ConfigService, Mode
from app.utils.exceptions import ManagementApiError


logger = structlog.get_logger(__name__)

MERCHANTS_PAGE_SIZE = 100

# Tipos de evento enviados en la notificación de prueba
WEBHOOK_TEST_TYPES = ["AUTHORISATION"]

# API key enmascarada en el formulario de administración
_MASKED_API_KEY = re.compile(r"^\*+$")


def _mode(demo_mode: bool) -> Mode:
    return "test" if demo_mode else "live"


class ManagementService:
    """
    Servicio para la configuración de la cuenta en el proveedor.

    Args:
        db: Sesión de BD (configuración por tienda)
        transport: Transporte httpx alternativo para el cliente (tests)
    """

    def __init__(
        self,
        db: AsyncSession,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.db = db
        self.config_service = ConfigService(db)
        self._transport = transport

    def _client(self, api_key: str, demo_mode: bool) -> ManagementClient:
        return ManagementClient(api_key, demo_mode=demo_mode, transport=self._transport)

    async def _resolve_api_key(self, api_key: str, mode: Mode) -> str:
        if _MASKED_API_KEY.match(api_key):
            # API key enmascarada: se usa la guardada para el modo
            return await self.config_service.get_api_key(mode)
        return api_key

    async def fetch_merchant_accounts_and_client_key(
        self,
        api_key: str,
        demo_mode: bool,
    ) -> MerchantAccountsResponse:
        """
        Obtiene el client key y todos los merchant accounts de la API key.

        Recorre GET /merchants de a MERCHANTS_PAGE_SIZE hasta acumular
        itemsTotal ids, o hasta que no haya página siguiente.
        """
        async with self._client(api_key, demo_mode) as client:
            me = await client.get_me()

            merchant_accounts: list[str] = []
            page = 1
            response = await client.list_merchants(page_size=MERCHANTS_PAGE_SIZE)

            while len(merchant_accounts) < response.get("itemsTotal", 0):
                merchant_accounts.extend(
                    item["id"] for item in response.get("data", [])
                )
                if "next" not in response.get("_links", {}):
                    break
                page += 1
                response = await client.list_merchants(
                    page_size=MERCHANTS_PAGE_SIZE,
                    page_number=page,
                )

        logger.info(
            "Merchant accounts fetched",
            count=len(merchant_accounts),
            mode=_mode(demo_mode),
        )

        return MerchantAccountsResponse(
            client_key=me.get("clientKey", ""),
            associated_merchant_accounts=merchant_accounts,
        )

    async def configure_webhook(
        self,
        api_key: str,
        merchant_id: str,
        username: str,
        password: str,
        url: str,
        demo_mode: bool,
        store_id: int | None = None,
    ) -> WebhookSetupResponse:
        """
        Crea o actualiza el webhook estándar del merchant y genera su HMAC.

        Guarda el webhook id (si se creó) y la HMAC key del modo en la
        configuración.
        """
        store_id = store_id if store_id is not None else settings.DEFAULT_STORE_ID
        mode = _mode(demo_mode)
        params = {
            "url": url,
            "username": username,
            "password": password,
            "communicationFormat": "json",
            "active": True,
        }

        webhook_id = await self.config_service.get_webhook_id(store_id)
        created = False

        async with self._client(api_key, demo_mode) as client:
            if webhook_id:
                await client.update_webhook(merchant_id, webhook_id, params)
            else:
                params["type"] = "standard"
                response = await client.create_webhook(merchant_id, params)
                webhook_id = response.get("id")
                if not webhook_id:
                    raise ManagementApiError("Webhook creation response has no id")
                await self.config_service.set_webhook_id(webhook_id)
                created = True

            response = await client.generate_hmac(merchant_id, webhook_id)

        hmac_key = response.get("hmacKey")
        if not hmac_key:
            raise ManagementApiError("HMAC generation response has no hmacKey")
        await self.config_service.set_notification_hmac_key(hmac_key, mode)

        logger.info(
            "Webhook configured",
            merchant_id=merchant_id,
            webhook_id=webhook_id,
            created=created,
            mode=mode,
        )

        return WebhookSetupResponse(webhook_id=webhook_id, mode=mode, created=created)

    async def list_allowed_origins(self, api_key: str, mode: Mode) -> AllowedOriginsResponse:
        api_key = await self._resolve_api_key(api_key, mode)

        async with self._client(api_key, mode == "test") as client:
            response = await client.list_allowed_origins()

        return AllowedOriginsResponse(
            domains=[item["domain"] for item in response.get("data", [])]
        )

    async def add_allowed_origin(self, api_key: str, mode: Mode, domain: str) -> None:
        api_key = await self._resolve_api_key(api_key, mode)

        async with self._client(api_key, mode == "test") as client:
            await client.create_allowed_origin(domain)

        logger.info("Allowed origin added", domain=domain, mode=mode)

    async def test_webhook(
        self,
        merchant_id: str,
        store_id: int | None = None,
    ) -> WebhookTestResult:
        """
        Envía una notificación AUTHORISATION de prueba al webhook configurado.

        Usa la API key y el modo configurados. Un error remoto se registra
        en el log y se retorna en el resultado.
        """
        store_id = store_id if store_id is not None else settings.DEFAULT_STORE_ID
        webhook_id = await self.config_service.get_webhook_id(store_id)
        demo_mode = await self.config_service.is_demo_mode(store_id)
        api_key = await self.config_service.get_api_key(_mode(demo_mode), store_id)

        if not webhook_id:
            logger.error("Webhook test requested without a configured webhook", merchant_id=merchant_id)
            return WebhookTestResult(success=False, error="No webhook is configured")

        try:
            async with self._client(api_key, demo_mode) as client:
                response = await client.test_webhook(
                    merchant_id,
                    webhook_id,
                    {"types": WEBHOOK_TEST_TYPES},
                )
        except ManagementApiError as e:
            logger.error(
                "Webhook test failed",
                merchant_id=merchant_id,
                webhook_id=webhook_id,
                error=e.message,
            )
            return WebhookTestResult(success=False, error=e.message)

        logger.info("Response from webhook test", merchant_id=merchant_id, response=response)
        return WebhookTestResult(success=True, response=response)
