"""
Cliente HTTP de la API de gestión de merchants (Management API v1).
"""

from typing import Any

import httpx
import structlog

from app.utils.exceptions import ManagementApiError


logger = structlog.get_logger(__name__)

MANAGEMENT_TEST_URL = "https://management-test.adyen.com/v1"
MANAGEMENT_LIVE_URL = "https://management-live.adyen.com/v1"

MANAGEMENT_TIMEOUT_SECONDS = 30


class ManagementClient:
    """
    Sesión contra la Management API, asociada a una API key y a un modo.

    Uso:
        async with ManagementClient(api_key, demo_mode=True) as client:
            me = await client.get_me()
    """

    def __init__(
        self,
        api_key: str,
        demo_mode: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.demo_mode = demo_mode
        self._client = httpx.AsyncClient(
            base_url=MANAGEMENT_TEST_URL if demo_mode else MANAGEMENT_LIVE_URL,
            timeout=MANAGEMENT_TIMEOUT_SECONDS,
            transport=transport,
            headers={
                "X-API-Key": api_key,
                "Content-Type": "application/json",
            },
        )

    async def __aenter__(self) -> "ManagementClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Ejecuta un request y retorna el JSON; los errores se traducen a ManagementApiError."""
        try:
            response = await self._client.request(method, path, json=json, params=params)
        except httpx.HTTPError as e:
            logger.error("Management API request failed", method=method, path=path, error=str(e))
            raise ManagementApiError(f"Management API request failed: {e}") from e

        if response.status_code >= 400:
            logger.error(
                "Management API error response",
                method=method,
                path=path,
                status_code=response.status_code,
                body=response.text[:500],
            )
            raise ManagementApiError(
                f"Management API returned HTTP {response.status_code} for {method} {path}",
                status_code=response.status_code,
            )

        if not response.content:
            return {}

        try:
            data = response.json()
        except ValueError as e:
            logger.error(
                "Management API response is not JSON",
                method=method,
                path=path,
                status_code=response.status_code,
                body=response.text[:500],
            )
            raise ManagementApiError(
                f"Management API returned an invalid body for {method} {path}",
                status_code=response.status_code,
            ) from e

        if not isinstance(data, dict):
            raise ManagementApiError(
                f"Management API returned an unexpected body for {method} {path}",
                status_code=response.status_code,
            )
        return data

    # ============================================
    # /me
    # ============================================

    async def get_me(self) -> dict[str, Any]:
        return await self._request("GET", "/me")

    async def list_allowed_origins(self) -> dict[str, Any]:
        return await self._request("GET", "/me/allowedOrigins")

    async def create_allowed_origin(self, domain: str) -> dict[str, Any]:
        return await self._request("POST", "/me/allowedOrigins", json={"domain": domain})

    # ============================================
    # /merchants
    # ============================================

    async def list_merchants(
        self,
        page_size: int = 100,
        page_number: int | None = None,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"pageSize": page_size}
        if page_number is not None:
            params["pageNumber"] = page_number
        return await self._request("GET", "/merchants", params=params)

    async def create_webhook(self, merchant_id: str, params: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", f"/merchants/{merchant_id}/webhooks", json=params)

    async def update_webhook(
        self,
        merchant_id: str,
        webhook_id: str,
        params: dict[str, Any],
    ) -> dict[str, Any]:
        return await self._request(
            "PATCH",
            f"/merchants/{merchant_id}/webhooks/{webhook_id}",
            json=params,
        )

    async def generate_hmac(self, merchant_id: str, webhook_id: str) -> dict[str, Any]:
        return await self._request(
            "POST",
            f"/merchants/{merchant_id}/webhooks/{webhook_id}/generateHmac",
        )

    async def test_webhook(
        self,
        merchant_id: str,
        webhook_id: str,
        params: dict[str, Any],
    ) -> dict[str, Any]:
        return await self._request(
            "POST",
            f"/merchants/{merchant_id}/webhooks/{webhook_id}/test",
            json=params,
        )
