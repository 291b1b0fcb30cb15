"""
Tests para los adapters de captura y el cliente de la Management API.
"""

import json

import httpx
import pytest

from app.adapters.adyen_adapter import AdyenCaptureAdapter
from app.adapters.base import CaptureResultStatus
from app.adapters.management_client import ManagementClient
from app.adapters.mock_adapter import MockCaptureAdapter
from app.utils.exceptions import CaptureCommandError, ManagementApiError


class TestMockCaptureAdapter:
    """Tests para MockCaptureAdapter."""

    @pytest.mark.asyncio
    async def test_execute_success(self):
        adapter = MockCaptureAdapter(success_rate=1.0)
        command = {"payment": {"amount": {"currency": "EUR", "value": 500}}}

        result = await adapter.execute(command)

        assert result.status == CaptureResultStatus.SUCCESS
        assert result.succeeded is True
        assert result.provider == "mock"
        assert len(result.psp_reference) == 16
        assert adapter.executed == [command]

    @pytest.mark.asyncio
    async def test_execute_failure(self):
        adapter = MockCaptureAdapter(success_rate=0.0)

        with pytest.raises(CaptureCommandError) as exc_info:
            await adapter.execute({"payment": {}})

        assert exc_info.value.provider == "mock"
        assert exc_info.value.code == "CAPTURE_FAILED"


class TestAdyenCaptureAdapter:
    """Tests para AdyenCaptureAdapter con transporte simulado."""

    def make_adapter(self, handler, demo_mode: bool = True, prefix: str = "") -> AdyenCaptureAdapter:
        return AdyenCaptureAdapter(
            api_key="test-key",
            merchant_account="ShopECOM",
            demo_mode=demo_mode,
            live_endpoint_prefix=prefix,
            transport=httpx.MockTransport(handler),
        )

    @pytest.mark.asyncio
    async def test_posts_donation_with_merchant_account(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["api_key"] = request.headers["X-API-Key"]
            captured["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "id": "DON1",
                    "status": "completed",
                    "payment": {"pspReference": "PSP9", "resultCode": "Authorised"},
                },
            )

        adapter = self.make_adapter(handler)
        result = await adapter.execute(
            {"payment": {"amount": {"currency": "EUR", "value": 500}}}
        )

        assert captured["url"] == "https://checkout-test.adyen.com/v71/donations"
        assert captured["api_key"] == "test-key"
        assert captured["body"]["merchantAccount"] == "ShopECOM"
        assert captured["body"]["amount"] == {"currency": "EUR", "value": 500}
        assert result.psp_reference == "PSP9"
        assert result.result_code == "Authorised"

    @pytest.mark.asyncio
    async def test_live_url_uses_prefix(self):
        urls = []

        def handler(request: httpx.Request) -> httpx.Response:
            urls.append(str(request.url))
            return httpx.Response(200, json={"status": "pending", "payment": {}})

        adapter = self.make_adapter(handler, demo_mode=False, prefix="abc123-Shop")
        await adapter.execute({"payment": {}})

        assert urls == [
            "https://abc123-Shop-checkout-live.adyenpayments.com/checkout/v71/donations"
        ]

    @pytest.mark.asyncio
    async def test_live_without_prefix_fails(self):
        adapter = self.make_adapter(lambda request: httpx.Response(200), demo_mode=False)

        with pytest.raises(CaptureCommandError):
            await adapter.execute({"payment": {}})

    @pytest.mark.asyncio
    async def test_refused_donation_raises(self):
        adapter = self.make_adapter(
            lambda request: httpx.Response(
                200,
                json={"status": "refused", "payment": {"resultCode": "Refused"}},
            )
        )

        with pytest.raises(CaptureCommandError):
            await adapter.execute({"payment": {}})

    @pytest.mark.asyncio
    async def test_http_error_raises(self):
        adapter = self.make_adapter(
            lambda request: httpx.Response(422, json={"message": "Invalid token"})
        )

        with pytest.raises(CaptureCommandError) as exc_info:
            await adapter.execute({"payment": {}})

        assert "HTTP 422" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_store_credentials_override_defaults(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["api_key"] = request.headers["X-API-Key"]
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={"status": "completed", "payment": {}})

        adapter = self.make_adapter(handler, demo_mode=True, prefix="abc123-Shop")
        await adapter.execute(
            {
                "payment": {},
                "store": {
                    "merchant_account": "StoreTwoECOM",
                    "api_key": "store-live-key",
                    "demo_mode": False,
                },
            }
        )

        assert captured["url"].startswith("https://abc123-Shop-checkout-live")
        assert captured["api_key"] == "store-live-key"
        assert captured["body"]["merchantAccount"] == "StoreTwoECOM"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"text": "<html>maintenance</html>"},
            {"json": ["completed"]},
        ],
    )
    async def test_unparseable_body_raises(self, body):
        adapter = self.make_adapter(lambda request: httpx.Response(200, **body))

        with pytest.raises(CaptureCommandError) as exc_info:
            await adapter.execute({"payment": {}})

        assert "Invalid response body" in exc_info.value.message


class TestManagementClient:
    """Tests para ManagementClient."""

    @pytest.mark.asyncio
    async def test_base_url_by_mode(self):
        urls = []

        def handler(request: httpx.Request) -> httpx.Response:
            urls.append(str(request.url))
            return httpx.Response(200, json={"clientKey": "test_KEY"})

        transport = httpx.MockTransport(handler)
        async with ManagementClient("key", demo_mode=True, transport=transport) as client:
            await client.get_me()
        async with ManagementClient("key", demo_mode=False, transport=transport) as client:
            await client.get_me()

        assert urls == [
            "https://management-test.adyen.com/v1/me",
            "https://management-live.adyen.com/v1/me",
        ]

    @pytest.mark.asyncio
    async def test_error_response_raises(self):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(401, json={"title": "Unauthorized"})
        )

        async with ManagementClient("bad-key", transport=transport) as client:
            with pytest.raises(ManagementApiError) as exc_info:
                await client.get_me()

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_transport_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with ManagementClient("key", transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(ManagementApiError) as exc_info:
                await client.list_allowed_origins()

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_empty_body_returns_empty_dict(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(204))

        async with ManagementClient("key", transport=transport) as client:
            assert await client.generate_hmac("Shop", "WH1") == {}

    @pytest.mark.asyncio
    async def test_non_json_body_raises(self):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, text="gateway timeout page")
        )

        async with ManagementClient("key", transport=transport) as client:
            with pytest.raises(ManagementApiError) as exc_info:
                await client.get_me()

        assert exc_info.value.status_code == 200
