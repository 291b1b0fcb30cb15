"""
Tests para DonationService.
"""

from typing import Any

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters import (
    AdyenCaptureAdapter,
    CaptureCommand,
    CaptureResult,
    CaptureResultStatus,
    MockCaptureAdapter,
)
from app.db.models import Order
from app.services import ConfigService, DonationService
from app.services.config_service import (
    API_KEY_PATH,
    DEMO_MODE_PATH,
    DONATION_AMOUNTS_PATH,
    MERCHANT_ACCOUNT_PATH,
)
from app.services.donation_service import MAX_DONATION_TRIES, resolve_payment_method
from app.utils.exceptions import (
    CaptureCommandError,
    DonationFailedError,
    DonationInProgressError,
    OrderNotFoundError,
)
from app.utils.locks import InMemoryDonationLockManager


class FailingCaptureCommand(CaptureCommand):
    """Comando que siempre falla y cuenta las llamadas."""

    def __init__(self):
        self.calls = 0

    @property
    def provider_name(self) -> str:
        return "failing"

    async def execute(self, command_subject: dict[str, Any]) -> CaptureResult:
        self.calls += 1
        raise CaptureCommandError(self.provider_name, "refused: internal detail")


@pytest.fixture
def service_factory(test_session: AsyncSession):
    def build(capture_command=None, lock_manager=None) -> DonationService:
        return DonationService(
            test_session,
            capture_command=capture_command or MockCaptureAdapter(success_rate=1.0),
            lock_manager=lock_manager or InMemoryDonationLockManager(),
        )
    return build


class TestResolvePaymentMethod:
    """Tests para el tipo de método de pago."""

    def test_card_is_scheme(self):
        assert resolve_payment_method("adyen_cc") == "scheme"

    def test_alternative_method_tx_variant(self):
        assert resolve_payment_method("adyen_ideal") == "ideal"
        assert resolve_payment_method("adyen_klarna_account") == "klarna_account"

    @pytest.mark.parametrize("method", ["adyen_hpp", "adyen_oneclick", "checkmo", "paypal"])
    def test_unsupported(self, method):
        assert resolve_payment_method(method) is None


class TestDonate:
    """Tests para el flujo de donación."""

    @pytest.mark.asyncio
    async def test_success_augments_payload_and_removes_token(
        self, service_factory, saved_order: Order, sample_donation_data
    ):
        capture = MockCaptureAdapter(success_rate=1.0)
        service = service_factory(capture_command=capture)

        result = await service.donate(saved_order.id, sample_donation_data)

        assert result.status == CaptureResultStatus.SUCCESS
        assert len(capture.executed) == 1
        payment = capture.executed[0]["payment"]
        assert payment["amount"] == {"currency": "EUR", "value": 500}
        assert payment["returnUrl"] == sample_donation_data["returnUrl"]
        assert payment["donationToken"] == "token-abc"
        assert payment["donationOriginalPspReference"] == "PSP0001"
        assert payment["paymentMethod"] == "scheme"
        assert payment["shopperReference"] == "007"
        assert "donationToken" not in saved_order.payment_additional_information
        # El payload recibido no se modifica
        assert "donationToken" not in sample_donation_data

    @pytest.mark.asyncio
    async def test_guest_shopper_reference(
        self, service_factory, saved_order: Order, sample_donation_data
    ):
        saved_order.customer_id = None
        capture = MockCaptureAdapter(success_rate=1.0)

        await service_factory(capture_command=capture).donate(saved_order.id, sample_donation_data)

        reference = capture.executed[0]["payment"]["shopperReference"]
        assert reference.startswith("000000123")
        assert len(reference) == len("000000123") + 36

    @pytest.mark.asyncio
    async def test_alternative_payment_method(
        self, service_factory, saved_order: Order, sample_donation_data
    ):
        saved_order.payment_method = "adyen_ideal"
        capture = MockCaptureAdapter(success_rate=1.0)

        await service_factory(capture_command=capture).donate(saved_order.id, sample_donation_data)

        assert capture.executed[0]["payment"]["paymentMethod"] == "ideal"

    @pytest.mark.asyncio
    async def test_order_not_found(self, service_factory, sample_donation_data):
        with pytest.raises(OrderNotFoundError):
            await service_factory().donate(999, sample_donation_data)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "amount",
        [
            {"currency": "USD", "value": 500},   # moneda de presentación, no la cobrada
            {"currency": "EUR", "value": 700},   # monto no permitido
            {"currency": "EUR", "value": 5},     # unidad mayor en vez de menor
        ],
    )
    async def test_validation_fails_before_capture(
        self, service_factory, saved_order: Order, amount
    ):
        capture = MockCaptureAdapter(success_rate=1.0)

        with pytest.raises(DonationFailedError) as exc_info:
            await service_factory(capture_command=capture).donate(
                saved_order.id,
                {"amount": amount},
            )

        assert exc_info.value.message == "Donation failed!"
        assert capture.executed == []
        assert "donationTryCount" not in saved_order.payment_additional_information

    @pytest.mark.asyncio
    async def test_missing_token(self, service_factory, saved_order: Order, sample_donation_data):
        saved_order.payment_additional_information = {"pspReference": "PSP0001"}
        capture = MockCaptureAdapter(success_rate=1.0)

        with pytest.raises(DonationFailedError):
            await service_factory(capture_command=capture).donate(saved_order.id, sample_donation_data)

        assert capture.executed == []

    @pytest.mark.asyncio
    async def test_unsupported_payment_method(
        self, service_factory, saved_order: Order, sample_donation_data
    ):
        saved_order.payment_method = "checkmo"
        capture = MockCaptureAdapter(success_rate=1.0)

        with pytest.raises(DonationFailedError):
            await service_factory(capture_command=capture).donate(saved_order.id, sample_donation_data)

        assert capture.executed == []

    @pytest.mark.asyncio
    async def test_store_donation_amounts(
        self, service_factory, test_session: AsyncSession, saved_order: Order
    ):
        await ConfigService(test_session).repo.set_value(
            DONATION_AMOUNTS_PATH,
            "2.50,25",
            scope="stores",
            scope_id=saved_order.store_id,
        )
        service = service_factory()

        await service.donate(saved_order.id, {"amount": {"currency": "EUR", "value": 250}})

        saved_order.payment_additional_information = {
            "donationToken": "token-def",
            "pspReference": "PSP0001",
        }
        with pytest.raises(DonationFailedError):
            await service_factory().donate(
                saved_order.id,
                {"amount": {"currency": "EUR", "value": 500}},
            )

    @pytest.mark.asyncio
    async def test_invalid_configured_amount_is_ignored(
        self, service_factory, test_session: AsyncSession, saved_order: Order, sample_donation_data
    ):
        await ConfigService(test_session).repo.set_value(
            DONATION_AMOUNTS_PATH,
            "5,abc",
            scope="stores",
            scope_id=saved_order.store_id,
        )
        capture = MockCaptureAdapter(success_rate=1.0)

        result = await service_factory(capture_command=capture).donate(
            saved_order.id,
            sample_donation_data,
        )

        assert result.status == CaptureResultStatus.SUCCESS

    @pytest.mark.asyncio
    async def test_capture_uses_store_credentials(
        self, service_factory, test_session: AsyncSession, saved_order: Order, sample_donation_data
    ):
        repo = ConfigService(test_session).repo
        store_id = saved_order.store_id
        await repo.set_value(MERCHANT_ACCOUNT_PATH, "StoreOneECOM", scope="stores", scope_id=store_id)
        await repo.set_value(DEMO_MODE_PATH, "1", scope="stores", scope_id=store_id)
        await repo.set_value(
            API_KEY_PATH.format(mode="test"),
            "store-test-key",
            scope="stores",
            scope_id=store_id,
        )
        capture = MockCaptureAdapter(success_rate=1.0)

        await service_factory(capture_command=capture).donate(saved_order.id, sample_donation_data)

        assert capture.executed[0]["store"] == {
            "merchant_account": "StoreOneECOM",
            "api_key": "store-test-key",
            "demo_mode": True,
        }

    @pytest.mark.asyncio
    async def test_unparseable_capture_response_increments_try_count(
        self, service_factory, saved_order: Order, sample_donation_data
    ):
        adapter = AdyenCaptureAdapter(
            api_key="test-key",
            merchant_account="ShopECOM",
            demo_mode=True,
            transport=httpx.MockTransport(
                lambda request: httpx.Response(200, text="<html>maintenance</html>")
            ),
        )

        with pytest.raises(DonationFailedError):
            await service_factory(capture_command=adapter).donate(
                saved_order.id,
                sample_donation_data,
            )

        info = saved_order.payment_additional_information
        assert info["donationTryCount"] == 1
        assert info["donationToken"] == "token-abc"

    @pytest.mark.asyncio
    async def test_failed_capture_increments_try_count(
        self, service_factory, saved_order: Order, sample_donation_data
    ):
        service = service_factory(capture_command=FailingCaptureCommand())

        with pytest.raises(DonationFailedError) as exc_info:
            await service.donate(saved_order.id, sample_donation_data)

        # La causa no se expone
        assert exc_info.value.__cause__ is None
        assert "internal detail" not in str(exc_info.value)
        info = saved_order.payment_additional_information
        assert info["donationTryCount"] == 1
        assert info["donationToken"] == "token-abc"

    @pytest.mark.asyncio
    async def test_token_removed_after_max_tries(
        self, service_factory, saved_order: Order, sample_donation_data
    ):
        failing = FailingCaptureCommand()
        service = service_factory(capture_command=failing)

        for _ in range(MAX_DONATION_TRIES):
            with pytest.raises(DonationFailedError):
                await service.donate(saved_order.id, sample_donation_data)

        info = saved_order.payment_additional_information
        assert info["donationTryCount"] == MAX_DONATION_TRIES
        assert "donationToken" not in info
        assert failing.calls == MAX_DONATION_TRIES

        # Sin token, el siguiente intento falla sin llamar a la captura
        with pytest.raises(DonationFailedError):
            await service.donate(saved_order.id, sample_donation_data)
        assert failing.calls == MAX_DONATION_TRIES

    @pytest.mark.asyncio
    async def test_locked_order(self, service_factory, saved_order: Order, sample_donation_data):
        lock_manager = InMemoryDonationLockManager()
        await lock_manager.acquire(saved_order.id)
        capture = MockCaptureAdapter(success_rate=1.0)

        with pytest.raises(DonationInProgressError):
            await service_factory(capture_command=capture, lock_manager=lock_manager).donate(
                saved_order.id,
                sample_donation_data,
            )

        assert capture.executed == []

    @pytest.mark.asyncio
    async def test_lock_released_after_failure(
        self, service_factory, saved_order: Order, sample_donation_data
    ):
        lock_manager = InMemoryDonationLockManager()
        service = service_factory(
            capture_command=FailingCaptureCommand(),
            lock_manager=lock_manager,
        )

        with pytest.raises(DonationFailedError):
            await service.donate(saved_order.id, sample_donation_data)

        assert await lock_manager.acquire(saved_order.id) is True
