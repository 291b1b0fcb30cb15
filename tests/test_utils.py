"""
Tests para utilidades de montos y locks de donación.
"""

from decimal import Decimal

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.utils.currency import (
    currency_decimals,
    format_amount,
    pad_shopper_reference,
    parse_amount_list,
)
from app.utils.locks import DonationLockManager, InMemoryDonationLockManager


class TestCurrencyUtils:
    """Tests para el formato de montos."""

    @pytest.mark.parametrize(
        "currency,decimals",
        [("EUR", 2), ("usd", 2), ("JPY", 0), ("KWD", 3)],
    )
    def test_currency_decimals(self, currency, decimals):
        assert currency_decimals(currency) == decimals

    def test_format_amount_minor_units(self):
        assert format_amount("5", "EUR") == 500
        assert format_amount(Decimal("10.5"), "EUR") == 1050
        assert format_amount("100", "JPY") == 100
        assert format_amount("1.234", "KWD") == 1234

    def test_format_amount_rounds_half_up(self):
        assert format_amount("0.125", "EUR") == 13

    def test_parse_amount_list(self):
        assert parse_amount_list("1, 5,10,") == ["1", "5", "10"]
        assert parse_amount_list("") == []
        assert parse_amount_list(None) == []

    def test_pad_shopper_reference(self):
        assert pad_shopper_reference(7) == "007"
        assert pad_shopper_reference("12345") == "12345"


class TestInMemoryDonationLock:
    """Tests para el lock en memoria."""

    @pytest.mark.asyncio
    async def test_acquire_and_release(self):
        manager = InMemoryDonationLockManager()

        assert await manager.acquire(1) is True
        assert await manager.acquire(1) is False
        assert await manager.acquire(2) is True

        await manager.release(1)

        assert await manager.acquire(1) is True


class FakeRedis:
    """Cliente Redis mínimo para SET NX y DELETE."""

    def __init__(self, fail: bool = False):
        self.store: dict[str, str] = {}
        self.fail = fail

    async def set(self, key, value, nx=False, ex=None):
        if self.fail:
            raise RedisConnectionError("connection refused")
        if nx and key in self.store:
            return None
        self.store[key] = value
        return True

    async def delete(self, key):
        if self.fail:
            raise RedisConnectionError("connection refused")
        self.store.pop(key, None)


class TestRedisDonationLock:
    """Tests para el lock con Redis."""

    @pytest.mark.asyncio
    async def test_acquire_uses_prefixed_key(self):
        redis_client = FakeRedis()
        manager = DonationLockManager(redis_client)

        assert await manager.acquire(10) is True
        assert "donation:lock:10" in redis_client.store
        assert await manager.acquire(10) is False

        await manager.release(10)

        assert redis_client.store == {}

    @pytest.mark.asyncio
    async def test_redis_error_does_not_block(self):
        manager = DonationLockManager(FakeRedis(fail=True))

        assert await manager.acquire(10) is True
        await manager.release(10)
