"""
Configuración de tests y fixtures compartidos.
"""

import os

# La configuración exige DATABASE_URL al importar la app
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.adapters import MockCaptureAdapter
from app.main import app
from app.db.models import Base, Order, Quote, QuoteAddress
from app.db.database import get_db
from app.routes.orders import get_donation_service
from app.services import DonationService
from app.utils.locks import InMemoryDonationLockManager


# Base de datos de testing en memoria
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Crea un engine de testing para cada test."""
    # StaticPool: todas las sesiones comparten la misma conexión en memoria
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Crea una sesión de testing."""
    async_session = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session


@pytest.fixture
def capture_command() -> MockCaptureAdapter:
    """Comando de captura mock que siempre tiene éxito."""
    return MockCaptureAdapter(success_rate=1.0)


@pytest.fixture
def lock_manager() -> InMemoryDonationLockManager:
    return InMemoryDonationLockManager()


@pytest_asyncio.fixture(scope="function")
async def client(
    test_session: AsyncSession,
    capture_command: MockCaptureAdapter,
    lock_manager: InMemoryDonationLockManager,
) -> AsyncGenerator[AsyncClient, None]:
    """Cliente HTTP para tests de API."""

    async def override_get_db():
        yield test_session

    async def override_get_donation_service():
        return DonationService(
            test_session,
            capture_command=capture_command,
            lock_manager=lock_manager,
        )

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_donation_service] = override_get_donation_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def saved_order(test_session: AsyncSession) -> Order:
    """Orden colocada en moneda base, pagada con tarjeta y con donation token."""
    order = Order(
        increment_id="000000123",
        store_id=1,
        customer_id=7,
        adyen_charged_currency="base",
        order_currency_code="USD",
        global_currency_code="EUR",
        grand_total=Decimal("130.00"),
        base_grand_total=Decimal("120.00"),
        total_due=Decimal("0"),
        base_total_due=Decimal("0"),
        payment_method="adyen_cc",
        payment_additional_information={
            "donationToken": "token-abc",
            "pspReference": "PSP0001",
        },
    )
    test_session.add(order)
    await test_session.commit()
    return order


@pytest_asyncio.fixture
async def saved_quote(test_session: AsyncSession) -> Quote:
    """Quote con dirección de envío con impuesto incluido."""
    quote = Quote(
        store_id=1,
        quote_currency_code="USD",
        base_currency_code="EUR",
        grand_total=Decimal("55.00"),
        base_grand_total=Decimal("50.00"),
        shipping_address=QuoteAddress(
            shipping_amount=Decimal("10.00"),
            base_shipping_amount=Decimal("9.00"),
            shipping_incl_tax=Decimal("12.10"),
            base_shipping_incl_tax=Decimal("11.00"),
            shipping_tax_amount=Decimal("2.10"),
            base_shipping_tax_amount=Decimal("1.50"),
            shipping_discount_amount=Decimal("1.00"),
            base_shipping_discount_amount=Decimal("0.90"),
            base_shipping_discount_tax_compensation_amnt=Decimal("0.25"),
        ),
    )
    test_session.add(quote)
    await test_session.commit()
    return quote


@pytest.fixture
def sample_donation_data():
    """Payload de donación de 5.00 EUR."""
    return {
        "amount": {"currency": "EUR", "value": 500},
        "returnUrl": "https://shop.example.com/checkout/success",
    }
