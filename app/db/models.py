"""
Modelos SQLAlchemy del servicio de helpers de pago.

Solo se persisten las entidades que el servicio lee o escribe: órdenes (con
la información adicional del pago), quotes con su dirección de envío y los
valores de configuración por tienda.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import (
    JSON,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from app.domain import Order as OrderEntity
from app.domain import OrderPayment
from app.domain import Quote as QuoteEntity
from app.domain import ShippingAddress


# JSONB en PostgreSQL, JSON genérico en otros motores (tests con SQLite)
JSONType = JSON().with_variant(JSONB(), "postgresql")

# Montos con la misma precisión que la plataforma
Money = Numeric(20, 4)


class Base(DeclarativeBase):
    """Base para todos los modelos."""

    type_annotation_map = {
        dict[str, Any]: JSONType,
    }


class TimestampMixin:
    """Mixin para campos de timestamp."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        onupdate=func.now(),
        nullable=True,
    )


def _money_column():
    return mapped_column(Money, default=Decimal("0"), nullable=False)


class Order(Base, TimestampMixin):
    """Orden colocada y los datos de su pago."""

    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    increment_id: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
        index=True,
    )
    store_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    customer_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Moneda cobrada al momento de colocar la orden ("base" / "display")
    adyen_charged_currency: Mapped[str | None] = mapped_column(String(20), nullable=True)

    order_currency_code: Mapped[str] = mapped_column(String(3), nullable=False)
    global_currency_code: Mapped[str] = mapped_column(String(3), nullable=False)
    grand_total: Mapped[Decimal] = _money_column()
    base_grand_total: Mapped[Decimal] = _money_column()
    total_due: Mapped[Decimal] = _money_column()
    base_total_due: Mapped[Decimal] = _money_column()

    # Pago
    payment_method: Mapped[str] = mapped_column(String(100), nullable=False)
    payment_additional_information: Mapped[dict[str, Any]] = mapped_column(
        JSONType,
        default=dict,
        nullable=False,
    )

    def to_entity(self) -> OrderEntity:
        return OrderEntity(
            store_id=self.store_id,
            order_currency_code=self.order_currency_code,
            global_currency_code=self.global_currency_code,
            grand_total=self.grand_total,
            base_grand_total=self.base_grand_total,
            total_due=self.total_due,
            base_total_due=self.base_total_due,
            adyen_charged_currency=self.adyen_charged_currency,
            increment_id=self.increment_id,
            customer_id=self.customer_id,
            payment=OrderPayment(
                method=self.payment_method,
                additional_information=dict(self.payment_additional_information or {}),
            ),
        )

    def __repr__(self) -> str:
        return f"<Order {self.increment_id} - {self.grand_total} {self.order_currency_code}>"


class Quote(Base, TimestampMixin):
    """Quote (carrito) con su dirección de envío."""

    __tablename__ = "quotes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    store_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    quote_currency_code: Mapped[str] = mapped_column(String(3), nullable=False)
    base_currency_code: Mapped[str] = mapped_column(String(3), nullable=False)
    grand_total: Mapped[Decimal] = _money_column()
    base_grand_total: Mapped[Decimal] = _money_column()

    shipping_address: Mapped[Optional["QuoteAddress"]] = relationship(
        back_populates="quote",
        uselist=False,
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    def to_entity(self) -> QuoteEntity:
        return QuoteEntity(
            store_id=self.store_id,
            quote_currency_code=self.quote_currency_code,
            base_currency_code=self.base_currency_code,
            grand_total=self.grand_total,
            base_grand_total=self.base_grand_total,
            shipping_address=(
                self.shipping_address.to_entity()
                if self.shipping_address is not None
                else ShippingAddress()
            ),
        )

    def __repr__(self) -> str:
        return f"<Quote {self.id} - {self.grand_total} {self.quote_currency_code}>"


class QuoteAddress(Base, TimestampMixin):
    """Dirección de envío de un quote con sus totales de envío."""

    __tablename__ = "quote_addresses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    quote_id: Mapped[int] = mapped_column(
        ForeignKey("quotes.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    shipping_amount: Mapped[Decimal] = _money_column()
    base_shipping_amount: Mapped[Decimal] = _money_column()
    shipping_incl_tax: Mapped[Decimal] = _money_column()
    base_shipping_incl_tax: Mapped[Decimal] = _money_column()
    shipping_tax_amount: Mapped[Decimal] = _money_column()
    base_shipping_tax_amount: Mapped[Decimal] = _money_column()
    shipping_discount_amount: Mapped[Decimal] = _money_column()
    base_shipping_discount_amount: Mapped[Decimal] = _money_column()
    shipping_discount_tax_compensation_amount: Mapped[Decimal] = _money_column()
    base_shipping_discount_tax_compensation_amnt: Mapped[Decimal] = _money_column()
    base_discount_tax_compensation_amount: Mapped[Decimal] = _money_column()

    quote: Mapped[Quote] = relationship(back_populates="shipping_address")

    # Campos compartidos con la entidad ShippingAddress
    ENTITY_FIELDS = (
        "shipping_amount",
        "base_shipping_amount",
        "shipping_incl_tax",
        "base_shipping_incl_tax",
        "shipping_tax_amount",
        "base_shipping_tax_amount",
        "shipping_discount_amount",
        "base_shipping_discount_amount",
        "shipping_discount_tax_compensation_amount",
        "base_shipping_discount_tax_compensation_amnt",
        "base_discount_tax_compensation_amount",
    )

    def to_entity(self) -> ShippingAddress:
        return ShippingAddress(
            **{name: getattr(self, name) for name in self.ENTITY_FIELDS}
        )

    def update_from_entity(self, address: ShippingAddress) -> None:
        for name in self.ENTITY_FIELDS:
            setattr(self, name, getattr(address, name))


class ConfigData(Base, TimestampMixin):
    """Valor de configuración por alcance (default / store)."""

    __tablename__ = "config_data"
    __table_args__ = (
        UniqueConstraint("path", "scope", "scope_id", name="uq_config_data_path_scope"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    path: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    scope: Mapped[str] = mapped_column(String(20), default="default", nullable=False)
    scope_id: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    value: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<ConfigData {self.scope}:{self.scope_id} {self.path}>"
