"""
Schemas para el cálculo de montos por moneda cobrada.

Los requests son snapshots de las entidades de comercio; cada uno se
convierte en la entidad de dominio con to_entity().
"""

from decimal import Decimal

from pydantic import Field

from app.domain import (
    AmountCurrency,
    CreditMemo,
    CreditMemoItem,
    Invoice,
    InvoiceItem,
    Order,
    Quote,
    QuoteItem,
    ShippingAddress,
)
from app.schemas.common import BaseSchema


ZERO = Decimal("0")


# ============================================
# Request Schemas (entrada)
# ============================================

class OrderSnapshot(BaseSchema):
    """Orden."""

    store_id: int
    order_currency_code: str = Field(..., min_length=3, max_length=3)
    global_currency_code: str = Field(..., min_length=3, max_length=3)
    grand_total: Decimal = ZERO
    base_grand_total: Decimal = ZERO
    total_due: Decimal = ZERO
    base_total_due: Decimal = ZERO
    adyen_charged_currency: str | None = None

    def to_entity(self) -> Order:
        return Order(**self.model_dump())


class OrderAmountRequest(BaseSchema):
    order: OrderSnapshot
    order_placement: bool = True


class ShippingAddressSnapshot(BaseSchema):
    shipping_amount: Decimal = ZERO
    base_shipping_amount: Decimal = ZERO
    shipping_incl_tax: Decimal = ZERO
    base_shipping_incl_tax: Decimal = ZERO
    shipping_tax_amount: Decimal = ZERO
    base_shipping_tax_amount: Decimal = ZERO
    shipping_discount_amount: Decimal = ZERO
    base_shipping_discount_amount: Decimal = ZERO
    shipping_discount_tax_compensation_amount: Decimal = ZERO
    base_shipping_discount_tax_compensation_amnt: Decimal = ZERO
    base_discount_tax_compensation_amount: Decimal = ZERO

    def to_entity(self) -> ShippingAddress:
        return ShippingAddress(**self.model_dump())


class QuoteSnapshot(BaseSchema):
    """Quote."""

    store_id: int
    quote_currency_code: str = Field(..., min_length=3, max_length=3)
    base_currency_code: str = Field(..., min_length=3, max_length=3)
    grand_total: Decimal = ZERO
    base_grand_total: Decimal = ZERO
    shipping_address: ShippingAddressSnapshot = Field(default_factory=ShippingAddressSnapshot)

    def to_entity(self) -> Quote:
        data = self.model_dump(exclude={"shipping_address"})
        return Quote(**data, shipping_address=self.shipping_address.to_entity())


class QuoteItemSnapshot(BaseSchema):
    """Línea de quote con su quote padre."""

    quote: QuoteSnapshot
    qty: Decimal
    price: Decimal = ZERO
    base_price: Decimal = ZERO
    row_total: Decimal = ZERO
    price_incl_tax: Decimal = ZERO
    base_price_incl_tax: Decimal = ZERO
    tax_amount: Decimal = ZERO
    base_tax_amount: Decimal = ZERO
    discount_amount: Decimal = ZERO
    base_discount_amount: Decimal = ZERO
    discount_tax_compensation_amount: Decimal = ZERO
    base_discount_tax_compensation_amount: Decimal = ZERO

    def to_entity(self) -> QuoteItem:
        data = self.model_dump(exclude={"quote"})
        return QuoteItem(quote=self.quote.to_entity(), **data)


class InvoiceSnapshot(BaseSchema):
    """Factura con su orden."""

    order: OrderSnapshot
    base_currency_code: str = Field(..., min_length=3, max_length=3)
    order_currency_code: str = Field(..., min_length=3, max_length=3)
    grand_total: Decimal = ZERO
    base_grand_total: Decimal = ZERO
    shipping_amount: Decimal = ZERO
    base_shipping_amount: Decimal = ZERO
    shipping_tax_amount: Decimal = ZERO
    base_shipping_tax_amount: Decimal = ZERO

    def to_entity(self) -> Invoice:
        data = self.model_dump(exclude={"order"})
        return Invoice(order=self.order.to_entity(), **data)


class InvoiceItemSnapshot(BaseSchema):
    invoice: InvoiceSnapshot
    qty: Decimal
    price: Decimal = ZERO
    base_price: Decimal = ZERO
    tax_amount: Decimal = ZERO
    base_tax_amount: Decimal = ZERO

    def to_entity(self) -> InvoiceItem:
        data = self.model_dump(exclude={"invoice"})
        return InvoiceItem(invoice=self.invoice.to_entity(), **data)


class CreditMemoSnapshot(BaseSchema):
    """Nota de crédito con su orden."""

    order: OrderSnapshot
    base_currency_code: str = Field(..., min_length=3, max_length=3)
    order_currency_code: str = Field(..., min_length=3, max_length=3)
    grand_total: Decimal = ZERO
    base_grand_total: Decimal = ZERO
    tax_amount: Decimal = ZERO
    base_tax_amount: Decimal = ZERO
    adjustment: Decimal = ZERO
    base_adjustment: Decimal = ZERO
    shipping_amount: Decimal = ZERO
    base_shipping_amount: Decimal = ZERO
    shipping_tax_amount: Decimal = ZERO
    base_shipping_tax_amount: Decimal = ZERO

    def to_entity(self) -> CreditMemo:
        data = self.model_dump(exclude={"order"})
        return CreditMemo(order=self.order.to_entity(), **data)


class CreditMemoItemSnapshot(BaseSchema):
    credit_memo: CreditMemoSnapshot
    qty: Decimal
    price: Decimal = ZERO
    base_price: Decimal = ZERO
    tax_amount: Decimal = ZERO
    base_tax_amount: Decimal = ZERO

    def to_entity(self) -> CreditMemoItem:
        data = self.model_dump(exclude={"credit_memo"})
        return CreditMemoItem(credit_memo=self.credit_memo.to_entity(), **data)


# ============================================
# Response Schemas (salida)
# ============================================

class AmountCurrencyResponse(BaseSchema):
    """Monto normalizado."""

    amount: Decimal
    currency_code: str
    discount_amount: Decimal
    tax_amount: Decimal
    amount_due: Decimal | None = None
    amount_incl_tax: Decimal | None = None

    @classmethod
    def from_amount_currency(cls, amount_currency: AmountCurrency) -> "AmountCurrencyResponse":
        return cls(**amount_currency.to_dict())
