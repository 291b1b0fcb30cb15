"""
Entidades de comercio que lee el reconciliador de montos.

Son snapshots de solo lectura de lo que expone la plataforma (órdenes,
quotes, facturas, notas de crédito y sus líneas). Cada estructura contiene
únicamente los campos necesarios; las líneas referencian a su documento
padre por composición.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any


ZERO = Decimal("0")


@dataclass
class OrderPayment:
    """Pago asociado a una orden."""

    method: str
    additional_information: dict[str, Any] = field(default_factory=dict)

    def get_additional_information(self, key: str) -> Any:
        return self.additional_information.get(key)

    def set_additional_information(self, key: str, value: Any) -> None:
        self.additional_information[key] = value

    def unset_additional_information(self, key: str) -> None:
        self.additional_information.pop(key, None)


@dataclass
class Order:
    """Orden colocada (o en proceso de colocarse)."""

    store_id: int
    order_currency_code: str
    global_currency_code: str
    grand_total: Decimal = ZERO
    base_grand_total: Decimal = ZERO
    total_due: Decimal = ZERO
    base_total_due: Decimal = ZERO
    adyen_charged_currency: str | None = None
    increment_id: str | None = None
    customer_id: int | None = None
    payment: OrderPayment | None = None


@dataclass
class ShippingAddress:
    """Dirección de envío de un quote con sus totales de envío."""

    shipping_amount: Decimal = ZERO
    base_shipping_amount: Decimal = ZERO
    shipping_incl_tax: Decimal = ZERO
    base_shipping_incl_tax: Decimal = ZERO
    shipping_tax_amount: Decimal = ZERO
    base_shipping_tax_amount: Decimal = ZERO
    shipping_discount_amount: Decimal = ZERO
    base_shipping_discount_amount: Decimal = ZERO
    shipping_discount_tax_compensation_amount: Decimal = ZERO
    # El nombre truncado ("amnt") es el de la columna de la plataforma
    base_shipping_discount_tax_compensation_amnt: Decimal = ZERO
    base_discount_tax_compensation_amount: Decimal = ZERO


@dataclass
class Quote:
    """Carrito / quote aún no convertido en orden."""

    store_id: int
    quote_currency_code: str
    base_currency_code: str
    grand_total: Decimal = ZERO
    base_grand_total: Decimal = ZERO
    shipping_address: ShippingAddress = field(default_factory=ShippingAddress)


@dataclass
class QuoteItem:
    """Línea de un quote."""

    quote: Quote
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

    @property
    def store_id(self) -> int:
        return self.quote.store_id


@dataclass
class Invoice:
    """Factura de una orden."""

    order: Order
    base_currency_code: str
    order_currency_code: str
    grand_total: Decimal = ZERO
    base_grand_total: Decimal = ZERO
    shipping_amount: Decimal = ZERO
    base_shipping_amount: Decimal = ZERO
    shipping_tax_amount: Decimal = ZERO
    base_shipping_tax_amount: Decimal = ZERO


@dataclass
class InvoiceItem:
    """Línea de una factura."""

    invoice: Invoice
    qty: Decimal
    price: Decimal = ZERO
    base_price: Decimal = ZERO
    tax_amount: Decimal = ZERO
    base_tax_amount: Decimal = ZERO


@dataclass
class CreditMemo:
    """Nota de crédito (reembolso) de una orden."""

    order: Order
    base_currency_code: str
    order_currency_code: str
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


@dataclass
class CreditMemoItem:
    """Línea de una nota de crédito."""

    credit_memo: CreditMemo
    qty: Decimal
    price: Decimal = ZERO
    base_price: Decimal = ZERO
    tax_amount: Decimal = ZERO
    base_tax_amount: Decimal = ZERO
