"""
Reconciliador de montos por moneda cobrada.

Traduce cada entidad de comercio a un AmountCurrency, eligiendo entre los
campos en moneda base o en moneda de presentación según el flag de moneda
cobrada (configuración de la tienda, o el valor guardado en la orden una vez
colocada).
"""

from decimal import Decimal
from typing import Protocol

import structlog

from app.domain import (
    AmountCurrency,
    ChargedCurrencyMode,
    CreditMemo,
    CreditMemoItem,
    Invoice,
    InvoiceItem,
    Order,
    Quote,
    QuoteItem,
    ShippingAddress,
)


logger = structlog.get_logger(__name__)

ZERO = Decimal("0")


class ChargedCurrencyConfig(Protocol):
    """Fuente del flag de moneda cobrada a nivel tienda."""

    def get_charged_currency(self, store_id: int) -> str:
        ...


class StaticChargedCurrencyConfig:
    """
    Configuración en memoria: un valor por defecto más overrides por tienda.

    ConfigService construye una instancia a partir de la tabla config_data.
    """

    def __init__(
        self,
        default: str = ChargedCurrencyMode.BASE.value,
        per_store: dict[int, str] | None = None,
    ):
        self._default = default
        self._per_store = dict(per_store or {})

    def get_charged_currency(self, store_id: int) -> str:
        return self._per_store.get(store_id, self._default)


def per_unit(value: Decimal, qty: Decimal) -> Decimal:
    """Divide por cantidad; retorna 0 si la cantidad no es positiva."""
    if not qty or qty <= 0:
        return ZERO
    return value / qty


def _is_base(charged_currency: str | None) -> bool:
    return charged_currency == ChargedCurrencyMode.BASE.value


class ChargedCurrency:
    """
    Helper de montos por moneda cobrada.

    Todas las operaciones son de solo lectura sobre la entidad, excepto el
    paso explícito apply_base_shipping_discount_tax_compensation (ver
    QuoteService.get_shipping_amount_currency).
    """

    BASE = ChargedCurrencyMode.BASE.value

    def __init__(self, config: ChargedCurrencyConfig):
        self._config = config

    # ============================================
    # Órdenes y quotes
    # ============================================

    def get_order_amount_currency(
        self,
        order: Order,
        order_placement: bool = True,
    ) -> AmountCurrency:
        """
        Monto total de una orden.

        Args:
            order: Orden
            order_placement: True si la orden se está colocando (usa la
                configuración de la tienda), False para usar la moneda
                cobrada ya guardada en la orden
        """
        charged_currency = (
            self._config.get_charged_currency(order.store_id)
            if order_placement
            else order.adyen_charged_currency
        )

        if _is_base(charged_currency):
            return AmountCurrency(
                amount=order.base_grand_total,
                currency_code=order.global_currency_code,
                discount_amount=None,
                tax_amount=None,
                amount_due=order.base_total_due,
            )

        return AmountCurrency(
            amount=order.grand_total,
            currency_code=order.order_currency_code,
            discount_amount=None,
            tax_amount=None,
            amount_due=order.total_due,
        )

    def get_quote_amount_currency(self, quote: Quote) -> AmountCurrency:
        """Monto total de un quote."""
        if _is_base(self._config.get_charged_currency(quote.store_id)):
            return AmountCurrency(quote.base_grand_total, quote.base_currency_code)

        return AmountCurrency(quote.grand_total, quote.quote_currency_code)

    def get_quote_item_amount_currency(self, item: QuoteItem) -> AmountCurrency:
        """
        Monto unitario de una línea de quote.

        En moneda de presentación, si el descuento se aplicó sobre un precio
        con impuesto incluido (compensación > 0) el impuesto incluye la
        compensación; si no, el impuesto se reconstruye como la diferencia
        entre precio con y sin impuesto, y esa diferencia no cubierta por el
        impuesto real se suma al descuento.
        """
        if _is_base(self._config.get_charged_currency(item.store_id)):
            return AmountCurrency(
                amount=item.base_price,
                currency_code=item.quote.base_currency_code,
                discount_amount=item.base_discount_amount,
                tax_amount=per_unit(
                    item.base_tax_amount + item.base_discount_tax_compensation_amount,
                    item.qty,
                ),
                amount_incl_tax=item.base_price_incl_tax,
            )

        # Ambiguo según la configuración de impuestos; para cálculos precisos
        # usar los montos con/sin impuesto
        amount = per_unit(item.row_total, item.qty)

        if item.discount_tax_compensation_amount > 0:
            tax_amount = per_unit(
                item.tax_amount + item.discount_tax_compensation_amount,
                item.qty,
            )
            discount = item.discount_amount
        else:
            tax_amount = item.price_incl_tax - item.price
            discount = item.discount_amount + (
                (item.price_incl_tax - item.price - per_unit(item.tax_amount, item.qty))
                * item.qty
            )

        return AmountCurrency(
            amount=amount,
            currency_code=item.quote.quote_currency_code,
            discount_amount=discount,
            tax_amount=tax_amount,
            amount_incl_tax=item.price_incl_tax,
        )

    def is_quote_charged_in_base(self, quote: Quote) -> bool:
        return _is_base(self._config.get_charged_currency(quote.store_id))

    @staticmethod
    def apply_base_shipping_discount_tax_compensation(address: ShippingAddress) -> Decimal:
        """
        Calcula y escribe la compensación de impuesto por descuento del envío
        en moneda base.

        Muta la dirección; quien llama es responsable de persistir el quote
        antes de leer el monto de envío.
        """
        compensation = (
            address.base_shipping_incl_tax
            - address.base_shipping_amount
            - address.base_shipping_tax_amount
        )
        address.base_discount_tax_compensation_amount = compensation

        logger.debug(
            "Base shipping discount tax compensation applied",
            compensation=str(compensation),
        )
        return compensation

    def get_quote_shipping_amount_currency(self, quote: Quote) -> AmountCurrency:
        """Monto de envío de un quote (lectura pura)."""
        address = quote.shipping_address

        if _is_base(self._config.get_charged_currency(quote.store_id)):
            compensation = address.base_shipping_discount_tax_compensation_amnt
            return AmountCurrency(
                amount=address.base_shipping_amount,
                currency_code=quote.base_currency_code,
                discount_amount=address.base_shipping_discount_amount + compensation,
                tax_amount=address.base_shipping_tax_amount + compensation,
                amount_incl_tax=address.base_shipping_incl_tax,
            )

        if address.shipping_discount_tax_compensation_amount > 0:
            tax_amount = (
                address.shipping_tax_amount
                + address.shipping_discount_tax_compensation_amount
            )
            discount = address.shipping_discount_amount
        else:
            tax_amount = address.shipping_incl_tax - address.shipping_amount
            discount = address.shipping_discount_amount + (
                address.shipping_incl_tax
                - address.shipping_amount
                - address.shipping_tax_amount
            )

        # El total con impuesto se reporta sin compensación: la plataforma
        # calcula mal el total cuando el descuento aplica a envío con impuesto
        return AmountCurrency(
            amount=address.shipping_amount,
            currency_code=quote.quote_currency_code,
            discount_amount=discount,
            tax_amount=tax_amount,
            amount_incl_tax=address.shipping_incl_tax,
        )

    # ============================================
    # Facturas
    # ============================================

    def get_invoice_amount_currency(self, invoice: Invoice) -> AmountCurrency:
        if _is_base(invoice.order.adyen_charged_currency):
            return AmountCurrency(invoice.base_grand_total, invoice.base_currency_code)

        return AmountCurrency(invoice.grand_total, invoice.order_currency_code)

    def get_invoice_item_amount_currency(self, item: InvoiceItem) -> AmountCurrency:
        invoice = item.invoice

        if _is_base(invoice.order.adyen_charged_currency):
            return AmountCurrency(
                amount=item.base_price,
                currency_code=invoice.base_currency_code,
                discount_amount=None,
                tax_amount=per_unit(item.base_tax_amount, item.qty),
            )

        return AmountCurrency(
            amount=item.price,
            currency_code=invoice.order_currency_code,
            discount_amount=None,
            tax_amount=per_unit(item.tax_amount, item.qty),
        )

    def get_invoice_shipping_amount_currency(self, invoice: Invoice) -> AmountCurrency:
        if _is_base(invoice.order.adyen_charged_currency):
            return AmountCurrency(
                amount=invoice.base_shipping_amount,
                currency_code=invoice.base_currency_code,
                discount_amount=None,
                tax_amount=invoice.base_shipping_tax_amount,
            )

        return AmountCurrency(
            amount=invoice.shipping_amount,
            currency_code=invoice.order_currency_code,
            discount_amount=None,
            tax_amount=invoice.shipping_tax_amount,
        )

    # ============================================
    # Notas de crédito
    # ============================================

    def get_credit_memo_amount_currency(self, credit_memo: CreditMemo) -> AmountCurrency:
        if _is_base(credit_memo.order.adyen_charged_currency):
            return AmountCurrency(
                amount=credit_memo.base_grand_total,
                currency_code=credit_memo.base_currency_code,
                discount_amount=None,
                tax_amount=credit_memo.base_tax_amount,
            )

        return AmountCurrency(
            amount=credit_memo.grand_total,
            currency_code=credit_memo.order_currency_code,
            discount_amount=None,
            tax_amount=credit_memo.tax_amount,
        )

    def get_credit_memo_adjustment_amount_currency(
        self,
        credit_memo: CreditMemo,
    ) -> AmountCurrency:
        if _is_base(credit_memo.order.adyen_charged_currency):
            return AmountCurrency(credit_memo.base_adjustment, credit_memo.base_currency_code)

        return AmountCurrency(credit_memo.adjustment, credit_memo.order_currency_code)

    def get_credit_memo_shipping_amount_currency(
        self,
        credit_memo: CreditMemo,
    ) -> AmountCurrency:
        if _is_base(credit_memo.order.adyen_charged_currency):
            return AmountCurrency(
                amount=credit_memo.base_shipping_amount,
                currency_code=credit_memo.base_currency_code,
                discount_amount=None,
                tax_amount=credit_memo.base_shipping_tax_amount,
            )

        return AmountCurrency(
            amount=credit_memo.shipping_amount,
            currency_code=credit_memo.order_currency_code,
            discount_amount=None,
            tax_amount=credit_memo.shipping_tax_amount,
        )

    def get_credit_memo_item_amount_currency(self, item: CreditMemoItem) -> AmountCurrency:
        credit_memo = item.credit_memo

        if _is_base(credit_memo.order.adyen_charged_currency):
            return AmountCurrency(
                amount=item.base_price,
                currency_code=credit_memo.base_currency_code,
                discount_amount=None,
                tax_amount=per_unit(item.base_tax_amount, item.qty),
            )

        return AmountCurrency(
            amount=item.price,
            currency_code=credit_memo.order_currency_code,
            discount_amount=None,
            tax_amount=per_unit(item.tax_amount, item.qty),
        )
