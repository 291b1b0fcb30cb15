"""
Modelo de dominio: entidades de comercio y registro de monto normalizado.
"""

from app.domain.amount import AmountCurrency, ChargedCurrencyMode
from app.domain.entities import (
    CreditMemo,
    CreditMemoItem,
    Invoice,
    InvoiceItem,
    Order,
    OrderPayment,
    Quote,
    QuoteItem,
    ShippingAddress,
)

__all__ = [
    "AmountCurrency",
    "ChargedCurrencyMode",
    "CreditMemo",
    "CreditMemoItem",
    "Invoice",
    "InvoiceItem",
    "Order",
    "OrderPayment",
    "Quote",
    "QuoteItem",
    "ShippingAddress",
]
