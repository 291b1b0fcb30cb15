"""
Registro normalizado de monto + moneda.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class ChargedCurrencyMode(str, Enum):
    """Moneda en la que se cobra."""

    BASE = "base"        # Moneda base (global / website)
    DISPLAY = "display"  # Moneda de presentación de la orden


@dataclass(frozen=True)
class AmountCurrency:
    """
    Monto normalizado de una entidad de comercio.

    El currency_code siempre es la moneda base o la moneda de presentación
    de la entidad origen. Es una proyección inmutable, nunca se persiste.
    """

    amount: Decimal
    currency_code: str
    discount_amount: Decimal | None = Decimal("0")
    tax_amount: Decimal | None = Decimal("0")
    amount_due: Decimal | None = None       # Solo para órdenes
    amount_incl_tax: Decimal | None = None

    def __post_init__(self):
        # None se normaliza a 0 para descuento e impuesto
        if self.discount_amount is None:
            object.__setattr__(self, "discount_amount", Decimal("0"))
        if self.tax_amount is None:
            object.__setattr__(self, "tax_amount", Decimal("0"))

    def to_dict(self) -> dict[str, Decimal | str | None]:
        return {
            "amount": self.amount,
            "currency_code": self.currency_code,
            "discount_amount": self.discount_amount,
            "tax_amount": self.tax_amount,
            "amount_due": self.amount_due,
            "amount_incl_tax": self.amount_incl_tax,
        }
