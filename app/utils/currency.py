"""
Utilidades de formato de montos para el proveedor de pago.
"""

from decimal import ROUND_HALF_UP, Decimal

# Monedas sin decimales o con 3 decimales; el resto usa 2
ZERO_DECIMAL_CURRENCIES = {
    "CVE", "DJF", "GNF", "IDR", "JPY", "KMF", "KRW", "PYG",
    "RWF", "UGX", "VND", "VUV", "XAF", "XOF", "XPF",
}
THREE_DECIMAL_CURRENCIES = {"BHD", "IQD", "JOD", "KWD", "LYD", "OMR", "TND"}

SHOPPER_REFERENCE_MIN_LENGTH = 3


def currency_decimals(currency: str) -> int:
    """Número de decimales de la unidad menor de una moneda."""
    code = (currency or "").upper().strip()
    if code in ZERO_DECIMAL_CURRENCIES:
        return 0
    if code in THREE_DECIMAL_CURRENCIES:
        return 3
    return 2


def format_amount(amount: Decimal | str | int | float, currency: str) -> int:
    """
    Convierte un monto en unidad mayor a unidad menor.

    Ej: 10.5 EUR -> 1050, 100 JPY -> 100, 1.234 KWD -> 1234
    """
    decimals = currency_decimals(currency)
    value = Decimal(str(amount).strip())
    minor = value.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)
    return int(minor.scaleb(decimals))


def parse_amount_list(raw: str | None) -> list[str]:
    """Parsea una lista de montos separados por coma ("1,5,10")."""
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def pad_shopper_reference(shopper_reference: str | int) -> str:
    """El proveedor exige shopperReference de al menos 3 caracteres."""
    return str(shopper_reference).rjust(SHOPPER_REFERENCE_MIN_LENGTH, "0")
