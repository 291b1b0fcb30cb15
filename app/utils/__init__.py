"""
Utilidades del servicio de helpers de pago.
"""

from app.utils.currency import (
    format_amount,
    pad_shopper_reference,
    parse_amount_list,
)
from app.utils.locks import (
    DonationLockManager,
    InMemoryDonationLockManager,
    get_donation_lock_manager_with_fallback,
)

__all__ = [
    # Currency
    "format_amount",
    "pad_shopper_reference",
    "parse_amount_list",
    # Locks
    "DonationLockManager",
    "InMemoryDonationLockManager",
    "get_donation_lock_manager_with_fallback",
]
