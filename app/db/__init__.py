"""
Capa de base de datos del servicio de helpers de pago.
"""

from app.db.database import (
    get_db,
    init_db,
    close_db,
    AsyncSessionLocal,
    engine,
)
from app.db.models import (
    Base,
    Order,
    Quote,
    QuoteAddress,
    ConfigData,
)

__all__ = [
    # Database
    "get_db",
    "init_db",
    "close_db",
    "AsyncSessionLocal",
    "engine",
    # Models
    "Base",
    "Order",
    "Quote",
    "QuoteAddress",
    "ConfigData",
]
