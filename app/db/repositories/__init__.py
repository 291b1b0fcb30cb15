"""
Repositorios para operaciones de base de datos.
"""

from app.db.repositories.order_repo import OrderRepository
from app.db.repositories.quote_repo import QuoteRepository
from app.db.repositories.config_repo import ConfigRepository

__all__ = [
    "OrderRepository",
    "QuoteRepository",
    "ConfigRepository",
]
