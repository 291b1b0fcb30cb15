"""
Rutas/Endpoints del servicio de helpers de pago.
"""

from app.routes.amounts import router as amounts_router
from app.routes.orders import router as orders_router
from app.routes.quotes import router as quotes_router
from app.routes.management import router as management_router

__all__ = [
    "amounts_router",
    "orders_router",
    "quotes_router",
    "management_router",
]
