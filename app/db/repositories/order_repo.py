"""
Repositorio para operaciones de Order.
"""

from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Order


logger = structlog.get_logger(__name__)


class OrderRepository:
    """Repositorio para lectura de órdenes y escritura del pago."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, order_id: int) -> Order | None:
        """Obtiene una orden por ID."""
        result = await self.db.execute(
            select(Order).where(Order.id == order_id)
        )
        return result.scalar_one_or_none()

    async def save_payment_additional_information(
        self,
        order: Order,
        additional_information: dict[str, Any],
    ) -> Order:
        """
        Reemplaza la información adicional del pago.

        Se asigna un dict nuevo para que SQLAlchemy detecte el cambio en la
        columna JSON.
        """
        order.payment_additional_information = dict(additional_information)
        await self.db.flush()

        logger.debug(
            "Order payment information saved",
            order_id=order.id,
            keys=sorted(additional_information.keys()),
        )
        return order
