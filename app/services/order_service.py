"""
Servicio de órdenes.
"""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.repositories import OrderRepository
from app.domain import AmountCurrency
from app.services.charged_currency import ChargedCurrency
from app.services.config_service import ConfigService
from app.utils.exceptions import OrderNotFoundError


logger = structlog.get_logger(__name__)


class OrderService:
    """Montos de órdenes guardadas."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = OrderRepository(db)
        self.config_service = ConfigService(db)

    async def get_amount_currency(
        self,
        order_id: int,
        order_placement: bool = False,
    ) -> AmountCurrency:
        """
        Monto total de una orden.

        Con order_placement=False se usa la moneda cobrada guardada en la
        orden; con True, la configuración actual de la tienda.
        """
        order = await self.repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(str(order_id))

        config = await self.config_service.build_charged_currency_config()
        amount_currency = ChargedCurrency(config).get_order_amount_currency(
            order.to_entity(),
            order_placement=order_placement,
        )

        logger.debug(
            "Order amount resolved",
            order_id=order_id,
            currency=amount_currency.currency_code,
            order_placement=order_placement,
        )
        return amount_currency
