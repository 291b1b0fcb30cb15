"""
Repositorio para operaciones de Quote.
"""

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Quote, QuoteAddress
from app.domain import ShippingAddress


logger = structlog.get_logger(__name__)


class QuoteRepository:
    """Repositorio para quotes y su dirección de envío."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, quote_id: int) -> Quote | None:
        """Obtiene un quote por ID (la dirección de envío se carga con selectin)."""
        result = await self.db.execute(
            select(Quote).where(Quote.id == quote_id)
        )
        return result.scalar_one_or_none()

    async def save_shipping_address(
        self,
        quote: Quote,
        address: ShippingAddress,
    ) -> Quote:
        """Persiste los totales de envío del quote."""
        if quote.shipping_address is None:
            quote.shipping_address = QuoteAddress()
        quote.shipping_address.update_from_entity(address)

        await self.db.flush()

        logger.debug("Quote shipping address saved", quote_id=quote.id)
        return quote
