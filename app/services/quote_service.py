"""
Servicio de quotes.
Orquesta el cálculo del monto de envío, que requiere persistir el quote.
"""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.repositories import QuoteRepository
from app.domain import AmountCurrency
from app.services.charged_currency import ChargedCurrency
from app.services.config_service import ConfigService
from app.utils.exceptions import QuoteNotFoundError


logger = structlog.get_logger(__name__)


class QuoteService:
    """
    Servicio para montos de quotes guardados.

    Coordina el repositorio de BD, la configuración y el reconciliador.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = QuoteRepository(db)
        self.config_service = ConfigService(db)

    async def _get_charged_currency(self) -> ChargedCurrency:
        return ChargedCurrency(await self.config_service.build_charged_currency_config())

    async def get_amount_currency(self, quote_id: int) -> AmountCurrency:
        quote = await self.repo.get_by_id(quote_id)
        if quote is None:
            raise QuoteNotFoundError(str(quote_id))

        charged_currency = await self._get_charged_currency()
        return charged_currency.get_quote_amount_currency(quote.to_entity())

    async def get_shipping_amount_currency(self, quote_id: int) -> AmountCurrency:
        """
        Monto de envío de un quote.

        En moneda base primero se calcula y guarda la compensación de
        impuesto por descuento del envío, y recién después se lee el monto.
        """
        quote = await self.repo.get_by_id(quote_id)
        if quote is None:
            raise QuoteNotFoundError(str(quote_id))

        charged_currency = await self._get_charged_currency()
        entity = quote.to_entity()

        if charged_currency.is_quote_charged_in_base(entity):
            charged_currency.apply_base_shipping_discount_tax_compensation(
                entity.shipping_address
            )
            # Un quote sin dirección de envío no genera una fila nueva
            if quote.shipping_address is not None:
                await self.repo.save_shipping_address(quote, entity.shipping_address)

                logger.info(
                    "Quote shipping compensation persisted",
                    quote_id=quote_id,
                    compensation=str(entity.shipping_address.base_discount_tax_compensation_amount),
                )

        return charged_currency.get_quote_shipping_amount_currency(entity)
