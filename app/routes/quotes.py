"""
Endpoints de quotes guardados.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.database import get_db
from app.schemas import AmountCurrencyResponse, APIResponse
from app.services import QuoteService
from app.utils.exceptions import QuoteNotFoundError


logger = structlog.get_logger(__name__)

router = APIRouter()


async def get_quote_service(
    db: AsyncSession = Depends(get_db),
) -> QuoteService:
    """Dependency para obtener QuoteService."""
    return QuoteService(db)


@router.get(
    "/{quote_id}/amount",
    response_model=APIResponse[AmountCurrencyResponse],
    summary="Monto total de un quote",
)
async def get_quote_amount(
    quote_id: int,
    service: QuoteService = Depends(get_quote_service),
):
    try:
        amount_currency = await service.get_amount_currency(quote_id)
    except QuoteNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Quote not found: {quote_id}",
        )

    return APIResponse(
        success=True,
        data=AmountCurrencyResponse.from_amount_currency(amount_currency),
    )


@router.post(
    "/{quote_id}/shipping-amount",
    response_model=APIResponse[AmountCurrencyResponse],
    summary="Monto de envío de un quote",
    description="""
    En moneda base calcula y guarda la compensación de impuesto por
    descuento del envío antes de leer el monto.
    """,
)
async def get_quote_shipping_amount(
    quote_id: int,
    service: QuoteService = Depends(get_quote_service),
):
    try:
        amount_currency = await service.get_shipping_amount_currency(quote_id)
    except QuoteNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Quote not found: {quote_id}",
        )

    return APIResponse(
        success=True,
        data=AmountCurrencyResponse.from_amount_currency(amount_currency),
    )
