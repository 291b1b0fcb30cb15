"""
Endpoints de cálculo de montos por moneda cobrada.

Cada endpoint recibe el snapshot de una entidad de comercio y retorna su
monto normalizado (monto, moneda, descuento, impuesto).
"""

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.database import get_db
from app.schemas import (
    AmountCurrencyResponse,
    APIResponse,
    CreditMemoItemSnapshot,
    CreditMemoSnapshot,
    InvoiceItemSnapshot,
    InvoiceSnapshot,
    OrderAmountRequest,
    QuoteItemSnapshot,
    QuoteSnapshot,
)
from app.services import ChargedCurrency, ConfigService


logger = structlog.get_logger(__name__)

router = APIRouter()


async def get_charged_currency(
    db: AsyncSession = Depends(get_db),
) -> ChargedCurrency:
    """Dependency para obtener el reconciliador con la configuración actual."""
    config = await ConfigService(db).build_charged_currency_config()
    return ChargedCurrency(config)


def _response(amount_currency) -> APIResponse[AmountCurrencyResponse]:
    return APIResponse(
        success=True,
        data=AmountCurrencyResponse.from_amount_currency(amount_currency),
    )


@router.post(
    "/order",
    response_model=APIResponse[AmountCurrencyResponse],
    summary="Monto total de una orden",
)
async def order_amount(
    request: OrderAmountRequest,
    charged_currency: ChargedCurrency = Depends(get_charged_currency),
):
    return _response(
        charged_currency.get_order_amount_currency(
            request.order.to_entity(),
            order_placement=request.order_placement,
        )
    )


@router.post(
    "/quote",
    response_model=APIResponse[AmountCurrencyResponse],
    summary="Monto total de un quote",
)
async def quote_amount(
    request: QuoteSnapshot,
    charged_currency: ChargedCurrency = Depends(get_charged_currency),
):
    return _response(charged_currency.get_quote_amount_currency(request.to_entity()))


@router.post(
    "/quote-item",
    response_model=APIResponse[AmountCurrencyResponse],
    summary="Monto unitario de una línea de quote",
)
async def quote_item_amount(
    request: QuoteItemSnapshot,
    charged_currency: ChargedCurrency = Depends(get_charged_currency),
):
    return _response(charged_currency.get_quote_item_amount_currency(request.to_entity()))


@router.post(
    "/quote-shipping",
    response_model=APIResponse[AmountCurrencyResponse],
    summary="Monto de envío de un quote",
    description="""
    Lectura sin persistencia: los campos de compensación se toman tal como
    vienen en el snapshot. Para quotes guardados usar
    `POST /api/quotes/{quote_id}/shipping-amount`.
    """,
)
async def quote_shipping_amount(
    request: QuoteSnapshot,
    charged_currency: ChargedCurrency = Depends(get_charged_currency),
):
    return _response(charged_currency.get_quote_shipping_amount_currency(request.to_entity()))


@router.post(
    "/invoice",
    response_model=APIResponse[AmountCurrencyResponse],
    summary="Monto total de una factura",
)
async def invoice_amount(
    request: InvoiceSnapshot,
    charged_currency: ChargedCurrency = Depends(get_charged_currency),
):
    return _response(charged_currency.get_invoice_amount_currency(request.to_entity()))


@router.post(
    "/invoice-item",
    response_model=APIResponse[AmountCurrencyResponse],
    summary="Monto unitario de una línea de factura",
)
async def invoice_item_amount(
    request: InvoiceItemSnapshot,
    charged_currency: ChargedCurrency = Depends(get_charged_currency),
):
    return _response(charged_currency.get_invoice_item_amount_currency(request.to_entity()))


@router.post(
    "/invoice-shipping",
    response_model=APIResponse[AmountCurrencyResponse],
    summary="Monto de envío de una factura",
)
async def invoice_shipping_amount(
    request: InvoiceSnapshot,
    charged_currency: ChargedCurrency = Depends(get_charged_currency),
):
    return _response(charged_currency.get_invoice_shipping_amount_currency(request.to_entity()))


@router.post(
    "/credit-memo",
    response_model=APIResponse[AmountCurrencyResponse],
    summary="Monto total de una nota de crédito",
)
async def credit_memo_amount(
    request: CreditMemoSnapshot,
    charged_currency: ChargedCurrency = Depends(get_charged_currency),
):
    return _response(charged_currency.get_credit_memo_amount_currency(request.to_entity()))


@router.post(
    "/credit-memo-adjustment",
    response_model=APIResponse[AmountCurrencyResponse],
    summary="Ajuste de una nota de crédito",
)
async def credit_memo_adjustment_amount(
    request: CreditMemoSnapshot,
    charged_currency: ChargedCurrency = Depends(get_charged_currency),
):
    return _response(
        charged_currency.get_credit_memo_adjustment_amount_currency(request.to_entity())
    )


@router.post(
    "/credit-memo-shipping",
    response_model=APIResponse[AmountCurrencyResponse],
    summary="Monto de envío de una nota de crédito",
)
async def credit_memo_shipping_amount(
    request: CreditMemoSnapshot,
    charged_currency: ChargedCurrency = Depends(get_charged_currency),
):
    return _response(
        charged_currency.get_credit_memo_shipping_amount_currency(request.to_entity())
    )


@router.post(
    "/credit-memo-item",
    response_model=APIResponse[AmountCurrencyResponse],
    summary="Monto unitario de una línea de nota de crédito",
)
async def credit_memo_item_amount(
    request: CreditMemoItemSnapshot,
    charged_currency: ChargedCurrency = Depends(get_charged_currency),
):
    return _response(charged_currency.get_credit_memo_item_amount_currency(request.to_entity()))
