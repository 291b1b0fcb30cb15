"""
Endpoints de órdenes: monto cobrado y donaciones.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters import get_capture_command
from app.db.database import get_db
from app.schemas import (
    AmountCurrencyResponse,
    APIResponse,
    DonationRequest,
    DonationResponse,
)
from app.services import DonationService, OrderService
from app.utils.exceptions import (
    DonationFailedError,
    DonationInProgressError,
    OrderNotFoundError,
)
from app.utils.locks import get_donation_lock_manager_with_fallback


logger = structlog.get_logger(__name__)

router = APIRouter()


async def get_order_service(
    db: AsyncSession = Depends(get_db),
) -> OrderService:
    """Dependency para obtener OrderService."""
    return OrderService(db)


async def get_donation_service(
    db: AsyncSession = Depends(get_db),
) -> DonationService:
    """Dependency para obtener DonationService."""
    return DonationService(
        db,
        capture_command=get_capture_command(),
        lock_manager=await get_donation_lock_manager_with_fallback(),
    )


@router.get(
    "/{order_id}/amount",
    response_model=APIResponse[AmountCurrencyResponse],
    summary="Monto cobrado de una orden",
)
async def get_order_amount(
    order_id: int,
    order_placement: bool = Query(
        False,
        description="True para usar la configuración actual de la tienda",
    ),
    service: OrderService = Depends(get_order_service),
):
    try:
        amount_currency = await service.get_amount_currency(order_id, order_placement)
    except OrderNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Order not found: {order_id}",
        )

    return APIResponse(
        success=True,
        data=AmountCurrencyResponse.from_amount_currency(amount_currency),
    )


@router.post(
    "/{order_id}/donations",
    response_model=APIResponse[DonationResponse],
    summary="Donar después de la compra",
    description="""
    Valida la donación contra la orden (token, moneda y monto permitido)
    y la captura con el proveedor.

    - Cualquier fallo retorna el mismo mensaje `Donation failed!`
    - Tras 5 capturas fallidas el token de donación se invalida
    """,
)
async def donate(
    order_id: int,
    request: DonationRequest,
    service: DonationService = Depends(get_donation_service),
):
    try:
        result = await service.donate(order_id, request.to_payload())
    except OrderNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Order not found: {order_id}",
        )
    except DonationInProgressError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=e.message,
        )
    except DonationFailedError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )

    return APIResponse(
        success=True,
        message="Donation completed",
        data=DonationResponse(order_id=order_id, psp_reference=result.psp_reference),
    )
