"""
Endpoints de administración de la cuenta en el proveedor de pago.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.database import get_db
from app.schemas import (
    AllowedOriginCreateRequest,
    AllowedOriginsQuery,
    AllowedOriginsResponse,
    APIResponse,
    MerchantAccountsRequest,
    MerchantAccountsResponse,
    WebhookSetupRequest,
    WebhookSetupResponse,
    WebhookTestRequest,
    WebhookTestResult,
)
from app.services import ManagementService
from app.utils.exceptions import ManagementApiError


logger = structlog.get_logger(__name__)

router = APIRouter()


async def get_management_service(
    db: AsyncSession = Depends(get_db),
) -> ManagementService:
    """Dependency para obtener ManagementService."""
    return ManagementService(db)


def _bad_gateway(e: ManagementApiError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=f"Management API error: {e.message}",
    )


@router.post(
    "/merchant-accounts",
    response_model=APIResponse[MerchantAccountsResponse],
    summary="Client key y merchant accounts de una API key",
)
async def fetch_merchant_accounts(
    request: MerchantAccountsRequest,
    service: ManagementService = Depends(get_management_service),
):
    try:
        result = await service.fetch_merchant_accounts_and_client_key(
            request.api_key,
            request.demo_mode,
        )
    except ManagementApiError as e:
        raise _bad_gateway(e)

    return APIResponse(success=True, data=result)


@router.post(
    "/webhook",
    response_model=APIResponse[WebhookSetupResponse],
    summary="Crear o actualizar el webhook del merchant",
    description="""
    Crea el webhook estándar (o actualiza el ya configurado), genera su
    HMAC key y guarda ambos en la configuración.
    """,
)
async def configure_webhook(
    request: WebhookSetupRequest,
    service: ManagementService = Depends(get_management_service),
):
    try:
        result = await service.configure_webhook(
            api_key=request.api_key,
            merchant_id=request.merchant_id,
            username=request.username,
            password=request.password,
            url=request.url,
            demo_mode=request.demo_mode,
            store_id=request.store_id,
        )
    except ManagementApiError as e:
        raise _bad_gateway(e)

    return APIResponse(
        success=True,
        message="Webhook configured successfully",
        data=result,
    )


@router.post(
    "/webhook/test",
    response_model=APIResponse[WebhookTestResult],
    summary="Enviar una notificación de prueba",
)
async def test_webhook(
    request: WebhookTestRequest,
    service: ManagementService = Depends(get_management_service),
):
    result = await service.test_webhook(request.merchant_id, request.store_id)
    return APIResponse(
        success=result.success,
        message=result.error,
        data=result,
    )


@router.get(
    "/allowed-origins",
    response_model=APIResponse[AllowedOriginsResponse],
    summary="Listar orígenes permitidos",
)
async def list_allowed_origins(
    query: AllowedOriginsQuery = Depends(),
    service: ManagementService = Depends(get_management_service),
):
    try:
        result = await service.list_allowed_origins(query.api_key, query.mode)
    except ManagementApiError as e:
        raise _bad_gateway(e)

    return APIResponse(success=True, data=result)


@router.post(
    "/allowed-origins",
    response_model=APIResponse[None],
    status_code=status.HTTP_201_CREATED,
    summary="Agregar un origen permitido",
)
async def add_allowed_origin(
    request: AllowedOriginCreateRequest,
    service: ManagementService = Depends(get_management_service),
):
    try:
        await service.add_allowed_origin(request.api_key, request.mode, request.domain)
    except ManagementApiError as e:
        raise _bad_gateway(e)

    return APIResponse(success=True, message=f"Allowed origin added: {request.domain}")
