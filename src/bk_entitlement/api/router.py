"""Subscription REST API.

``/activate`` and ``/renew`` stand in for the mobile-money checkout: the payment
is treated as successful and a local transaction reference is generated. Real
provider confirmations arrive through ``/webhook``.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.database import get_db_session
from src.bk_common.response import ApiResponse, success_response
from src.bk_entitlement.application.schemas import ActivateRequest, RenewRequest, WebhookPayload
from src.bk_entitlement.application.service import (
    EntitlementApplicationService,
    generate_transaction_ref,
)
from src.bk_gateway.auth.dependencies import get_current_merchant
from src.bk_gateway.merchant.db_models import MerchantModel

router = APIRouter(prefix="/subscription", tags=["subscription"])

_service = EntitlementApplicationService()


def _with_request_id(resp: ApiResponse, request: Request) -> ApiResponse:
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/check")
async def check_access(
    current_merchant: Annotated[MerchantModel, Depends(get_current_merchant)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.check_access(db, str(current_merchant.id))
    return _with_request_id(success_response(data.model_dump()), request)


@router.get("/info")
async def get_info(
    current_merchant: Annotated[MerchantModel, Depends(get_current_merchant)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_info(db, str(current_merchant.id))
    return _with_request_id(success_response(data.model_dump()), request)


@router.get("/plans")
async def list_plans(request: Request) -> ApiResponse:
    data = _service.list_plans()
    return _with_request_id(success_response(data.model_dump()), request)


@router.post("/activate")
async def activate(
    body: ActivateRequest,
    current_merchant: Annotated[MerchantModel, Depends(get_current_merchant)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.activate(
        db,
        str(current_merchant.id),
        body.plan,
        generate_transaction_ref("TXN"),
        body.payment_method.value,
    )
    return _with_request_id(
        success_response(data.model_dump(), message="Subscription activated"), request
    )


@router.post("/renew")
async def renew(
    body: RenewRequest,
    current_merchant: Annotated[MerchantModel, Depends(get_current_merchant)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.renew(
        db,
        str(current_merchant.id),
        generate_transaction_ref("TXN_RENEW"),
        body.payment_method.value,
    )
    return _with_request_id(
        success_response(data.model_dump(), message="Subscription renewed"), request
    )


@router.post("/cancel")
async def cancel(
    current_merchant: Annotated[MerchantModel, Depends(get_current_merchant)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.cancel(db, str(current_merchant.id))
    return _with_request_id(
        success_response(data.model_dump(), message="Subscription cancelled"), request
    )


@router.post("/webhook")
async def payment_webhook(
    body: WebhookPayload,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    activated = await _service.handle_payment_webhook(db, body)
    return _with_request_id(success_response({"activated": activated}), request)
