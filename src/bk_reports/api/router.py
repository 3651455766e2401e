"""Statistics API: day, month, outstanding credits, dashboard summary."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.database import get_db_session
from src.bk_common.response import ApiResponse, success_response
from src.bk_entitlement.api.dependencies import require_access
from src.bk_gateway.merchant.db_models import MerchantModel
from src.bk_reports.application.service import ReportsApplicationService

router = APIRouter(prefix="/stats", tags=["stats"])

_service = ReportsApplicationService()

CurrentMerchant = Annotated[MerchantModel, Depends(require_access)]
DbSession = Annotated[AsyncSession, Depends(get_db_session)]


def _with_request_id(resp: ApiResponse, request: Request) -> ApiResponse:
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/day")
async def daily_stats(
    current_merchant: CurrentMerchant,
    db: DbSession,
    request: Request,
    day: date | None = Query(None, alias="date", description="YYYY-MM-DD, default today"),
) -> ApiResponse:
    data = await _service.daily(db, str(current_merchant.id), day)
    return _with_request_id(success_response(data.model_dump()), request)


@router.get("/month")
async def monthly_stats(
    current_merchant: CurrentMerchant,
    db: DbSession,
    request: Request,
    year: int | None = Query(None, ge=2000, le=2100),
    month: int | None = Query(None, ge=1, le=12),
) -> ApiResponse:
    data = await _service.monthly(db, str(current_merchant.id), year, month)
    return _with_request_id(success_response(data.model_dump()), request)


@router.get("/credits")
async def credit_stats(
    current_merchant: CurrentMerchant,
    db: DbSession,
    request: Request,
) -> ApiResponse:
    data = await _service.credits(db, str(current_merchant.id))
    return _with_request_id(success_response(data.model_dump()), request)


@router.get("/summary")
async def summary_stats(
    current_merchant: CurrentMerchant,
    db: DbSession,
    request: Request,
) -> ApiResponse:
    data = await _service.summary(db, str(current_merchant.id))
    return _with_request_id(success_response(data.model_dump()), request)
