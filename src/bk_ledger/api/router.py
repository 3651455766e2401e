"""bk_ledger REST API: clients, payments, sales, expenses.

Every endpoint requires a valid access token and, when subscriptions are
enforced, an active trial or paid period (``require_access``).
"""

import uuid
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.bk_common.database import get_db_session
from src.bk_common.enums import PaymentMode
from src.bk_common.response import ApiResponse, success_response
from src.bk_entitlement.api.dependencies import require_access
from src.bk_gateway.merchant.db_models import MerchantModel
from src.bk_ledger.application.schemas import (
    CreateClientRequest,
    CreateExpenseRequest,
    CreateSaleRequest,
    RecordPaymentRequest,
)
from src.bk_ledger.application.service import LedgerApplicationService

router = APIRouter(tags=["ledger"])

_service = LedgerApplicationService()

CurrentMerchant = Annotated[MerchantModel, Depends(require_access)]
DbSession = Annotated[AsyncSession, Depends(get_db_session)]


def _with_request_id(resp: ApiResponse, request: Request) -> ApiResponse:
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------


@router.post("/clients", status_code=status.HTTP_201_CREATED)
async def create_client(
    body: CreateClientRequest,
    current_merchant: CurrentMerchant,
    db: DbSession,
    request: Request,
) -> ApiResponse:
    data = await _service.create_client(
        db, str(current_merchant.id), body.name, body.phone, body.address
    )
    return _with_request_id(success_response(data.model_dump(), message="Client created"), request)


@router.get("/clients")
async def list_clients(
    current_merchant: CurrentMerchant,
    db: DbSession,
    request: Request,
    with_credit: bool = Query(False, description="Only clients who owe money"),
) -> ApiResponse:
    data = await _service.list_clients(db, str(current_merchant.id), with_credit)
    return _with_request_id(success_response(data.model_dump()), request)


@router.post("/clients/payments", status_code=status.HTTP_201_CREATED)
async def record_payment(
    body: RecordPaymentRequest,
    current_merchant: CurrentMerchant,
    db: DbSession,
    request: Request,
) -> ApiResponse:
    data = await _service.record_payment(
        db, str(current_merchant.id), str(body.client_id), body.amount, body.notes
    )
    return _with_request_id(
        success_response(data.model_dump(), message="Payment recorded"), request
    )


@router.get("/clients/{client_id}")
async def get_client(
    client_id: uuid.UUID,
    current_merchant: CurrentMerchant,
    db: DbSession,
    request: Request,
) -> ApiResponse:
    data = await _service.get_client(db, str(current_merchant.id), str(client_id))
    return _with_request_id(success_response(data.model_dump()), request)


@router.delete("/clients/{client_id}")
async def delete_client(
    client_id: uuid.UUID,
    current_merchant: CurrentMerchant,
    db: DbSession,
    request: Request,
) -> ApiResponse:
    await _service.delete_client(db, str(current_merchant.id), str(client_id))
    return _with_request_id(
        success_response({"client_id": str(client_id)}, message="Client deleted"), request
    )


@router.get("/clients/{client_id}/audit")
async def audit_client(
    client_id: uuid.UUID,
    current_merchant: CurrentMerchant,
    db: DbSession,
    request: Request,
) -> ApiResponse:
    data = await _service.audit_client_balance(db, str(current_merchant.id), str(client_id))
    return _with_request_id(success_response(data.model_dump()), request)


# ---------------------------------------------------------------------------
# Sales
# ---------------------------------------------------------------------------


@router.post("/sales", status_code=status.HTTP_201_CREATED)
async def create_sale(
    body: CreateSaleRequest,
    current_merchant: CurrentMerchant,
    db: DbSession,
    request: Request,
) -> ApiResponse:
    data = await _service.create_sale(db, str(current_merchant.id), body)
    return _with_request_id(success_response(data.model_dump(), message="Sale recorded"), request)


@router.get("/sales")
async def list_sales(
    current_merchant: CurrentMerchant,
    db: DbSession,
    request: Request,
    date_from: datetime | None = Query(None),
    date_to: datetime | None = Query(None),
    payment_mode: PaymentMode | None = Query(None),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=500),
) -> ApiResponse:
    data = await _service.list_sales(
        db,
        str(current_merchant.id),
        date_from,
        date_to,
        payment_mode.value if payment_mode else None,
        limit,
    )
    return _with_request_id(success_response(data.model_dump()), request)


@router.get("/sales/{sale_id}")
async def get_sale(
    sale_id: uuid.UUID,
    current_merchant: CurrentMerchant,
    db: DbSession,
    request: Request,
) -> ApiResponse:
    data = await _service.get_sale(db, str(current_merchant.id), str(sale_id))
    return _with_request_id(success_response(data.model_dump()), request)


@router.delete("/sales/{sale_id}")
async def delete_sale(
    sale_id: uuid.UUID,
    current_merchant: CurrentMerchant,
    db: DbSession,
    request: Request,
) -> ApiResponse:
    data = await _service.reverse_sale(db, str(current_merchant.id), str(sale_id))
    return _with_request_id(success_response(data.model_dump(), message="Sale deleted"), request)


# ---------------------------------------------------------------------------
# Expenses
# ---------------------------------------------------------------------------


@router.post("/expenses", status_code=status.HTTP_201_CREATED)
async def create_expense(
    body: CreateExpenseRequest,
    current_merchant: CurrentMerchant,
    db: DbSession,
    request: Request,
) -> ApiResponse:
    data = await _service.record_expense(
        db, str(current_merchant.id), body.amount, body.reason, body.category, body.spent_at
    )
    return _with_request_id(
        success_response(data.model_dump(), message="Expense recorded"), request
    )


@router.get("/expenses")
async def list_expenses(
    current_merchant: CurrentMerchant,
    db: DbSession,
    request: Request,
    date_from: datetime | None = Query(None),
    date_to: datetime | None = Query(None),
    category: str | None = Query(None, max_length=100),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=500),
) -> ApiResponse:
    data = await _service.list_expenses(
        db, str(current_merchant.id), date_from, date_to, category, limit
    )
    return _with_request_id(success_response(data.model_dump()), request)


@router.get("/expenses/{expense_id}")
async def get_expense(
    expense_id: uuid.UUID,
    current_merchant: CurrentMerchant,
    db: DbSession,
    request: Request,
) -> ApiResponse:
    data = await _service.get_expense(db, str(current_merchant.id), str(expense_id))
    return _with_request_id(success_response(data.model_dump()), request)


@router.delete("/expenses/{expense_id}")
async def delete_expense(
    expense_id: uuid.UUID,
    current_merchant: CurrentMerchant,
    db: DbSession,
    request: Request,
) -> ApiResponse:
    await _service.delete_expense(db, str(current_merchant.id), str(expense_id))
    return _with_request_id(
        success_response({"expense_id": str(expense_id)}, message="Expense deleted"), request
    )
