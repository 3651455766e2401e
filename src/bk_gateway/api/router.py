"""Auth API router: register, login, refresh."""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.bk_common.database import get_db_session
from src.bk_common.response import ApiResponse, success_response
from src.bk_gateway.merchant.db_models import MerchantModel
from src.bk_gateway.merchant.schemas import (
    LoginRequest,
    LoginResponse,
    MerchantInfo,
    RefreshRequest,
    RefreshResponse,
    RegisterRequest,
    RegisterResponse,
)
from src.bk_gateway.merchant.service import MerchantService

router = APIRouter(prefix="/auth", tags=["auth"])
_service = MerchantService()


def _get_request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "req_unknown")


def _merchant_info(merchant: MerchantModel) -> MerchantInfo:
    return MerchantInfo(
        merchant_id=str(merchant.id),
        phone=merchant.phone,
        business_name=merchant.business_name,
        email=merchant.email,
    )


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
    summary="Merchant registration",
)
async def register(
    request: Request,
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    async with db.begin():
        merchant, trial = await _service.register(
            db,
            phone=body.phone,
            password=body.password,
            business_name=body.business_name,
            business_type=body.business_type,
            email=str(body.email) if body.email else None,
        )
    await db.refresh(merchant)

    data = RegisterResponse(
        merchant=_merchant_info(merchant),
        trial_end=trial.trial_end.isoformat(),
        created_at=merchant.created_at.isoformat(),
    )
    resp = success_response(data.model_dump(), message="Merchant registered successfully")
    resp.request_id = _get_request_id(request)
    return resp


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Merchant login",
)
async def login(
    request: Request,
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    merchant, access_token, refresh_token = await _service.login(db, body.phone, body.password)

    data = LoginResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=settings.JWT_EXPIRE_MINUTES * 60,
        merchant=_merchant_info(merchant),
    )
    resp = success_response(data.model_dump(), message="Login successful")
    resp.request_id = _get_request_id(request)
    return resp


@router.post(
    "/refresh",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Refresh access token",
)
async def refresh_token(request: Request, body: RefreshRequest) -> ApiResponse:
    new_access_token = await _service.refresh(body.refresh_token)

    data = RefreshResponse(
        access_token=new_access_token,
        expires_in=settings.JWT_EXPIRE_MINUTES * 60,
    )
    resp = success_response(data.model_dump(), message="Token refreshed")
    resp.request_id = _get_request_id(request)
    return resp
