"""FastAPI dependency: get_current_merchant.

Usage in any protected router:
    from src.bk_gateway.auth.dependencies import get_current_merchant

    @router.get("/protected")
    async def protected(merchant: MerchantModel = Depends(get_current_merchant)):
        ...
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.database import get_db_session
from src.bk_common.errors import AccountDisabledError, InvalidCredentialsError
from src.bk_gateway.auth.jwt_handler import decode_token
from src.bk_gateway.merchant.db_models import MerchantModel

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_merchant(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> MerchantModel:
    """Resolve the Bearer token to an active merchant.

    Raises HTTP 401 when the token is missing, invalid or expired, and
    AccountDisabledError (403) when the merchant is disabled.
    """
    try:
        payload = decode_token(token, expected_type="access")
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    merchant_id: str | None = payload.get("sub")
    if not merchant_id:
        raise _CREDENTIALS_EXCEPTION

    result = await db.execute(select(MerchantModel).where(MerchantModel.id == merchant_id))
    merchant = result.scalar_one_or_none()
    if merchant is None:
        raise _CREDENTIALS_EXCEPTION

    if not merchant.is_active:
        raise AccountDisabledError()

    return merchant
