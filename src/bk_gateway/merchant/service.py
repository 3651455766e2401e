"""Merchant service: register, login, refresh.

register() runs inside the caller's transaction (``async with db.begin()`` in
the router) so the merchant row and its trial subscription commit together.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.errors import (
    AccountDisabledError,
    EmailExistsError,
    InvalidCredentialsError,
    PhoneExistsError,
)
from src.bk_entitlement.application.service import EntitlementApplicationService
from src.bk_entitlement.domain.models import Subscription
from src.bk_gateway.auth.jwt_handler import (
    create_access_token,
    create_refresh_token,
    decode_token,
)
from src.bk_gateway.auth.password import hash_password, verify_password
from src.bk_gateway.merchant.db_models import MerchantModel

logger = logging.getLogger(__name__)


class MerchantService:
    def __init__(self, entitlements: EntitlementApplicationService | None = None) -> None:
        self._entitlements = entitlements or EntitlementApplicationService()

    async def register(
        self,
        db: AsyncSession,
        phone: str,
        password: str,
        business_name: str,
        business_type: str | None = None,
        email: str | None = None,
    ) -> tuple[MerchantModel, Subscription]:
        """Create the merchant account and start its free trial."""
        result = await db.execute(select(MerchantModel).where(MerchantModel.phone == phone))
        if result.scalar_one_or_none() is not None:
            raise PhoneExistsError()

        if email is not None:
            result = await db.execute(select(MerchantModel).where(MerchantModel.email == email))
            if result.scalar_one_or_none() is not None:
                raise EmailExistsError()

        merchant = MerchantModel(
            phone=phone,
            email=email,
            password_hash=hash_password(password),
            business_name=business_name,
            business_type=business_type,
            is_active=True,
        )
        db.add(merchant)
        await db.flush()  # assigns merchant.id

        trial = await self._entitlements.init_trial(db, str(merchant.id))
        logger.info("Merchant registered: id=%s business=%s", merchant.id, business_name)
        return merchant, trial

    async def login(
        self, db: AsyncSession, phone: str, password: str
    ) -> tuple[MerchantModel, str, str]:
        """Authenticate and return (merchant, access_token, refresh_token).

        Unknown phone and wrong password raise the same error.
        """
        result = await db.execute(select(MerchantModel).where(MerchantModel.phone == phone))
        merchant = result.scalar_one_or_none()

        if merchant is None or not verify_password(password, merchant.password_hash):
            raise InvalidCredentialsError()

        if not merchant.is_active:
            raise AccountDisabledError()

        return (
            merchant,
            create_access_token(str(merchant.id)),
            create_refresh_token(str(merchant.id)),
        )

    async def refresh(self, refresh_token: str) -> str:
        payload = decode_token(refresh_token, expected_type="refresh")
        return create_access_token(str(payload["sub"]))
