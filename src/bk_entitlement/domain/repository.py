"""Repository Protocol for subscriptions."""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_entitlement.domain.models import Subscription


class SubscriptionRepositoryProtocol(Protocol):
    async def get_by_account(
        self, db: AsyncSession, account_id: str
    ) -> Subscription | None: ...

    async def insert_trial(
        self,
        db: AsyncSession,
        account_id: str,
        trial_start: datetime,
        trial_end: datetime,
    ) -> Subscription | None: ...

    async def mark_expired(
        self, db: AsyncSession, account_id: str, from_status: str
    ) -> Subscription | None: ...

    async def activate(
        self,
        db: AsyncSession,
        account_id: str,
        plan: str,
        amount: int,
        period_start: datetime,
        period_end: datetime,
        payment_method: str,
        transaction_ref: str,
    ) -> Subscription | None: ...

    async def cancel(
        self, db: AsyncSession, account_id: str
    ) -> Subscription | None: ...
