"""SubscriptionRepository: concrete implementation of SubscriptionRepositoryProtocol.

One row per merchant (UNIQUE account_id). State changes are single UPDATE
statements guarded on the current status, so concurrent lazy-expiry writes
converge on the same row state.
"""

from datetime import datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_entitlement.domain.models import Subscription

_COLUMNS = """
    id, account_id, status, trial_start, trial_end, period_start, period_end,
    plan, amount, payment_method, transaction_ref,
    last_payment_date, last_payment_amount, created_at, updated_at
"""

_GET_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM subscriptions
    WHERE account_id = :account_id
""")

_INSERT_TRIAL_SQL = text(f"""
    INSERT INTO subscriptions (account_id, status, trial_start, trial_end)
    VALUES (:account_id, 'trial', :trial_start, :trial_end)
    ON CONFLICT (account_id) DO NOTHING
    RETURNING {_COLUMNS}
""")

_MARK_EXPIRED_SQL = text(f"""
    UPDATE subscriptions
    SET status = 'expired',
        updated_at = NOW()
    WHERE account_id = :account_id AND status = :from_status
    RETURNING {_COLUMNS}
""")

# cancelled is terminal: activation never resurrects it.
_ACTIVATE_SQL = text(f"""
    UPDATE subscriptions
    SET status = 'active',
        plan = :plan,
        amount = :amount,
        period_start = :period_start,
        period_end = :period_end,
        payment_method = :payment_method,
        transaction_ref = :transaction_ref,
        last_payment_date = :period_start,
        last_payment_amount = :amount,
        updated_at = NOW()
    WHERE account_id = :account_id AND status <> 'cancelled'
    RETURNING {_COLUMNS}
""")

_CANCEL_SQL = text(f"""
    UPDATE subscriptions
    SET status = 'cancelled',
        updated_at = NOW()
    WHERE account_id = :account_id
    RETURNING {_COLUMNS}
""")


def _row_to_subscription(row: object) -> Subscription:
    return Subscription(
        id=str(row.id),  # type: ignore[attr-defined]
        account_id=str(row.account_id),  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        trial_start=row.trial_start,  # type: ignore[attr-defined]
        trial_end=row.trial_end,  # type: ignore[attr-defined]
        period_start=row.period_start,  # type: ignore[attr-defined]
        period_end=row.period_end,  # type: ignore[attr-defined]
        plan=row.plan,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        payment_method=row.payment_method,  # type: ignore[attr-defined]
        transaction_ref=row.transaction_ref,  # type: ignore[attr-defined]
        last_payment_date=row.last_payment_date,  # type: ignore[attr-defined]
        last_payment_amount=row.last_payment_amount,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


class SubscriptionRepository:
    async def get_by_account(
        self, db: AsyncSession, account_id: str
    ) -> Subscription | None:
        result = await db.execute(_GET_SQL, {"account_id": account_id})
        row = result.fetchone()
        return _row_to_subscription(row) if row else None

    async def insert_trial(
        self,
        db: AsyncSession,
        account_id: str,
        trial_start: datetime,
        trial_end: datetime,
    ) -> Subscription | None:
        """Returns None when the account already has a subscription."""
        result = await db.execute(
            _INSERT_TRIAL_SQL,
            {"account_id": account_id, "trial_start": trial_start, "trial_end": trial_end},
        )
        row = result.fetchone()
        return _row_to_subscription(row) if row else None

    async def mark_expired(
        self, db: AsyncSession, account_id: str, from_status: str
    ) -> Subscription | None:
        """Returns None when another writer already moved the row off ``from_status``."""
        result = await db.execute(
            _MARK_EXPIRED_SQL, {"account_id": account_id, "from_status": from_status}
        )
        row = result.fetchone()
        return _row_to_subscription(row) if row else None

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
    ) -> Subscription | None:
        result = await db.execute(
            _ACTIVATE_SQL,
            {
                "account_id": account_id,
                "plan": plan,
                "amount": amount,
                "period_start": period_start,
                "period_end": period_end,
                "payment_method": payment_method,
                "transaction_ref": transaction_ref,
            },
        )
        row = result.fetchone()
        return _row_to_subscription(row) if row else None

    async def cancel(
        self, db: AsyncSession, account_id: str
    ) -> Subscription | None:
        result = await db.execute(_CANCEL_SQL, {"account_id": account_id})
        row = result.fetchone()
        return _row_to_subscription(row) if row else None
