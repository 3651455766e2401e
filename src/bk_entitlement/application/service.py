"""EntitlementApplicationService: trial, activation and access decisions.

``now`` is injectable on every time-dependent operation so callers and tests
control the clock; it defaults to the current UTC time.
"""

import logging
import secrets
import string
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.bk_common.datetime_utils import utc_now
from src.bk_common.enums import PaymentMethod
from src.bk_common.errors import (
    NoPriorPlanError,
    SubscriptionCancelledError,
    SubscriptionExistsError,
    SubscriptionNotFoundError,
)
from src.bk_entitlement.application.schemas import (
    AccessResponse,
    ActivationResponse,
    PlanOut,
    PlansResponse,
    SavingsOut,
    SubscriptionInfoResponse,
    SubscriptionOut,
    WebhookPayload,
)
from src.bk_entitlement.domain import state_machine
from src.bk_entitlement.domain.models import AccessDecision, Subscription
from src.bk_entitlement.domain.repository import SubscriptionRepositoryProtocol
from src.bk_entitlement.infrastructure.persistence import SubscriptionRepository

logger = logging.getLogger(__name__)

_REF_ALPHABET = string.ascii_lowercase + string.digits


def generate_transaction_ref(prefix: str = "TXN", now: datetime | None = None) -> str:
    """Reference for a simulated payment: TXN_<epoch ms>_<9 base36 chars>."""
    ts = now or utc_now()
    suffix = "".join(secrets.choice(_REF_ALPHABET) for _ in range(9))
    return f"{prefix}_{int(ts.timestamp() * 1000)}_{suffix}"


class EntitlementApplicationService:
    def __init__(
        self,
        repo: SubscriptionRepositoryProtocol | None = None,
        trial_hours: int | None = None,
    ) -> None:
        self._repo: SubscriptionRepositoryProtocol = repo or SubscriptionRepository()
        self._trial_hours = trial_hours if trial_hours is not None else settings.TRIAL_HOURS

    async def init_trial(
        self, db: AsyncSession, account_id: str, now: datetime | None = None
    ) -> Subscription:
        """Start the free trial of a new account.

        Runs inside the caller's transaction (merchant registration) and does
        not commit.
        """
        now = now or utc_now()
        trial_end = now + timedelta(hours=self._trial_hours)
        sub = await self._repo.insert_trial(db, account_id, now, trial_end)
        if sub is None:
            raise SubscriptionExistsError(account_id)
        logger.info("Trial started for account %s, ends %s", account_id, trial_end.isoformat())
        return sub

    async def _evaluate(
        self, db: AsyncSession, account_id: str, now: datetime
    ) -> tuple[Subscription | None, AccessDecision]:
        current = await self._repo.get_by_account(db, account_id)
        sub, decision, transitioned = state_machine.evaluate_access(current, now)
        if transitioned and current is not None:
            try:
                # Guarded on the status we evaluated; a concurrent writer makes this a no-op.
                await self._repo.mark_expired(db, account_id, current.status)
                await db.commit()
            except Exception:
                await db.rollback()
                raise
            logger.info(
                "Subscription of account %s expired (%s -> expired, reason=%s)",
                account_id, current.status, decision.reason,
            )
        return sub, decision

    async def decide(
        self, db: AsyncSession, account_id: str, now: datetime | None = None
    ) -> AccessDecision:
        _, decision = await self._evaluate(db, account_id, now or utc_now())
        return decision

    async def check_access(
        self, db: AsyncSession, account_id: str, now: datetime | None = None
    ) -> AccessResponse:
        return AccessResponse.from_decision(await self.decide(db, account_id, now))

    async def activate(
        self,
        db: AsyncSession,
        account_id: str,
        plan_id: str,
        transaction_ref: str,
        payment_method: str,
        now: datetime | None = None,
    ) -> ActivationResponse:
        """Start a paid period of ``plan_id`` at ``now``, replacing any current period."""
        plan = state_machine.get_plan(plan_id)
        now = now or utc_now()
        period_start, period_end = state_machine.activation_window(plan, now)
        try:
            sub = await self._repo.activate(
                db,
                account_id,
                plan.id,
                plan.amount,
                period_start,
                period_end,
                payment_method,
                transaction_ref,
            )
            if sub is None:
                existing = await self._repo.get_by_account(db, account_id)
                if existing is None:
                    raise SubscriptionNotFoundError(account_id)
                raise SubscriptionCancelledError(account_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Subscription activated for account %s: %s until %s (txn=%s, method=%s)",
            account_id,
            state_machine.describe_plan(plan),
            period_end.isoformat(),
            transaction_ref,
            payment_method,
        )
        return ActivationResponse(
            subscription=SubscriptionOut.from_domain(sub),
            transaction_ref=transaction_ref,
        )

    async def renew(
        self,
        db: AsyncSession,
        account_id: str,
        transaction_ref: str,
        payment_method: str,
        now: datetime | None = None,
    ) -> ActivationResponse:
        sub = await self._repo.get_by_account(db, account_id)
        if sub is None or not sub.plan:
            raise NoPriorPlanError()
        return await self.activate(db, account_id, sub.plan, transaction_ref, payment_method, now)

    async def cancel(self, db: AsyncSession, account_id: str) -> SubscriptionOut:
        try:
            sub = await self._repo.cancel(db, account_id)
            if sub is None:
                raise SubscriptionNotFoundError(account_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Subscription cancelled for account %s", account_id)
        return SubscriptionOut.from_domain(sub)

    async def get_info(
        self, db: AsyncSession, account_id: str, now: datetime | None = None
    ) -> SubscriptionInfoResponse:
        sub, decision = await self._evaluate(db, account_id, now or utc_now())
        if sub is None:
            raise SubscriptionNotFoundError(account_id)
        return SubscriptionInfoResponse(
            subscription=SubscriptionOut.from_domain(sub),
            access=AccessResponse.from_decision(decision),
            available_plans=[PlanOut.from_domain(p) for p in state_machine.list_plans()],
        )

    async def handle_payment_webhook(
        self, db: AsyncSession, payload: WebhookPayload, now: datetime | None = None
    ) -> bool:
        """Apply a provider notification. Returns True when it activated a plan."""
        if payload.status != "success":
            logger.info(
                "Webhook %s ignored: status=%s", payload.transaction_id, payload.status
            )
            return False
        await self.activate(
            db,
            str(payload.account_id),
            payload.plan,
            payload.transaction_id,
            PaymentMethod.MOBILE_MONEY.value,
            now,
        )
        return True

    @staticmethod
    def list_plans() -> PlansResponse:
        return PlansResponse(
            plans=[PlanOut.from_domain(p) for p in state_machine.list_plans()],
            savings={
                plan_id: SavingsOut.from_domain(s)
                for plan_id, s in state_machine.compute_savings().items()
            },
        )


