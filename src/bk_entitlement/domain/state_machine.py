"""Subscription state machine: pure functions, no I/O.

States: trial -> active -> expired -> active (renewal). Activating a trial or an
active subscription restarts the paid period. cancelled is terminal.

trial and active expire lazily: evaluating access at or after the stored
boundary yields the expired state, which the caller persists.
"""

import math
from dataclasses import replace
from datetime import datetime, timedelta

from src.bk_common.enums import AccessReason, SubscriptionStatus
from src.bk_common.errors import InvalidPlanError
from src.bk_common.money import francs_to_display
from src.bk_entitlement.domain.models import AccessDecision, Plan, PlanSavings, Subscription

_HOUR = timedelta(hours=1)
_DAY = timedelta(days=1)

PLANS: dict[str, Plan] = {
    "monthly": Plan(
        id="monthly", name="Mensuel", amount=2000, duration_days=30, months=1,
        description="1 month of access",
    ),
    "quarterly": Plan(
        id="quarterly", name="Trimestriel", amount=5000, duration_days=90, months=3,
        description="3 months of access",
    ),
    "semesterly": Plan(
        id="semesterly", name="Semestriel", amount=10000, duration_days=180, months=6,
        description="6 months of access",
    ),
    "yearly": Plan(
        id="yearly", name="Annuel", amount=20000, duration_days=365, months=12,
        description="1 year of access", popular=True,
    ),
}

BASE_PLAN_ID = "monthly"


def get_plan(plan_id: str) -> Plan:
    plan = PLANS.get(plan_id)
    if plan is None:
        raise InvalidPlanError(plan_id, list(PLANS))
    return plan


def list_plans() -> list[Plan]:
    return list(PLANS.values())


def compute_savings() -> dict[str, PlanSavings]:
    """Savings of every multi-month plan against paying the monthly rate."""
    monthly = PLANS[BASE_PLAN_ID].amount
    result: dict[str, PlanSavings] = {}
    for plan in PLANS.values():
        if plan.id == BASE_PLAN_ID:
            continue
        full_price = monthly * plan.months
        savings = full_price - plan.amount
        result[plan.id] = PlanSavings(
            plan=plan,
            monthly_equivalent=round(plan.amount / plan.months),
            savings=savings,
            savings_percent=round(savings / full_price * 100),
        )
    return result


def _ceil_units(delta: timedelta, unit: timedelta) -> int:
    return math.ceil(delta / unit)


def activation_window(plan: Plan, now: datetime) -> tuple[datetime, datetime]:
    """A paid period always starts at ``now``; remaining time is never carried over."""
    return now, now + timedelta(days=plan.duration_days)


def evaluate_access(
    sub: Subscription | None, now: datetime
) -> tuple[Subscription | None, AccessDecision, bool]:
    """Decide access at ``now``.

    Returns (subscription after evaluation, decision, transitioned). When
    ``transitioned`` is True the returned subscription moved to ``expired`` and
    the caller must persist that status. Re-evaluating the expired record gives
    the terminal ``expired`` answer with no further transition.
    """
    if sub is None:
        return None, AccessDecision(
            has_access=False,
            status=None,
            reason=AccessReason.NO_SUBSCRIPTION.value,
            message="No subscription found",
        ), False

    if sub.status == SubscriptionStatus.TRIAL:
        if now < sub.trial_end:
            hours_left = _ceil_units(sub.trial_end - now, _HOUR)
            return sub, AccessDecision(
                has_access=True,
                status=SubscriptionStatus.TRIAL.value,
                hours_left=hours_left,
                expires_at=sub.trial_end,
                message=f"Free trial - {hours_left}h left",
            ), False
        expired = replace(sub, status=SubscriptionStatus.EXPIRED.value)
        return expired, AccessDecision(
            has_access=False,
            status=SubscriptionStatus.EXPIRED.value,
            reason=AccessReason.TRIAL_EXPIRED.value,
            expires_at=sub.trial_end,
            message="The 72h free trial has ended. Please subscribe to a plan.",
        ), True

    if sub.status == SubscriptionStatus.ACTIVE:
        plan = PLANS.get(sub.plan or "")
        plan_name = plan.name if plan else None
        if sub.period_end is not None and now < sub.period_end:
            days_left = _ceil_units(sub.period_end - now, _DAY)
            return sub, AccessDecision(
                has_access=True,
                status=SubscriptionStatus.ACTIVE.value,
                days_left=days_left,
                plan=sub.plan,
                plan_name=plan_name,
                expires_at=sub.period_end,
                message=f"{plan_name} subscription active - {days_left} days left",
            ), False
        expired = replace(sub, status=SubscriptionStatus.EXPIRED.value)
        return expired, AccessDecision(
            has_access=False,
            status=SubscriptionStatus.EXPIRED.value,
            reason=AccessReason.SUBSCRIPTION_EXPIRED.value,
            plan=sub.plan,
            plan_name=plan_name,
            expires_at=sub.period_end,
            message="Your subscription has expired. Please renew it.",
        ), True

    if sub.status == SubscriptionStatus.EXPIRED:
        return sub, AccessDecision(
            has_access=False,
            status=SubscriptionStatus.EXPIRED.value,
            reason=AccessReason.EXPIRED.value,
            plan=sub.plan,
            message="Subscription expired. Please renew.",
        ), False

    return sub, AccessDecision(
        has_access=False,
        status=sub.status,
        reason=AccessReason.CANCELLED.value,
        plan=sub.plan,
        message="Subscription cancelled.",
    ), False


def describe_plan(plan: Plan) -> str:
    return f"{plan.name} ({francs_to_display(plan.amount)}, {plan.duration_days} days)"
