"""Domain models for bk_entitlement: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Subscription:
    id: str
    account_id: str
    status: str                         # SubscriptionStatus value
    trial_start: datetime
    trial_end: datetime
    period_start: datetime | None = None
    period_end: datetime | None = None
    plan: str | None = None             # plan id, set on first activation
    amount: int | None = None           # francs, price of the current plan
    payment_method: str | None = None
    transaction_ref: str | None = None
    last_payment_date: datetime | None = None
    last_payment_amount: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class Plan:
    id: str
    name: str
    amount: int                         # francs
    duration_days: int
    months: int                         # billing months covered, for savings maths
    description: str
    popular: bool = False


@dataclass(frozen=True)
class PlanSavings:
    plan: Plan
    monthly_equivalent: int             # francs per month, rounded
    savings: int                        # francs saved vs paying monthly
    savings_percent: int


@dataclass(frozen=True)
class AccessDecision:
    has_access: bool
    status: str | None                  # subscription status after evaluation
    reason: str | None = None           # AccessReason value when denied
    hours_left: int | None = None       # trial only
    days_left: int | None = None        # paid period only
    plan: str | None = None
    plan_name: str | None = None
    expires_at: datetime | None = None
    message: str = ""
