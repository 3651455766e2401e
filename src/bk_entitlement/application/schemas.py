"""Pydantic schemas for bk_entitlement API."""

import uuid

from pydantic import BaseModel, Field

from src.bk_common.enums import PaymentMethod
from src.bk_common.money import francs_to_display
from src.bk_entitlement.domain.models import AccessDecision, Plan, PlanSavings, Subscription

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class ActivateRequest(BaseModel):
    plan: str = Field(..., min_length=1, description="monthly | quarterly | semesterly | yearly")
    payment_method: PaymentMethod
    phone_number: str = Field(..., min_length=8, max_length=20)


class RenewRequest(BaseModel):
    payment_method: PaymentMethod
    phone_number: str | None = Field(None, max_length=20)


class WebhookPayload(BaseModel):
    """Payment-provider notification. Signature checks live in the provider adapter."""

    transaction_id: str = Field(..., min_length=1, max_length=100)
    status: str
    account_id: uuid.UUID
    plan: str


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class AccessResponse(BaseModel):
    has_access: bool
    status: str | None
    reason: str | None
    hours_left: int | None
    days_left: int | None
    plan: str | None
    plan_name: str | None
    expires_at: str | None
    message: str

    @classmethod
    def from_decision(cls, d: AccessDecision) -> "AccessResponse":
        return cls(
            has_access=d.has_access,
            status=d.status,
            reason=d.reason,
            hours_left=d.hours_left,
            days_left=d.days_left,
            plan=d.plan,
            plan_name=d.plan_name,
            expires_at=d.expires_at.isoformat() if d.expires_at else None,
            message=d.message,
        )


class SubscriptionOut(BaseModel):
    id: str
    status: str
    trial_start: str
    trial_end: str
    period_start: str | None
    period_end: str | None
    plan: str | None
    amount: int | None
    payment_method: str | None
    transaction_ref: str | None
    last_payment_date: str | None

    @classmethod
    def from_domain(cls, s: Subscription) -> "SubscriptionOut":
        return cls(
            id=s.id,
            status=s.status,
            trial_start=s.trial_start.isoformat(),
            trial_end=s.trial_end.isoformat(),
            period_start=s.period_start.isoformat() if s.period_start else None,
            period_end=s.period_end.isoformat() if s.period_end else None,
            plan=s.plan,
            amount=s.amount,
            payment_method=s.payment_method,
            transaction_ref=s.transaction_ref,
            last_payment_date=s.last_payment_date.isoformat() if s.last_payment_date else None,
        )


class PlanOut(BaseModel):
    id: str
    name: str
    amount: int
    amount_display: str
    duration_days: int
    description: str
    popular: bool

    @classmethod
    def from_domain(cls, p: Plan) -> "PlanOut":
        return cls(
            id=p.id,
            name=p.name,
            amount=p.amount,
            amount_display=francs_to_display(p.amount),
            duration_days=p.duration_days,
            description=p.description,
            popular=p.popular,
        )


class SavingsOut(BaseModel):
    plan: PlanOut
    monthly_equivalent: int
    savings: int
    savings_percent: int

    @classmethod
    def from_domain(cls, s: PlanSavings) -> "SavingsOut":
        return cls(
            plan=PlanOut.from_domain(s.plan),
            monthly_equivalent=s.monthly_equivalent,
            savings=s.savings,
            savings_percent=s.savings_percent,
        )


class PlansResponse(BaseModel):
    plans: list[PlanOut]
    savings: dict[str, SavingsOut]


class ActivationResponse(BaseModel):
    subscription: SubscriptionOut
    transaction_ref: str


class SubscriptionInfoResponse(BaseModel):
    subscription: SubscriptionOut
    access: AccessResponse
    available_plans: list[PlanOut]
