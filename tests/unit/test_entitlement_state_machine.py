"""Tests for the pure subscription state machine."""

from datetime import UTC, datetime, timedelta

import pytest

from src.bk_common.errors import InvalidPlanError
from src.bk_entitlement.domain.models import Subscription
from src.bk_entitlement.domain.state_machine import (
    PLANS,
    activation_window,
    compute_savings,
    describe_plan,
    evaluate_access,
    get_plan,
    list_plans,
)

T0 = datetime(2026, 1, 1, 8, 0, tzinfo=UTC)


def _trial(start: datetime = T0) -> Subscription:
    return Subscription(
        id="sub-1",
        account_id="acc-1",
        status="trial",
        trial_start=start,
        trial_end=start + timedelta(hours=72),
    )


def _active(plan: str = "monthly", start: datetime = T0) -> Subscription:
    days = PLANS[plan].duration_days
    return Subscription(
        id="sub-1",
        account_id="acc-1",
        status="active",
        trial_start=start - timedelta(days=10),
        trial_end=start - timedelta(days=7),
        period_start=start,
        period_end=start + timedelta(days=days),
        plan=plan,
        amount=PLANS[plan].amount,
    )


class TestPlanCatalog:
    def test_four_plans(self) -> None:
        assert [p.id for p in list_plans()] == ["monthly", "quarterly", "semesterly", "yearly"]

    def test_prices_and_durations(self) -> None:
        assert (PLANS["monthly"].amount, PLANS["monthly"].duration_days) == (2000, 30)
        assert (PLANS["quarterly"].amount, PLANS["quarterly"].duration_days) == (5000, 90)
        assert (PLANS["semesterly"].amount, PLANS["semesterly"].duration_days) == (10000, 180)
        assert (PLANS["yearly"].amount, PLANS["yearly"].duration_days) == (20000, 365)

    def test_only_yearly_is_popular(self) -> None:
        assert [p.id for p in list_plans() if p.popular] == ["yearly"]

    def test_unknown_plan(self) -> None:
        with pytest.raises(InvalidPlanError):
            get_plan("weekly")

    def test_describe(self) -> None:
        assert describe_plan(PLANS["yearly"]) == "Annuel (20,000 F, 365 days)"


class TestSavings:
    def test_monthly_has_no_savings_entry(self) -> None:
        assert "monthly" not in compute_savings()

    def test_quarterly(self) -> None:
        s = compute_savings()["quarterly"]
        assert s.monthly_equivalent == 1667
        assert s.savings == 1000
        assert s.savings_percent == 17

    def test_yearly(self) -> None:
        s = compute_savings()["yearly"]
        assert s.monthly_equivalent == 1667
        assert s.savings == 4000
        assert s.savings_percent == 17


class TestActivationWindow:
    def test_starts_at_now(self) -> None:
        start, end = activation_window(PLANS["monthly"], T0)
        assert start == T0
        assert end == T0 + timedelta(days=30)


class TestEvaluateAccess:
    def test_no_subscription(self) -> None:
        sub, decision, transitioned = evaluate_access(None, T0)
        assert sub is None
        assert decision.has_access is False
        assert decision.reason == "no_subscription"
        assert transitioned is False

    def test_trial_after_one_hour(self) -> None:
        _, decision, transitioned = evaluate_access(_trial(), T0 + timedelta(hours=1))
        assert decision.has_access is True
        assert decision.status == "trial"
        assert decision.hours_left == 71
        assert decision.expires_at == T0 + timedelta(hours=72)
        assert transitioned is False

    def test_trial_hours_round_up(self) -> None:
        _, decision, _ = evaluate_access(_trial(), T0 + timedelta(hours=71, minutes=59))
        assert decision.hours_left == 1

    def test_trial_expires_at_boundary(self) -> None:
        sub, decision, transitioned = evaluate_access(_trial(), T0 + timedelta(hours=72))
        assert decision.has_access is False
        assert decision.reason == "trial_expired"
        assert sub is not None and sub.status == "expired"
        assert transitioned is True

    def test_expired_trial_second_evaluation_is_terminal(self) -> None:
        now = T0 + timedelta(hours=73)
        sub, first, _ = evaluate_access(_trial(), now)
        _, second, transitioned = evaluate_access(sub, now)
        assert first.has_access is second.has_access is False
        assert second.status == "expired"
        assert second.reason == "expired"
        assert transitioned is False

    def test_active_monthly(self) -> None:
        _, decision, _ = evaluate_access(_active("monthly"), T0)
        assert decision.has_access is True
        assert decision.days_left == 30
        assert decision.plan == "monthly"
        assert decision.plan_name == "Mensuel"

    def test_active_days_round_up(self) -> None:
        _, decision, _ = evaluate_access(_active("monthly"), T0 + timedelta(days=29, hours=1))
        assert decision.days_left == 1

    def test_active_expires(self) -> None:
        sub, decision, transitioned = evaluate_access(_active("monthly"), T0 + timedelta(days=30))
        assert decision.has_access is False
        assert decision.reason == "subscription_expired"
        assert sub is not None and sub.status == "expired"
        assert transitioned is True

    def test_cancelled_denied(self) -> None:
        sub = _active()
        sub.status = "cancelled"
        _, decision, transitioned = evaluate_access(sub, T0)
        assert decision.has_access is False
        assert decision.reason == "cancelled"
        assert transitioned is False

    def test_input_is_not_mutated(self) -> None:
        trial = _trial()
        evaluate_access(trial, T0 + timedelta(hours=80))
        assert trial.status == "trial"
