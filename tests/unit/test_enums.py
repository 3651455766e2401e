"""Tests for bk_common.enums: values must match DB CHECK constraints and interpreter output."""

from src.bk_common.enums import (
    AccessReason,
    CommandType,
    PaymentMethod,
    PaymentMode,
    SubscriptionStatus,
)


class TestAllEnumsAreStr:
    def test_payment_mode(self) -> None:
        assert isinstance(PaymentMode.CASH, str)
        assert {m.value for m in PaymentMode} == {"cash", "credit"}

    def test_subscription_status(self) -> None:
        assert {s.value for s in SubscriptionStatus} == {"trial", "active", "expired", "cancelled"}

    def test_access_reason(self) -> None:
        assert AccessReason.TRIAL_EXPIRED == "trial_expired"
        assert AccessReason.SUBSCRIPTION_EXPIRED == "subscription_expired"

    def test_payment_method_includes_webhook_default(self) -> None:
        assert PaymentMethod("mobile_money") is PaymentMethod.MOBILE_MONEY


class TestCommandType:
    def test_interpreter_keys(self) -> None:
        assert CommandType("vente") is CommandType.SALE
        assert CommandType("depense") is CommandType.EXPENSE
        assert CommandType("nouveau_client") is CommandType.NEW_CLIENT
        assert CommandType("erreur") is CommandType.ERROR

    def test_compares_with_plain_strings(self) -> None:
        assert "vente" == CommandType.SALE
