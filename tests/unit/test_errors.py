"""Tests for bk_common.errors and bk_common.response."""

from src.bk_common.errors import (
    AppError,
    ClientNotFoundError,
    CommandRejectedError,
    ConsistencyError,
    DuplicateClientError,
    InvalidPlanError,
    OutstandingBalanceError,
    OverpaymentRejectedError,
    SubscriptionRequiredError,
)
from src.bk_common.response import ApiResponse, error_response, success_response


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9003, message="Internal error")
        assert err.code == 9003
        assert err.message == "Internal error"
        assert err.http_status == 500
        assert err.kind == "APP_ERROR"
        assert err.data is None

    def test_is_exception(self) -> None:
        assert isinstance(AppError(code=1001, message="test"), Exception)


class TestSpecificErrors:
    def test_overpayment_carries_amounts(self) -> None:
        err = OverpaymentRejectedError(amount=1500, available=1000)
        assert err.code == 2003
        assert err.http_status == 422
        assert err.kind == "OVERPAYMENT_REJECTED"
        assert "1500" in err.message
        assert "1000" in err.message
        assert err.data == {"amount": 1500, "available": 1000}

    def test_client_not_found_with_hint(self) -> None:
        err = ClientNotFoundError('"Awa"', hint='Create it first with the command "New client Awa"')
        assert err.http_status == 404
        assert err.message.startswith('Client not found: "Awa". Create it first')

    def test_client_not_found_without_hint(self) -> None:
        assert ClientNotFoundError("c-1").message == "Client not found: c-1"

    def test_duplicate_client(self) -> None:
        err = DuplicateClientError("Moussa")
        assert (err.code, err.http_status) == (2002, 409)
        assert "Moussa" in err.message

    def test_outstanding_balance(self) -> None:
        err = OutstandingBalanceError("c-1", 2500)
        assert (err.code, err.http_status) == (2004, 409)
        assert "2500" in err.message

    def test_invalid_plan_lists_choices(self) -> None:
        err = InvalidPlanError("weekly", ["monthly", "yearly"])
        assert err.code == 3001
        assert "monthly, yearly" in err.message

    def test_subscription_required_keeps_reason(self) -> None:
        err = SubscriptionRequiredError("trial_expired", "Trial over")
        assert err.http_status == 402
        assert err.reason == "trial_expired"
        assert err.message == "Trial over"
        assert err.data == {"reason": "trial_expired"}

    def test_command_rejected_uses_interpreter_message(self) -> None:
        err = CommandRejectedError("Command not understood")
        assert (err.code, err.http_status) == (4001, 422)
        assert err.message == "Command not understood"

    def test_consistency_error_is_server_side(self) -> None:
        err = ConsistencyError("negative balance")
        assert err.http_status == 500
        assert err.message == "Ledger consistency violation: negative balance"


class TestApiResponse:
    def test_success(self) -> None:
        resp = success_response({"total_credit": 400})
        assert resp.code == 0
        assert resp.message == "success"
        assert resp.data == {"total_credit": 400}
        assert resp.error is None
        assert resp.request_id.startswith("req_")

    def test_success_custom_message(self) -> None:
        assert success_response(message="Client created").message == "Client created"

    def test_error_carries_kind(self) -> None:
        resp = error_response(2003, "Payment too large", "OVERPAYMENT_REJECTED")
        assert resp.code == 2003
        assert resp.data is None
        assert resp.error == "OVERPAYMENT_REJECTED"

    def test_serialization(self) -> None:
        dumped = ApiResponse(code=0, message="ok", data=[1, 2]).model_dump()
        assert set(dumped) == {"code", "message", "data", "error", "timestamp", "request_id"}
