"""Unit tests for LedgerApplicationService using a mock repository."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from src.bk_common.errors import (
    ClientNotFoundError,
    ExpenseNotFoundError,
    OutstandingBalanceError,
    OverpaymentRejectedError,
    SaleNotFoundError,
    ValidationError,
)
from src.bk_ledger.application.schemas import CreateSaleRequest
from src.bk_ledger.application.service import LedgerApplicationService
from src.bk_ledger.domain.models import Client, Expense, Payment, Sale

NOW = datetime(2026, 3, 10, 9, 30, tzinfo=UTC)


def _client(total_credit: int = 0, name: str = "Awa Diop") -> Client:
    return Client(
        id="c-1",
        account_id="acc-1",
        name=name,
        phone=None,
        address=None,
        total_credit=total_credit,
        created_at=NOW,
    )


def _sale(amount: int = 1000, mode: str = "credit", client_id: str | None = "c-1") -> Sale:
    return Sale(
        id="s-1",
        account_id="acc-1",
        amount=amount,
        payment_mode=mode,
        customer_name="Awa Diop",
        client_id=client_id,
        sold_at=NOW,
    )


@pytest.fixture
def repo() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def db() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(repo: AsyncMock) -> LedgerApplicationService:
    return LedgerApplicationService(repo=repo)


class TestCreateClient:
    async def test_trims_name_and_commits(
        self, service: LedgerApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.insert_client.return_value = _client()
        result = await service.create_client(db, "acc-1", "  Awa Diop  ", "0700000000")
        repo.insert_client.assert_awaited_once_with(db, "acc-1", "Awa Diop", "0700000000", None)
        assert result.total_credit == 0
        assert result.total_credit_display == "0 F"
        db.commit.assert_awaited_once()

    async def test_blank_name_rejected(
        self, service: LedgerApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        with pytest.raises(ValidationError):
            await service.create_client(db, "acc-1", "   ")
        repo.insert_client.assert_not_awaited()


class TestRecordCreditSale:
    async def test_by_id_credits_then_inserts(
        self, service: LedgerApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.credit_client.return_value = _client(total_credit=1000)
        repo.insert_sale.return_value = _sale()
        result = await service.record_credit_sale(db, "acc-1", 1000, client_id="c-1")

        repo.credit_client.assert_awaited_once_with(db, "acc-1", "c-1", 1000)
        repo.find_client_by_name.assert_not_awaited()
        assert result.client is not None and result.client.total_credit == 1000
        db.commit.assert_awaited_once()

    async def test_unknown_client_id_rolls_back(
        self, service: LedgerApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.credit_client.return_value = None
        with pytest.raises(ClientNotFoundError):
            await service.record_credit_sale(db, "acc-1", 1000, client_id="missing")
        repo.insert_sale.assert_not_awaited()
        db.rollback.assert_awaited_once()

    async def test_zero_amount_rejected(
        self, service: LedgerApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        with pytest.raises(ValidationError):
            await service.record_credit_sale(db, "acc-1", 0, client_id="c-1")
        repo.credit_client.assert_not_awaited()

    async def test_requires_some_client_reference(
        self, service: LedgerApplicationService, db: AsyncMock
    ) -> None:
        with pytest.raises(ValidationError):
            await service.record_credit_sale(db, "acc-1", 1000)


class TestCreateSale:
    async def test_cash_dispatch(
        self, service: LedgerApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.insert_sale.return_value = _sale(mode="cash", client_id=None)
        body = CreateSaleRequest(amount=1000, payment_mode="cash")
        result = await service.create_sale(db, "acc-1", body)
        assert result.client is None
        repo.credit_client.assert_not_awaited()

    async def test_credit_with_client_id_moves_balance(
        self, service: LedgerApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.credit_client.return_value = _client(total_credit=1000)
        repo.insert_sale.return_value = _sale()
        body = CreateSaleRequest(
            amount=1000, payment_mode="credit", client_id="8e2f1a8c-2b1d-4c41-9d0e-3a5b7c9d1e2f"
        )
        await service.create_sale(db, "acc-1", body)
        repo.credit_client.assert_awaited_once()


class TestReverseSale:
    async def test_missing_sale(
        self, service: LedgerApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.delete_sale.return_value = None
        with pytest.raises(SaleNotFoundError):
            await service.reverse_sale(db, "acc-1", "s-404")
        db.rollback.assert_awaited_once()

    async def test_cash_sale_has_no_balance_effect(
        self, service: LedgerApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.delete_sale.return_value = _sale(mode="cash", client_id=None)
        result = await service.reverse_sale(db, "acc-1", "s-1")
        repo.debit_client.assert_not_awaited()
        assert result.reversed_amount == 0

    async def test_credit_sale_debits_original_amount(
        self, service: LedgerApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.delete_sale.return_value = _sale(amount=1500)
        repo.debit_client.return_value = _client(total_credit=500)
        result = await service.reverse_sale(db, "acc-1", "s-1")
        repo.debit_client.assert_awaited_once_with(db, "acc-1", "c-1", 1500)
        assert result.reversed_amount == 1500
        assert result.client is not None and result.client.total_credit == 500


class TestRecordPayment:
    async def test_success(
        self, service: LedgerApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.debit_client.return_value = _client(total_credit=400)
        repo.insert_payment.return_value = Payment("p-1", "c-1", 600, paid_at=NOW)
        result = await service.record_payment(db, "acc-1", "c-1", 600)
        assert result.client.total_credit == 400
        assert result.payment.amount_display == "600 F"
        db.commit.assert_awaited_once()

    async def test_overpayment_reports_available(
        self, service: LedgerApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.debit_client.return_value = None
        repo.get_client.return_value = _client(total_credit=1000)
        with pytest.raises(OverpaymentRejectedError) as exc_info:
            await service.record_payment(db, "acc-1", "c-1", 1500)
        assert "1000" in exc_info.value.message
        repo.insert_payment.assert_not_awaited()
        db.rollback.assert_awaited_once()

    async def test_unknown_client(
        self, service: LedgerApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.debit_client.return_value = None
        repo.get_client.return_value = None
        with pytest.raises(ClientNotFoundError):
            await service.record_payment(db, "acc-1", "c-404", 100)


class TestDeleteClient:
    async def test_outstanding_balance(
        self, service: LedgerApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.delete_settled_client.return_value = False
        repo.get_client.return_value = _client(total_credit=2500)
        with pytest.raises(OutstandingBalanceError):
            await service.delete_client(db, "acc-1", "c-1")

    async def test_missing(
        self, service: LedgerApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.delete_settled_client.return_value = False
        repo.get_client.return_value = None
        with pytest.raises(ClientNotFoundError):
            await service.delete_client(db, "acc-1", "c-404")

    async def test_settled(
        self, service: LedgerApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.delete_settled_client.return_value = True
        await service.delete_client(db, "acc-1", "c-1")
        db.commit.assert_awaited_once()


class TestExpenses:
    async def test_record(
        self, service: LedgerApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.insert_expense.return_value = Expense("e-1", "acc-1", 3000, "Transport", spent_at=NOW)
        result = await service.record_expense(db, "acc-1", 3000, " Transport ")
        repo.insert_expense.assert_awaited_once_with(db, "acc-1", 3000, "Transport", None, None)
        assert result.amount_display == "3,000 F"

    async def test_blank_reason(self, service: LedgerApplicationService, db: AsyncMock) -> None:
        with pytest.raises(ValidationError):
            await service.record_expense(db, "acc-1", 3000, "")

    async def test_get_missing(
        self, service: LedgerApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.get_expense.return_value = None
        with pytest.raises(ExpenseNotFoundError):
            await service.get_expense(db, "acc-1", "e-404")

    async def test_delete_missing(
        self, service: LedgerApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.delete_expense.return_value = False
        with pytest.raises(ExpenseNotFoundError):
            await service.delete_expense(db, "acc-1", "e-404")
        db.rollback.assert_awaited_once()


class TestAudit:
    async def test_detects_drift(
        self, service: LedgerApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.get_client.return_value = _client(total_credit=900)
        repo.list_client_credit_sales.return_value = [_sale(amount=1000)]
        repo.list_client_payments.return_value = [Payment("p-1", "c-1", 200)]
        result = await service.audit_client_balance(db, "acc-1", "c-1")
        assert result.consistent is False
        assert result.replayed_total_credit == 800
        assert len(result.violations) == 1
