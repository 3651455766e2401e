"""Unit tests for ReportsApplicationService using a mock repository."""

from datetime import UTC, date, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.bk_common.errors import ValidationError
from src.bk_reports.application.service import ReportsApplicationService, compute_profit
from src.bk_reports.domain.models import CreditTotals, Debtor, ExpenseTotals, SalesTotals


@pytest.fixture
def repo() -> AsyncMock:
    mock = AsyncMock()
    mock.sales_totals.return_value = SalesTotals(total=15000, cash=9000, credit=6000, count=4)
    mock.expense_totals.return_value = ExpenseTotals(total=4000, count=2)
    return mock


@pytest.fixture
def service(repo: AsyncMock) -> ReportsApplicationService:
    return ReportsApplicationService(repo=repo, tz_name="UTC")


def test_profit_counts_cash_only() -> None:
    assert compute_profit(SalesTotals(cash=9000, credit=6000), ExpenseTotals(total=4000)) == 5000


class TestDaily:
    async def test_aggregates_day_window(
        self, service: ReportsApplicationService, repo: AsyncMock
    ) -> None:
        report = await service.daily(MagicMock(), "acc-1", date(2026, 3, 10))
        _, _, start, end = repo.sales_totals.await_args.args
        assert start == datetime(2026, 3, 10, tzinfo=UTC)
        assert end == datetime(2026, 3, 11, tzinfo=UTC)
        assert report.date == "2026-03-10"
        assert report.sales.total == 15000
        assert report.expenses.count == 2
        assert report.profit == 5000
        assert report.profit_display == "5,000 F"

    async def test_loss_is_negative(
        self, service: ReportsApplicationService, repo: AsyncMock
    ) -> None:
        repo.expense_totals.return_value = ExpenseTotals(total=12000, count=1)
        report = await service.daily(MagicMock(), "acc-1", date(2026, 3, 10))
        assert report.profit == -3000
        assert report.profit_display == "-3,000 F"


class TestMonthly:
    async def test_explicit_month(
        self, service: ReportsApplicationService, repo: AsyncMock
    ) -> None:
        report = await service.monthly(MagicMock(), "acc-1", 2026, 2)
        _, _, start, end = repo.expense_totals.await_args.args
        assert start == datetime(2026, 2, 1, tzinfo=UTC)
        assert end == datetime(2026, 3, 1, tzinfo=UTC)
        assert (report.year, report.month) == (2026, 2)

    async def test_bad_month(self, service: ReportsApplicationService) -> None:
        with pytest.raises(ValidationError):
            await service.monthly(MagicMock(), "acc-1", 2026, 13)


class TestCredits:
    async def test_lists_debtors_with_sum(
        self, service: ReportsApplicationService, repo: AsyncMock
    ) -> None:
        repo.list_debtors.return_value = [
            Debtor("c-1", "Awa", None, 7000),
            Debtor("c-2", "Moussa", "0700000000", 2500),
        ]
        report = await service.credits(MagicMock(), "acc-1")
        assert report.count == 2
        assert report.total == 9500
        assert report.total_display == "9,500 F"
        assert [c.name for c in report.clients] == ["Awa", "Moussa"]

    async def test_no_debtors(self, service: ReportsApplicationService, repo: AsyncMock) -> None:
        repo.list_debtors.return_value = []
        report = await service.credits(MagicMock(), "acc-1")
        assert (report.count, report.total) == (0, 0)


class TestSummary:
    async def test_combines_today_and_outstanding(
        self, service: ReportsApplicationService, repo: AsyncMock
    ) -> None:
        repo.credit_totals.return_value = CreditTotals(outstanding=9500, debtor_count=2)
        report = await service.summary(MagicMock(), "acc-1", date(2026, 3, 10))
        assert report.today_sales == 15000
        assert report.today_sales_count == 4
        assert report.today_expenses == 4000
        assert report.outstanding_credit == 9500
        assert report.debtor_count == 2
