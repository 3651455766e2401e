"""ReportsApplicationService: daily, monthly, credit and summary statistics.

Calendar days and months are taken in ``settings.REPORT_TIMEZONE``.
"""

from datetime import date, datetime

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.bk_common.datetime_utils import day_bounds, local_today, month_bounds
from src.bk_common.errors import ValidationError
from src.bk_common.money import francs_to_display
from src.bk_reports.application.schemas import (
    CreditsReport,
    DailyReport,
    DebtorOut,
    ExpensesBlock,
    MonthlyReport,
    SalesBlock,
    SummaryReport,
)
from src.bk_reports.domain.models import ExpenseTotals, SalesTotals
from src.bk_reports.domain.repository import ReportsRepositoryProtocol
from src.bk_reports.infrastructure.persistence import ReportsRepository


def compute_profit(sales: SalesTotals, expenses: ExpenseTotals) -> int:
    """Cash received minus money spent; credit sales are not yet income."""
    return sales.cash - expenses.total


class ReportsApplicationService:
    def __init__(
        self,
        repo: ReportsRepositoryProtocol | None = None,
        tz_name: str | None = None,
    ) -> None:
        self._repo: ReportsRepositoryProtocol = repo or ReportsRepository()
        self._tz = tz_name or settings.REPORT_TIMEZONE

    async def _period(
        self, db: AsyncSession, account_id: str, start: datetime, end: datetime
    ) -> tuple[SalesTotals, ExpenseTotals]:
        sales = await self._repo.sales_totals(db, account_id, start, end)
        expenses = await self._repo.expense_totals(db, account_id, start, end)
        return sales, expenses

    async def daily(
        self, db: AsyncSession, account_id: str, day: date | None = None
    ) -> DailyReport:
        day = day or local_today(self._tz)
        start, end = day_bounds(day, self._tz)
        sales, expenses = await self._period(db, account_id, start, end)
        profit = compute_profit(sales, expenses)
        return DailyReport(
            date=day.isoformat(),
            period_start=start.isoformat(),
            period_end=end.isoformat(),
            sales=SalesBlock.from_domain(sales),
            expenses=ExpensesBlock.from_domain(expenses),
            profit=profit,
            profit_display=francs_to_display(profit),
        )

    async def monthly(
        self,
        db: AsyncSession,
        account_id: str,
        year: int | None = None,
        month: int | None = None,
    ) -> MonthlyReport:
        today = local_today(self._tz)
        year = year or today.year
        month = month or today.month
        try:
            start, end = month_bounds(year, month, self._tz)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        sales, expenses = await self._period(db, account_id, start, end)
        profit = compute_profit(sales, expenses)
        return MonthlyReport(
            year=year,
            month=month,
            period_start=start.isoformat(),
            period_end=end.isoformat(),
            sales=SalesBlock.from_domain(sales),
            expenses=ExpensesBlock.from_domain(expenses),
            profit=profit,
            profit_display=francs_to_display(profit),
        )

    async def credits(self, db: AsyncSession, account_id: str) -> CreditsReport:
        debtors = await self._repo.list_debtors(db, account_id)
        total = sum(d.total_credit for d in debtors)
        return CreditsReport(
            clients=[DebtorOut.from_domain(d) for d in debtors],
            count=len(debtors),
            total=total,
            total_display=francs_to_display(total),
        )

    async def summary(
        self, db: AsyncSession, account_id: str, today: date | None = None
    ) -> SummaryReport:
        today = today or local_today(self._tz)
        start, end = day_bounds(today, self._tz)
        sales, expenses = await self._period(db, account_id, start, end)
        credit = await self._repo.credit_totals(db, account_id)
        return SummaryReport(
            date=today.isoformat(),
            today_sales=sales.total,
            today_sales_count=sales.count,
            today_expenses=expenses.total,
            outstanding_credit=credit.outstanding,
            debtor_count=credit.debtor_count,
        )
