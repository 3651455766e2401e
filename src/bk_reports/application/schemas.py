"""Pydantic response schemas for bk_reports API."""

from pydantic import BaseModel

from src.bk_common.money import francs_to_display
from src.bk_reports.domain.models import Debtor, ExpenseTotals, SalesTotals


class SalesBlock(BaseModel):
    total: int
    cash: int
    credit: int
    count: int
    total_display: str

    @classmethod
    def from_domain(cls, s: SalesTotals) -> "SalesBlock":
        return cls(
            total=s.total,
            cash=s.cash,
            credit=s.credit,
            count=s.count,
            total_display=francs_to_display(s.total),
        )


class ExpensesBlock(BaseModel):
    total: int
    count: int
    total_display: str

    @classmethod
    def from_domain(cls, e: ExpenseTotals) -> "ExpensesBlock":
        return cls(total=e.total, count=e.count, total_display=francs_to_display(e.total))


class PeriodReport(BaseModel):
    """Sales and expenses over a period. Profit counts cash actually received."""

    period_start: str
    period_end: str
    sales: SalesBlock
    expenses: ExpensesBlock
    profit: int
    profit_display: str


class DailyReport(PeriodReport):
    date: str


class MonthlyReport(PeriodReport):
    year: int
    month: int


class DebtorOut(BaseModel):
    client_id: str
    name: str
    phone: str | None
    total_credit: int
    total_credit_display: str

    @classmethod
    def from_domain(cls, d: Debtor) -> "DebtorOut":
        return cls(
            client_id=d.client_id,
            name=d.name,
            phone=d.phone,
            total_credit=d.total_credit,
            total_credit_display=francs_to_display(d.total_credit),
        )


class CreditsReport(BaseModel):
    clients: list[DebtorOut]
    count: int
    total: int
    total_display: str


class SummaryReport(BaseModel):
    date: str
    today_sales: int
    today_sales_count: int
    today_expenses: int
    outstanding_credit: int
    debtor_count: int
