"""ReportsRepository: read-only aggregate queries over the ledger tables.

Windows are half-open: ``start <= ts < end``.
"""

from datetime import datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_reports.domain.models import CreditTotals, Debtor, ExpenseTotals, SalesTotals

_SALES_TOTALS_SQL = text("""
    SELECT COALESCE(SUM(amount), 0)                                        AS total,
           COALESCE(SUM(amount) FILTER (WHERE payment_mode = 'cash'), 0)   AS cash,
           COALESCE(SUM(amount) FILTER (WHERE payment_mode = 'credit'), 0) AS credit,
           COUNT(*)                                                        AS sale_count
    FROM sales
    WHERE account_id = :account_id
      AND sold_at >= :start AND sold_at < :end
""")

_EXPENSE_TOTALS_SQL = text("""
    SELECT COALESCE(SUM(amount), 0) AS total,
           COUNT(*)                 AS expense_count
    FROM expenses
    WHERE account_id = :account_id
      AND spent_at >= :start AND spent_at < :end
""")

_CREDIT_TOTALS_SQL = text("""
    SELECT COALESCE(SUM(total_credit), 0) AS outstanding,
           COUNT(*)                       AS debtor_count
    FROM clients
    WHERE account_id = :account_id AND total_credit > 0
""")

_LIST_DEBTORS_SQL = text("""
    SELECT id, name, phone, total_credit
    FROM clients
    WHERE account_id = :account_id AND total_credit > 0
    ORDER BY total_credit DESC, name ASC
""")


class ReportsRepository:
    async def sales_totals(
        self, db: AsyncSession, account_id: str, start: datetime, end: datetime
    ) -> SalesTotals:
        result = await db.execute(
            _SALES_TOTALS_SQL, {"account_id": account_id, "start": start, "end": end}
        )
        row = result.one()
        return SalesTotals(
            total=int(row.total),
            cash=int(row.cash),
            credit=int(row.credit),
            count=int(row.sale_count),
        )

    async def expense_totals(
        self, db: AsyncSession, account_id: str, start: datetime, end: datetime
    ) -> ExpenseTotals:
        result = await db.execute(
            _EXPENSE_TOTALS_SQL, {"account_id": account_id, "start": start, "end": end}
        )
        row = result.one()
        return ExpenseTotals(total=int(row.total), count=int(row.expense_count))

    async def credit_totals(self, db: AsyncSession, account_id: str) -> CreditTotals:
        result = await db.execute(_CREDIT_TOTALS_SQL, {"account_id": account_id})
        row = result.one()
        return CreditTotals(outstanding=int(row.outstanding), debtor_count=int(row.debtor_count))

    async def list_debtors(self, db: AsyncSession, account_id: str) -> list[Debtor]:
        result = await db.execute(_LIST_DEBTORS_SQL, {"account_id": account_id})
        return [
            Debtor(
                client_id=str(row.id),
                name=row.name,
                phone=row.phone,
                total_credit=row.total_credit,
            )
            for row in result.fetchall()
        ]
