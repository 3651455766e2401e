from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_reports.domain.models import CreditTotals, Debtor, ExpenseTotals, SalesTotals


class ReportsRepositoryProtocol(Protocol):
    async def sales_totals(
        self, db: AsyncSession, account_id: str, start: datetime, end: datetime
    ) -> SalesTotals: ...

    async def expense_totals(
        self, db: AsyncSession, account_id: str, start: datetime, end: datetime
    ) -> ExpenseTotals: ...

    async def credit_totals(self, db: AsyncSession, account_id: str) -> CreditTotals: ...

    async def list_debtors(self, db: AsyncSession, account_id: str) -> list[Debtor]: ...
