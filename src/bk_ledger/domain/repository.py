"""Repository Protocol: dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.

Balance primitives are single atomic statements. ``debit_client`` returns None
when the ``total_credit >= amount`` guard rejects the update, leaving the caller
to decide which error that means.
"""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_ledger.domain.models import Client, Expense, Payment, Sale


class LedgerRepositoryProtocol(Protocol):
    # --- clients ---

    async def insert_client(
        self,
        db: AsyncSession,
        account_id: str,
        name: str,
        phone: str | None,
        address: str | None,
    ) -> Client: ...

    async def get_client(
        self, db: AsyncSession, account_id: str, client_id: str
    ) -> Client | None: ...

    async def find_client_by_name(
        self, db: AsyncSession, account_id: str, name: str
    ) -> Client | None: ...

    async def find_client_by_exact_name(
        self, db: AsyncSession, account_id: str, name: str
    ) -> Client | None: ...

    async def list_clients(
        self, db: AsyncSession, account_id: str, with_credit_only: bool
    ) -> list[Client]: ...

    async def credit_client(
        self, db: AsyncSession, account_id: str, client_id: str, amount: int
    ) -> Client | None: ...

    async def debit_client(
        self, db: AsyncSession, account_id: str, client_id: str, amount: int
    ) -> Client | None: ...

    async def delete_settled_client(
        self, db: AsyncSession, account_id: str, client_id: str
    ) -> bool: ...

    # --- sales ---

    async def insert_sale(
        self,
        db: AsyncSession,
        account_id: str,
        amount: int,
        payment_mode: str,
        customer_name: str | None,
        client_id: str | None,
        notes: str | None,
    ) -> Sale: ...

    async def get_sale(
        self, db: AsyncSession, account_id: str, sale_id: str
    ) -> Sale | None: ...

    async def delete_sale(
        self, db: AsyncSession, account_id: str, sale_id: str
    ) -> Sale | None: ...

    async def list_sales(
        self,
        db: AsyncSession,
        account_id: str,
        date_from: datetime | None,
        date_to: datetime | None,
        payment_mode: str | None,
        limit: int,
    ) -> list[Sale]: ...

    async def list_client_credit_sales(
        self, db: AsyncSession, account_id: str, client_id: str
    ) -> list[Sale]: ...

    # --- payments ---

    async def insert_payment(
        self, db: AsyncSession, client_id: str, amount: int, notes: str | None
    ) -> Payment: ...

    async def list_client_payments(
        self, db: AsyncSession, client_id: str
    ) -> list[Payment]: ...

    # --- expenses ---

    async def insert_expense(
        self,
        db: AsyncSession,
        account_id: str,
        amount: int,
        reason: str,
        category: str | None,
        spent_at: datetime | None,
    ) -> Expense: ...

    async def get_expense(
        self, db: AsyncSession, account_id: str, expense_id: str
    ) -> Expense | None: ...

    async def delete_expense(
        self, db: AsyncSession, account_id: str, expense_id: str
    ) -> bool: ...

    async def list_expenses(
        self,
        db: AsyncSession,
        account_id: str,
        date_from: datetime | None,
        date_to: datetime | None,
        category: str | None,
        limit: int,
    ) -> list[Expense]: ...
