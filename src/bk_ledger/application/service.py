"""LedgerApplicationService: keeps client credit balances consistent.

Every balance-affecting operation (credit sale, sale reversal, payment, client
create/delete) pairs a ledger row with an aggregate update inside one
transaction: commit when both applied, rollback on any error. Read-only
operations run without an explicit transaction.

The repository guards each balance mutation in SQL, so this layer never does a
read-then-write on ``total_credit``.
"""

import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.enums import PaymentMode
from src.bk_common.errors import (
    ClientNotFoundError,
    ConsistencyError,
    ExpenseNotFoundError,
    OutstandingBalanceError,
    OverpaymentRejectedError,
    SaleNotFoundError,
    ValidationError,
)
from src.bk_common.money import validate_amount
from src.bk_ledger.application.schemas import (
    BalanceAuditResponse,
    ClientDetailResponse,
    ClientListResponse,
    ClientOut,
    CreateSaleRequest,
    ExpenseListResponse,
    ExpenseOut,
    PaymentOut,
    PaymentResponse,
    SaleListResponse,
    SaleOut,
    SaleResponse,
    SaleReversalResponse,
)
from src.bk_ledger.domain.invariants import expected_balance, verify_client_balance
from src.bk_ledger.domain.models import Client
from src.bk_ledger.domain.repository import LedgerRepositoryProtocol
from src.bk_ledger.infrastructure.persistence import LedgerRepository

logger = logging.getLogger(__name__)


def _require_amount(amount: int) -> None:
    try:
        validate_amount(amount)
    except ValueError as exc:
        raise ValidationError(str(exc)) from None


def _require_text(value: str | None, field: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field} is required")
    return value.strip()


class LedgerApplicationService:
    def __init__(self, repo: LedgerRepositoryProtocol | None = None) -> None:
        self._repo: LedgerRepositoryProtocol = repo or LedgerRepository()

    # ------------------------------------------------------------------
    # Clients
    # ------------------------------------------------------------------

    async def create_client(
        self,
        db: AsyncSession,
        account_id: str,
        name: str,
        phone: str | None = None,
        address: str | None = None,
    ) -> ClientOut:
        name = _require_text(name, "Client name")
        try:
            client = await self._repo.insert_client(db, account_id, name, phone, address)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return ClientOut.from_domain(client)

    async def find_client_by_exact_name(
        self, db: AsyncSession, account_id: str, name: str
    ) -> Client | None:
        return await self._repo.find_client_by_exact_name(db, account_id, name.strip())

    async def list_clients(
        self, db: AsyncSession, account_id: str, with_credit_only: bool = False
    ) -> ClientListResponse:
        clients = await self._repo.list_clients(db, account_id, with_credit_only)
        items = [ClientOut.from_domain(c) for c in clients]
        return ClientListResponse(items=items, total=len(items))

    async def get_client(
        self, db: AsyncSession, account_id: str, client_id: str
    ) -> ClientDetailResponse:
        client = await self._repo.get_client(db, account_id, client_id)
        if client is None:
            raise ClientNotFoundError(client_id)
        sales = await self._repo.list_client_credit_sales(db, account_id, client_id)
        payments = await self._repo.list_client_payments(db, client_id)
        return ClientDetailResponse(
            client=ClientOut.from_domain(client),
            credit_sales=[SaleOut.from_domain(s) for s in sales],
            payments=[PaymentOut.from_domain(p) for p in payments],
        )

    async def delete_client(self, db: AsyncSession, account_id: str, client_id: str) -> None:
        try:
            deleted = await self._repo.delete_settled_client(db, account_id, client_id)
            if not deleted:
                client = await self._repo.get_client(db, account_id, client_id)
                if client is None:
                    raise ClientNotFoundError(client_id)
                raise OutstandingBalanceError(client_id, client.total_credit)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    # ------------------------------------------------------------------
    # Sales
    # ------------------------------------------------------------------

    async def record_credit_sale(
        self,
        db: AsyncSession,
        account_id: str,
        amount: int,
        client_id: str | None = None,
        client_name: str | None = None,
        notes: str | None = None,
    ) -> SaleResponse:
        """Insert a credit sale and increment the client's balance by ``amount``.

        ``client_id`` wins when both references are given. A name is resolved
        with a case-insensitive substring match; no match is an error, never an
        implicit client creation.
        """
        _require_amount(amount)
        try:
            if client_id is None:
                name = _require_text(client_name, "Client name for a credit sale")
                match = await self._repo.find_client_by_name(db, account_id, name)
                if match is None:
                    raise ClientNotFoundError(
                        f'"{name}"',
                        hint=f'Create it first with the command "New client {name}"',
                    )
                client_id = match.id
            client = await self._repo.credit_client(db, account_id, client_id, amount)
            if client is None:
                raise ClientNotFoundError(client_id)
            sale = await self._repo.insert_sale(
                db,
                account_id,
                amount,
                PaymentMode.CREDIT.value,
                client_name or client.name,
                client.id,
                notes,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Credit sale %s: +%d F for client %s (total_credit=%d)",
            sale.id, amount, client.id, client.total_credit,
        )
        return SaleResponse(sale=SaleOut.from_domain(sale), client=ClientOut.from_domain(client))

    async def record_cash_sale(
        self,
        db: AsyncSession,
        account_id: str,
        amount: int,
        label: str | None = None,
        notes: str | None = None,
    ) -> SaleResponse:
        _require_amount(amount)
        return await self._insert_untracked_sale(
            db, account_id, amount, PaymentMode.CASH.value, label, notes
        )

    async def create_sale(
        self, db: AsyncSession, account_id: str, body: CreateSaleRequest
    ) -> SaleResponse:
        """Direct API entry point.

        A credit sale without ``client_id`` keeps only its free-text customer
        name and moves no balance.
        """
        if body.payment_mode == PaymentMode.CREDIT and body.client_id is not None:
            return await self.record_credit_sale(
                db,
                account_id,
                body.amount,
                client_id=str(body.client_id),
                client_name=body.customer_name,
                notes=body.notes,
            )
        if body.payment_mode == PaymentMode.CREDIT:
            _require_amount(body.amount)
            return await self._insert_untracked_sale(
                db, account_id, body.amount, PaymentMode.CREDIT.value,
                body.customer_name, body.notes,
            )
        return await self.record_cash_sale(
            db, account_id, body.amount, body.customer_name, body.notes
        )

    async def _insert_untracked_sale(
        self,
        db: AsyncSession,
        account_id: str,
        amount: int,
        payment_mode: str,
        customer_name: str | None,
        notes: str | None,
    ) -> SaleResponse:
        try:
            sale = await self._repo.insert_sale(
                db, account_id, amount, payment_mode, customer_name, None, notes
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return SaleResponse(sale=SaleOut.from_domain(sale))

    async def reverse_sale(
        self, db: AsyncSession, account_id: str, sale_id: str
    ) -> SaleReversalResponse:
        """Delete a sale, taking its amount back off the client's balance if it added any."""
        client: Client | None = None
        try:
            sale = await self._repo.delete_sale(db, account_id, sale_id)
            if sale is None:
                raise SaleNotFoundError(sale_id)
            if sale.affects_balance and sale.client_id is not None:
                client = await self._repo.debit_client(
                    db, account_id, sale.client_id, sale.amount
                )
                if client is None:
                    current = await self._repo.get_client(db, account_id, sale.client_id)
                    if current is not None:
                        detail = (
                            f"reversing sale {sale.id} ({sale.amount} F) would drive "
                            f"client {current.id} total_credit={current.total_credit} negative"
                        )
                        logger.error(detail)
                        raise ConsistencyError(detail)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return SaleReversalResponse(
            sale_id=sale.id,
            reversed_amount=sale.amount if client is not None else 0,
            client=ClientOut.from_domain(client) if client is not None else None,
        )

    async def get_sale(self, db: AsyncSession, account_id: str, sale_id: str) -> SaleOut:
        sale = await self._repo.get_sale(db, account_id, sale_id)
        if sale is None:
            raise SaleNotFoundError(sale_id)
        return SaleOut.from_domain(sale)

    async def list_sales(
        self,
        db: AsyncSession,
        account_id: str,
        date_from: datetime | None,
        date_to: datetime | None,
        payment_mode: str | None,
        limit: int,
    ) -> SaleListResponse:
        sales = await self._repo.list_sales(
            db, account_id, date_from, date_to, payment_mode, limit
        )
        items = [SaleOut.from_domain(s) for s in sales]
        return SaleListResponse(items=items, total=len(items))

    # ------------------------------------------------------------------
    # Payments
    # ------------------------------------------------------------------

    async def record_payment(
        self,
        db: AsyncSession,
        account_id: str,
        client_id: str,
        amount: int,
        notes: str | None = None,
    ) -> PaymentResponse:
        _require_amount(amount)
        try:
            client = await self._repo.debit_client(db, account_id, client_id, amount)
            if client is None:
                current = await self._repo.get_client(db, account_id, client_id)
                if current is None:
                    raise ClientNotFoundError(client_id)
                raise OverpaymentRejectedError(amount, current.total_credit)
            payment = await self._repo.insert_payment(db, client.id, amount, notes)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Payment %s: -%d F for client %s (total_credit=%d)",
            payment.id, amount, client.id, client.total_credit,
        )
        return PaymentResponse(
            payment=PaymentOut.from_domain(payment),
            client=ClientOut.from_domain(client),
        )

    # ------------------------------------------------------------------
    # Expenses
    # ------------------------------------------------------------------

    async def record_expense(
        self,
        db: AsyncSession,
        account_id: str,
        amount: int,
        reason: str,
        category: str | None = None,
        spent_at: datetime | None = None,
    ) -> ExpenseOut:
        _require_amount(amount)
        reason = _require_text(reason, "Expense reason")
        try:
            expense = await self._repo.insert_expense(
                db, account_id, amount, reason, category, spent_at
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return ExpenseOut.from_domain(expense)

    async def get_expense(
        self, db: AsyncSession, account_id: str, expense_id: str
    ) -> ExpenseOut:
        expense = await self._repo.get_expense(db, account_id, expense_id)
        if expense is None:
            raise ExpenseNotFoundError(expense_id)
        return ExpenseOut.from_domain(expense)

    async def delete_expense(self, db: AsyncSession, account_id: str, expense_id: str) -> None:
        try:
            deleted = await self._repo.delete_expense(db, account_id, expense_id)
            if not deleted:
                raise ExpenseNotFoundError(expense_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    async def list_expenses(
        self,
        db: AsyncSession,
        account_id: str,
        date_from: datetime | None,
        date_to: datetime | None,
        category: str | None,
        limit: int,
    ) -> ExpenseListResponse:
        expenses = await self._repo.list_expenses(
            db, account_id, date_from, date_to, category, limit
        )
        items = [ExpenseOut.from_domain(e) for e in expenses]
        return ExpenseListResponse(items=items, total=len(items))

    # ------------------------------------------------------------------
    # Audit
    # ------------------------------------------------------------------

    async def audit_client_balance(
        self, db: AsyncSession, account_id: str, client_id: str
    ) -> BalanceAuditResponse:
        """Replay a client's sales and payments and compare with the stored balance."""
        client = await self._repo.get_client(db, account_id, client_id)
        if client is None:
            raise ClientNotFoundError(client_id)
        sales = await self._repo.list_client_credit_sales(db, account_id, client_id)
        payments = await self._repo.list_client_payments(db, client_id)
        violations = verify_client_balance(client, sales, payments)
        return BalanceAuditResponse(
            client_id=client.id,
            stored_total_credit=client.total_credit,
            replayed_total_credit=expected_balance(sales, payments),
            consistent=not violations,
            violations=violations,
        )
