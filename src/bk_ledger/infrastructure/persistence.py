"""LedgerRepository: concrete implementation of LedgerRepositoryProtocol.

All balance-mutating operations use atomic PostgreSQL UPDATE ... RETURNING.
A result of 0 rows means a business constraint was violated (unknown client or
insufficient outstanding credit). The row lock taken by the UPDATE serialises
concurrent mutations of the same client until the transaction ends.

asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.

Transaction ownership: The CALLER (application service) is responsible for
committing or rolling back.
"""

from datetime import datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.errors import InternalError
from src.bk_ledger.domain.models import Client, Expense, Payment, Sale

_CLIENT_COLUMNS = "id, account_id, name, phone, address, total_credit, created_at, updated_at"
_SALE_COLUMNS = "id, account_id, amount, payment_mode, customer_name, client_id, notes, sold_at"
_PAYMENT_COLUMNS = "id, client_id, amount, notes, paid_at"
_EXPENSE_COLUMNS = "id, account_id, amount, reason, category, spent_at"

# ---------------------------------------------------------------------------
# SQL: clients
# ---------------------------------------------------------------------------

_INSERT_CLIENT_SQL = text(f"""
    INSERT INTO clients (account_id, name, phone, address, total_credit)
    VALUES (:account_id, :name, :phone, :address, 0)
    RETURNING {_CLIENT_COLUMNS}
""")

_GET_CLIENT_SQL = text(f"""
    SELECT {_CLIENT_COLUMNS}
    FROM clients
    WHERE id = :client_id AND account_id = :account_id
""")

# First match in storage order; ties between overlapping names are not resolved further.
_FIND_CLIENT_BY_NAME_SQL = text(f"""
    SELECT {_CLIENT_COLUMNS}
    FROM clients
    WHERE account_id = :account_id
      AND name ILIKE :pattern ESCAPE '\\'
    ORDER BY created_at ASC, id ASC
    LIMIT 1
""")

_FIND_CLIENT_BY_EXACT_NAME_SQL = text(f"""
    SELECT {_CLIENT_COLUMNS}
    FROM clients
    WHERE account_id = :account_id
      AND LOWER(name) = LOWER(:name)
    ORDER BY created_at ASC, id ASC
    LIMIT 1
""")

_LIST_CLIENTS_SQL = text(f"""
    SELECT {_CLIENT_COLUMNS}
    FROM clients
    WHERE account_id = :account_id
      AND (CAST(:with_credit_only AS BOOLEAN) = FALSE OR total_credit > 0)
    ORDER BY total_credit DESC, created_at ASC
""")

_CREDIT_CLIENT_SQL = text(f"""
    UPDATE clients
    SET total_credit = total_credit + :amount,
        updated_at = NOW()
    WHERE id = :client_id AND account_id = :account_id
    RETURNING {_CLIENT_COLUMNS}
""")

_DEBIT_CLIENT_SQL = text(f"""
    UPDATE clients
    SET total_credit = total_credit - :amount,
        updated_at = NOW()
    WHERE id = :client_id
      AND account_id = :account_id
      AND total_credit >= :amount
    RETURNING {_CLIENT_COLUMNS}
""")

_DELETE_SETTLED_CLIENT_SQL = text("""
    DELETE FROM clients
    WHERE id = :client_id
      AND account_id = :account_id
      AND total_credit = 0
    RETURNING id
""")

# ---------------------------------------------------------------------------
# SQL: sales
# ---------------------------------------------------------------------------

_INSERT_SALE_SQL = text(f"""
    INSERT INTO sales (account_id, amount, payment_mode, customer_name, client_id, notes)
    VALUES (:account_id, :amount, :payment_mode, :customer_name,
            CAST(:client_id AS UUID), :notes)
    RETURNING {_SALE_COLUMNS}
""")

_GET_SALE_SQL = text(f"""
    SELECT {_SALE_COLUMNS}
    FROM sales
    WHERE id = :sale_id AND account_id = :account_id
""")

_DELETE_SALE_SQL = text(f"""
    DELETE FROM sales
    WHERE id = :sale_id AND account_id = :account_id
    RETURNING {_SALE_COLUMNS}
""")

_LIST_SALES_SQL = text(f"""
    SELECT {_SALE_COLUMNS}
    FROM sales
    WHERE account_id = :account_id
      AND (CAST(:date_from AS TIMESTAMPTZ) IS NULL OR sold_at >= CAST(:date_from AS TIMESTAMPTZ))
      AND (CAST(:date_to AS TIMESTAMPTZ) IS NULL OR sold_at <= CAST(:date_to AS TIMESTAMPTZ))
      AND (CAST(:payment_mode AS TEXT) IS NULL OR payment_mode = CAST(:payment_mode AS TEXT))
    ORDER BY sold_at DESC, id DESC
    LIMIT :limit
""")

_LIST_CLIENT_CREDIT_SALES_SQL = text(f"""
    SELECT {_SALE_COLUMNS}
    FROM sales
    WHERE account_id = :account_id
      AND client_id = :client_id
      AND payment_mode = 'credit'
    ORDER BY sold_at DESC, id DESC
""")

# ---------------------------------------------------------------------------
# SQL: payments
# ---------------------------------------------------------------------------

_INSERT_PAYMENT_SQL = text(f"""
    INSERT INTO payments (client_id, amount, notes)
    VALUES (:client_id, :amount, :notes)
    RETURNING {_PAYMENT_COLUMNS}
""")

_LIST_CLIENT_PAYMENTS_SQL = text(f"""
    SELECT {_PAYMENT_COLUMNS}
    FROM payments
    WHERE client_id = :client_id
    ORDER BY paid_at DESC, id DESC
""")

# ---------------------------------------------------------------------------
# SQL: expenses
# ---------------------------------------------------------------------------

_INSERT_EXPENSE_SQL = text(f"""
    INSERT INTO expenses (account_id, amount, reason, category, spent_at)
    VALUES (:account_id, :amount, :reason, :category,
            COALESCE(CAST(:spent_at AS TIMESTAMPTZ), NOW()))
    RETURNING {_EXPENSE_COLUMNS}
""")

_GET_EXPENSE_SQL = text(f"""
    SELECT {_EXPENSE_COLUMNS}
    FROM expenses
    WHERE id = :expense_id AND account_id = :account_id
""")

_DELETE_EXPENSE_SQL = text("""
    DELETE FROM expenses
    WHERE id = :expense_id AND account_id = :account_id
    RETURNING id
""")

_LIST_EXPENSES_SQL = text(f"""
    SELECT {_EXPENSE_COLUMNS}
    FROM expenses
    WHERE account_id = :account_id
      AND (CAST(:date_from AS TIMESTAMPTZ) IS NULL OR spent_at >= CAST(:date_from AS TIMESTAMPTZ))
      AND (CAST(:date_to AS TIMESTAMPTZ) IS NULL OR spent_at <= CAST(:date_to AS TIMESTAMPTZ))
      AND (CAST(:category AS TEXT) IS NULL OR category = CAST(:category AS TEXT))
    ORDER BY spent_at DESC, id DESC
    LIMIT :limit
""")


def _like_pattern(name: str) -> str:
    """Build an ILIKE substring pattern, escaping LIKE metacharacters."""
    escaped = name.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _row_to_client(row: object) -> Client:
    return Client(
        id=str(row.id),  # type: ignore[attr-defined]
        account_id=str(row.account_id),  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        phone=row.phone,  # type: ignore[attr-defined]
        address=row.address,  # type: ignore[attr-defined]
        total_credit=row.total_credit,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _row_to_sale(row: object) -> Sale:
    client_id = row.client_id  # type: ignore[attr-defined]
    return Sale(
        id=str(row.id),  # type: ignore[attr-defined]
        account_id=str(row.account_id),  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        payment_mode=row.payment_mode,  # type: ignore[attr-defined]
        customer_name=row.customer_name,  # type: ignore[attr-defined]
        client_id=str(client_id) if client_id is not None else None,
        notes=row.notes,  # type: ignore[attr-defined]
        sold_at=row.sold_at,  # type: ignore[attr-defined]
    )


def _row_to_payment(row: object) -> Payment:
    return Payment(
        id=str(row.id),  # type: ignore[attr-defined]
        client_id=str(row.client_id),  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        notes=row.notes,  # type: ignore[attr-defined]
        paid_at=row.paid_at,  # type: ignore[attr-defined]
    )


def _row_to_expense(row: object) -> Expense:
    return Expense(
        id=str(row.id),  # type: ignore[attr-defined]
        account_id=str(row.account_id),  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        reason=row.reason,  # type: ignore[attr-defined]
        category=row.category,  # type: ignore[attr-defined]
        spent_at=row.spent_at,  # type: ignore[attr-defined]
    )


class LedgerRepository:
    """Concrete repository: all balance operations atomic at the SQL level."""

    # --- clients ---

    async def insert_client(
        self,
        db: AsyncSession,
        account_id: str,
        name: str,
        phone: str | None,
        address: str | None,
    ) -> Client:
        result = await db.execute(
            _INSERT_CLIENT_SQL,
            {"account_id": account_id, "name": name, "phone": phone, "address": address},
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Client insert returned no rows; this should never happen")
        return _row_to_client(row)

    async def get_client(
        self, db: AsyncSession, account_id: str, client_id: str
    ) -> Client | None:
        result = await db.execute(
            _GET_CLIENT_SQL, {"account_id": account_id, "client_id": client_id}
        )
        row = result.fetchone()
        return _row_to_client(row) if row else None

    async def find_client_by_name(
        self, db: AsyncSession, account_id: str, name: str
    ) -> Client | None:
        result = await db.execute(
            _FIND_CLIENT_BY_NAME_SQL,
            {"account_id": account_id, "pattern": _like_pattern(name)},
        )
        row = result.fetchone()
        return _row_to_client(row) if row else None

    async def find_client_by_exact_name(
        self, db: AsyncSession, account_id: str, name: str
    ) -> Client | None:
        result = await db.execute(
            _FIND_CLIENT_BY_EXACT_NAME_SQL, {"account_id": account_id, "name": name}
        )
        row = result.fetchone()
        return _row_to_client(row) if row else None

    async def list_clients(
        self, db: AsyncSession, account_id: str, with_credit_only: bool
    ) -> list[Client]:
        result = await db.execute(
            _LIST_CLIENTS_SQL,
            {"account_id": account_id, "with_credit_only": with_credit_only},
        )
        return [_row_to_client(row) for row in result.fetchall()]

    async def credit_client(
        self, db: AsyncSession, account_id: str, client_id: str, amount: int
    ) -> Client | None:
        result = await db.execute(
            _CREDIT_CLIENT_SQL,
            {"account_id": account_id, "client_id": client_id, "amount": amount},
        )
        row = result.fetchone()
        return _row_to_client(row) if row else None

    async def debit_client(
        self, db: AsyncSession, account_id: str, client_id: str, amount: int
    ) -> Client | None:
        result = await db.execute(
            _DEBIT_CLIENT_SQL,
            {"account_id": account_id, "client_id": client_id, "amount": amount},
        )
        row = result.fetchone()
        return _row_to_client(row) if row else None

    async def delete_settled_client(
        self, db: AsyncSession, account_id: str, client_id: str
    ) -> bool:
        result = await db.execute(
            _DELETE_SETTLED_CLIENT_SQL, {"account_id": account_id, "client_id": client_id}
        )
        return result.fetchone() is not None

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
    ) -> Sale:
        result = await db.execute(
            _INSERT_SALE_SQL,
            {
                "account_id": account_id,
                "amount": amount,
                "payment_mode": payment_mode,
                "customer_name": customer_name,
                "client_id": client_id,
                "notes": notes,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Sale insert returned no rows; this should never happen")
        return _row_to_sale(row)

    async def get_sale(
        self, db: AsyncSession, account_id: str, sale_id: str
    ) -> Sale | None:
        result = await db.execute(_GET_SALE_SQL, {"account_id": account_id, "sale_id": sale_id})
        row = result.fetchone()
        return _row_to_sale(row) if row else None

    async def delete_sale(
        self, db: AsyncSession, account_id: str, sale_id: str
    ) -> Sale | None:
        result = await db.execute(
            _DELETE_SALE_SQL, {"account_id": account_id, "sale_id": sale_id}
        )
        row = result.fetchone()
        return _row_to_sale(row) if row else None

    async def list_sales(
        self,
        db: AsyncSession,
        account_id: str,
        date_from: datetime | None,
        date_to: datetime | None,
        payment_mode: str | None,
        limit: int,
    ) -> list[Sale]:
        result = await db.execute(
            _LIST_SALES_SQL,
            {
                "account_id": account_id,
                "date_from": date_from,
                "date_to": date_to,
                "payment_mode": payment_mode,
                "limit": limit,
            },
        )
        return [_row_to_sale(row) for row in result.fetchall()]

    async def list_client_credit_sales(
        self, db: AsyncSession, account_id: str, client_id: str
    ) -> list[Sale]:
        result = await db.execute(
            _LIST_CLIENT_CREDIT_SALES_SQL, {"account_id": account_id, "client_id": client_id}
        )
        return [_row_to_sale(row) for row in result.fetchall()]

    # --- payments ---

    async def insert_payment(
        self, db: AsyncSession, client_id: str, amount: int, notes: str | None
    ) -> Payment:
        result = await db.execute(
            _INSERT_PAYMENT_SQL, {"client_id": client_id, "amount": amount, "notes": notes}
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Payment insert returned no rows; this should never happen")
        return _row_to_payment(row)

    async def list_client_payments(
        self, db: AsyncSession, client_id: str
    ) -> list[Payment]:
        result = await db.execute(_LIST_CLIENT_PAYMENTS_SQL, {"client_id": client_id})
        return [_row_to_payment(row) for row in result.fetchall()]

    # --- expenses ---

    async def insert_expense(
        self,
        db: AsyncSession,
        account_id: str,
        amount: int,
        reason: str,
        category: str | None,
        spent_at: datetime | None,
    ) -> Expense:
        result = await db.execute(
            _INSERT_EXPENSE_SQL,
            {
                "account_id": account_id,
                "amount": amount,
                "reason": reason,
                "category": category,
                "spent_at": spent_at,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Expense insert returned no rows; this should never happen")
        return _row_to_expense(row)

    async def get_expense(
        self, db: AsyncSession, account_id: str, expense_id: str
    ) -> Expense | None:
        result = await db.execute(
            _GET_EXPENSE_SQL, {"account_id": account_id, "expense_id": expense_id}
        )
        row = result.fetchone()
        return _row_to_expense(row) if row else None

    async def delete_expense(
        self, db: AsyncSession, account_id: str, expense_id: str
    ) -> bool:
        result = await db.execute(
            _DELETE_EXPENSE_SQL, {"account_id": account_id, "expense_id": expense_id}
        )
        return result.fetchone() is not None

    async def list_expenses(
        self,
        db: AsyncSession,
        account_id: str,
        date_from: datetime | None,
        date_to: datetime | None,
        category: str | None,
        limit: int,
    ) -> list[Expense]:
        result = await db.execute(
            _LIST_EXPENSES_SQL,
            {
                "account_id": account_id,
                "date_from": date_from,
                "date_to": date_to,
                "category": category,
                "limit": limit,
            },
        )
        return [_row_to_expense(row) for row in result.fetchall()]
