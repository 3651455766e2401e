"""Domain models for bk_ledger: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Client:
    id: str
    account_id: str
    name: str
    phone: str | None
    address: str | None
    total_credit: int           # francs, Σ credit sales − Σ payments, never negative
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class Sale:
    id: str
    account_id: str
    amount: int                 # francs, > 0
    payment_mode: str           # PaymentMode value
    customer_name: str | None = None
    client_id: str | None = None
    notes: str | None = None
    sold_at: datetime | None = None

    @property
    def affects_balance(self) -> bool:
        return self.payment_mode == "credit" and self.client_id is not None


@dataclass
class Payment:
    id: str
    client_id: str
    amount: int                 # francs, > 0
    notes: str | None = None
    paid_at: datetime | None = None


@dataclass
class Expense:
    id: str
    account_id: str
    amount: int                 # francs, > 0
    reason: str
    category: str | None = None
    spent_at: datetime | None = None

