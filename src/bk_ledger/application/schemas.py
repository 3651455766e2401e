"""Pydantic request/response schemas for bk_ledger API."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from src.bk_common.enums import PaymentMode
from src.bk_common.money import MAX_AMOUNT, francs_to_display
from src.bk_ledger.domain.models import Client, Expense, Payment, Sale

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("must not be empty")
    return v


def _strip_optional(v: str | None) -> str | None:
    if v is None:
        return None
    v = v.strip()
    return v or None


class CreateClientRequest(BaseModel):
    name: str = Field(..., max_length=200, description="Client display name")
    phone: str | None = Field(None, max_length=32)
    address: str | None = Field(None, max_length=500)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        return _strip_required(v)

    @field_validator("phone", "address")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        return _strip_optional(v)


class RecordPaymentRequest(BaseModel):
    client_id: uuid.UUID
    amount: int = Field(..., gt=0, le=MAX_AMOUNT, description="Amount repaid in francs")
    notes: str | None = Field(None, max_length=500)


class CreateSaleRequest(BaseModel):
    amount: int = Field(..., gt=0, le=MAX_AMOUNT, description="Sale amount in francs")
    payment_mode: PaymentMode
    customer_name: str | None = Field(None, max_length=200)
    client_id: uuid.UUID | None = None
    notes: str | None = Field(None, max_length=500)

    @field_validator("customer_name", "notes")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        return _strip_optional(v)


class CreateExpenseRequest(BaseModel):
    amount: int = Field(..., gt=0, le=MAX_AMOUNT, description="Expense amount in francs")
    reason: str = Field(..., max_length=500)
    category: str | None = Field(None, max_length=100)
    spent_at: datetime | None = None

    @field_validator("reason")
    @classmethod
    def reason_not_blank(cls, v: str) -> str:
        return _strip_required(v)

    @field_validator("category")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        return _strip_optional(v)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


def _iso(ts: datetime | None) -> str:
    return ts.isoformat() if ts else ""


class ClientOut(BaseModel):
    id: str
    name: str
    phone: str | None
    address: str | None
    total_credit: int
    total_credit_display: str
    created_at: str

    @classmethod
    def from_domain(cls, c: Client) -> "ClientOut":
        return cls(
            id=c.id,
            name=c.name,
            phone=c.phone,
            address=c.address,
            total_credit=c.total_credit,
            total_credit_display=francs_to_display(c.total_credit),
            created_at=_iso(c.created_at),
        )


class SaleOut(BaseModel):
    id: str
    amount: int
    amount_display: str
    payment_mode: str
    customer_name: str | None
    client_id: str | None
    notes: str | None
    sold_at: str

    @classmethod
    def from_domain(cls, s: Sale) -> "SaleOut":
        return cls(
            id=s.id,
            amount=s.amount,
            amount_display=francs_to_display(s.amount),
            payment_mode=s.payment_mode,
            customer_name=s.customer_name,
            client_id=s.client_id,
            notes=s.notes,
            sold_at=_iso(s.sold_at),
        )


class PaymentOut(BaseModel):
    id: str
    client_id: str
    amount: int
    amount_display: str
    notes: str | None
    paid_at: str

    @classmethod
    def from_domain(cls, p: Payment) -> "PaymentOut":
        return cls(
            id=p.id,
            client_id=p.client_id,
            amount=p.amount,
            amount_display=francs_to_display(p.amount),
            notes=p.notes,
            paid_at=_iso(p.paid_at),
        )


class ExpenseOut(BaseModel):
    id: str
    amount: int
    amount_display: str
    reason: str
    category: str | None
    spent_at: str

    @classmethod
    def from_domain(cls, e: Expense) -> "ExpenseOut":
        return cls(
            id=e.id,
            amount=e.amount,
            amount_display=francs_to_display(e.amount),
            reason=e.reason,
            category=e.category,
            spent_at=_iso(e.spent_at),
        )


class ClientListResponse(BaseModel):
    items: list[ClientOut]
    total: int


class ClientDetailResponse(BaseModel):
    client: ClientOut
    credit_sales: list[SaleOut]
    payments: list[PaymentOut]


class SaleResponse(BaseModel):
    sale: SaleOut
    client: ClientOut | None = None  # present when the sale moved a client balance


class SaleListResponse(BaseModel):
    items: list[SaleOut]
    total: int


class SaleReversalResponse(BaseModel):
    sale_id: str
    reversed_amount: int
    client: ClientOut | None = None


class PaymentResponse(BaseModel):
    payment: PaymentOut
    client: ClientOut


class ExpenseListResponse(BaseModel):
    items: list[ExpenseOut]
    total: int


class BalanceAuditResponse(BaseModel):
    client_id: str
    stored_total_credit: int
    replayed_total_credit: int
    consistent: bool
    violations: list[str]
