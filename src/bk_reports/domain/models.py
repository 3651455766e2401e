"""Aggregates returned by the reports repository."""

from dataclasses import dataclass


@dataclass
class SalesTotals:
    total: int = 0
    cash: int = 0
    credit: int = 0
    count: int = 0


@dataclass
class ExpenseTotals:
    total: int = 0
    count: int = 0


@dataclass
class CreditTotals:
    outstanding: int = 0
    debtor_count: int = 0


@dataclass
class Debtor:
    client_id: str
    name: str
    phone: str | None
    total_credit: int
