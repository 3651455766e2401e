"""Structured commands produced by the natural-language interpreter."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Command:
    type: str
    amount: int | None = None
    payment_mode: str | None = None
    client_name: str | None = None
    notes: str | None = None
    reason: str | None = None       # expense
    category: str | None = None     # expense
    name: str | None = None         # new client
    phone: str | None = None        # new client
    address: str | None = None      # new client
    message: str | None = None      # interpreter error


@dataclass
class CommandResult:
    message: str
    data: dict[str, Any] = field(default_factory=dict)
