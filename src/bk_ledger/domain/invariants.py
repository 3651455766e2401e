"""Client balance invariant: total_credit == Σ credit sales − Σ payments ≥ 0."""

import logging

from src.bk_ledger.domain.models import Client, Payment, Sale

logger = logging.getLogger(__name__)


def expected_balance(credit_sales: list[Sale], payments: list[Payment]) -> int:
    """Replay a client's history into the balance it must carry."""
    charged = sum(s.amount for s in credit_sales if s.affects_balance)
    paid = sum(p.amount for p in payments)
    return charged - paid


def verify_client_balance(
    client: Client, credit_sales: list[Sale], payments: list[Payment]
) -> list[str]:
    """Check the stored aggregate against its history. Returns violation strings."""
    violations: list[str] = []
    replayed = expected_balance(credit_sales, payments)
    if client.total_credit != replayed:
        violations.append(
            f"client {client.id}: stored total_credit={client.total_credit} "
            f"!= replayed balance={replayed}"
        )
    if client.total_credit < 0:
        violations.append(f"client {client.id}: negative total_credit={client.total_credit}")
    for msg in violations:
        logger.error(msg)
    return violations
