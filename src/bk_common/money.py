"""Integer arithmetic utilities for CFA franc amounts.

The franc has no minor unit: every amount and balance is a plain int.
No float, no Decimal.
"""

# Upper bound per transaction; keeps accumulated balances far inside BIGINT.
MAX_AMOUNT = 1_000_000_000_000


def validate_amount(amount: int) -> None:
    """Validate that an amount is a strictly positive integer no larger than MAX_AMOUNT."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValueError(f"Amount must be an integer number of francs, got {amount!r}")
    if amount <= 0:
        raise ValueError(f"Amount must be greater than 0, got {amount}")
    if amount > MAX_AMOUNT:
        raise ValueError(f"Amount must not exceed {MAX_AMOUNT:,} F, got {amount}")


def francs_to_display(amount: int) -> str:
    """Convert francs to display string: 5000 -> '5,000 F', -1200 -> '-1,200 F'."""
    if amount < 0:
        return f"-{-amount:,} F"
    return f"{amount:,} F"
