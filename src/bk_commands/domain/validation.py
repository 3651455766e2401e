"""Independent re-validation of interpreter output.

The interpreter is not trusted: every command is checked again before it
touches the ledger. Returns the list of problems, empty when the command is
applicable.
"""

from src.bk_commands.domain.models import Command
from src.bk_common.enums import CommandType, PaymentMode
from src.bk_common.money import MAX_AMOUNT

_PAYMENT_MODES = {m.value for m in PaymentMode}


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _amount_problem(amount: int | None) -> str | None:
    if amount is None or isinstance(amount, bool) or amount <= 0:
        return "Amount must be greater than 0"
    if amount > MAX_AMOUNT:
        return f"Amount must not exceed {MAX_AMOUNT:,} F"
    return None


def validate_command(cmd: Command) -> list[str]:
    errors: list[str] = []

    if cmd.type == CommandType.SALE:
        problem = _amount_problem(cmd.amount)
        if problem:
            errors.append(problem)
        if cmd.payment_mode not in _PAYMENT_MODES:
            errors.append("Invalid payment mode")
        if cmd.payment_mode == PaymentMode.CREDIT and _blank(cmd.client_name):
            errors.append("Client name is required for a credit sale")

    elif cmd.type == CommandType.EXPENSE:
        problem = _amount_problem(cmd.amount)
        if problem:
            errors.append(problem)
        if _blank(cmd.reason):
            errors.append("Expense reason is required")

    elif cmd.type == CommandType.NEW_CLIENT:
        if _blank(cmd.name):
            errors.append("Client name is required")

    elif cmd.type == CommandType.ERROR:
        errors.append(cmd.message or "Command not understood")

    else:
        errors.append("Unrecognised command type")

    return errors
