"""CommandApplier: turns a validated interpreter command into ledger operations.

Each command maps to exactly one ledger operation, which owns its own
transaction. Failures surface as the ledger's typed errors so the caller can
show them to the merchant and let them retry.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_commands.domain.models import Command, CommandResult
from src.bk_commands.domain.validation import validate_command
from src.bk_common.enums import CommandType, PaymentMode
from src.bk_common.errors import CommandRejectedError, DuplicateClientError, ValidationError
from src.bk_ledger.application.service import LedgerApplicationService

logger = logging.getLogger(__name__)


def _amount(cmd: Command) -> int:
    if cmd.amount is None:
        raise ValidationError("Amount must be greater than 0")
    return cmd.amount


def _text(value: str | None, problem: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(problem)
    return value.strip()


class CommandApplier:
    def __init__(self, ledger: LedgerApplicationService | None = None) -> None:
        self._ledger = ledger if ledger is not None else LedgerApplicationService()

    async def apply(self, db: AsyncSession, account_id: str, cmd: Command) -> CommandResult:
        if cmd.type == CommandType.ERROR:
            raise CommandRejectedError(cmd.message or "Command not understood")

        errors = validate_command(cmd)
        if errors:
            logger.info("Command %s rejected for account %s: %s", cmd.type, account_id, errors)
            raise ValidationError(", ".join(errors))

        if cmd.type == CommandType.SALE:
            result = await self._apply_sale(db, account_id, cmd)
        elif cmd.type == CommandType.EXPENSE:
            result = await self._apply_expense(db, account_id, cmd)
        else:
            result = await self._apply_new_client(db, account_id, cmd)

        logger.info("Command %s applied for account %s: %s", cmd.type, account_id, result.message)
        return result

    async def _apply_sale(self, db: AsyncSession, account_id: str, cmd: Command) -> CommandResult:
        amount = _amount(cmd)
        if cmd.payment_mode == PaymentMode.CREDIT:
            client_name = _text(cmd.client_name, "Client name is required for a credit sale")
            sale = await self._ledger.record_credit_sale(
                db, account_id, amount, client_name=client_name, notes=cmd.notes
            )
            message = f"Credit sale of {amount} francs recorded for {client_name}"
        else:
            sale = await self._ledger.record_cash_sale(
                db, account_id, amount, label=cmd.client_name, notes=cmd.notes
            )
            message = f"Cash sale of {amount} francs recorded"
        return CommandResult(message=message, data=sale.model_dump())

    async def _apply_expense(
        self, db: AsyncSession, account_id: str, cmd: Command
    ) -> CommandResult:
        amount = _amount(cmd)
        reason = _text(cmd.reason, "Expense reason is required")
        expense = await self._ledger.record_expense(db, account_id, amount, reason, cmd.category)
        return CommandResult(
            message=f"Expense of {amount} francs recorded for {expense.reason}",
            data=expense.model_dump(),
        )

    async def _apply_new_client(
        self, db: AsyncSession, account_id: str, cmd: Command
    ) -> CommandResult:
        name = _text(cmd.name, "Client name is required")
        if await self._ledger.find_client_by_exact_name(db, account_id, name) is not None:
            raise DuplicateClientError(name)
        client = await self._ledger.create_client(
            db, account_id, name, cmd.phone or None, cmd.address or None
        )
        message = f"Client {name} created"
        if client.phone:
            message = f"{message} with number {client.phone}"
        return CommandResult(message=message, data=client.model_dump())
