"""Pydantic schemas for bk_commands API.

Field aliases are the keys the interpreter emits.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.bk_commands.domain.models import Command, CommandResult
from src.bk_common.money import MAX_AMOUNT


class CommandRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str
    amount: int | None = Field(None, alias="montant", le=MAX_AMOUNT)
    payment_mode: str | None = Field(None, alias="modePaiement")
    client_name: str | None = Field(None, alias="nomClient", max_length=200)
    notes: str | None = Field(None, max_length=500)
    reason: str | None = Field(None, alias="motif", max_length=500)
    category: str | None = Field(None, alias="categorie", max_length=100)
    name: str | None = Field(None, alias="nom", max_length=200)
    phone: str | None = Field(None, alias="telephone", max_length=32)
    address: str | None = Field(None, alias="adresse", max_length=500)
    message: str | None = None

    def to_domain(self) -> Command:
        return Command(
            type=self.type,
            amount=self.amount,
            payment_mode=self.payment_mode,
            client_name=self.client_name,
            notes=self.notes,
            reason=self.reason,
            category=self.category,
            name=self.name,
            phone=self.phone,
            address=self.address,
            message=self.message,
        )


class CommandResponse(BaseModel):
    message: str
    data: dict[str, Any]
    command: dict[str, Any]

    @classmethod
    def from_result(cls, result: CommandResult, command: CommandRequest) -> "CommandResponse":
        return cls(
            message=result.message,
            data=result.data,
            command=command.model_dump(by_alias=True, exclude_none=True),
        )
