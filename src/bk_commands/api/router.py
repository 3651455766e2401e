"""Command API: apply one structured command produced by the interpreter."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_commands.application.applier import CommandApplier
from src.bk_commands.application.schemas import CommandRequest, CommandResponse
from src.bk_common.database import get_db_session
from src.bk_common.response import ApiResponse, success_response
from src.bk_entitlement.api.dependencies import require_access
from src.bk_gateway.merchant.db_models import MerchantModel

router = APIRouter(prefix="/commands", tags=["commands"])

_applier = CommandApplier()


@router.post("/apply", status_code=status.HTTP_201_CREATED)
async def apply_command(
    body: CommandRequest,
    current_merchant: Annotated[MerchantModel, Depends(require_access)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    result = await _applier.apply(db, str(current_merchant.id), body.to_domain())
    data = CommandResponse.from_result(result, body)
    resp = success_response(data.model_dump(), message=result.message)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
