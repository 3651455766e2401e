"""FastAPI dependency: require_access.

Routers whose features are reserved to paying (or trialling) merchants add it
to their dependencies:

    router = APIRouter(dependencies=[Depends(require_access)])
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.bk_common.database import get_db_session
from src.bk_common.errors import SubscriptionRequiredError
from src.bk_entitlement.application.service import EntitlementApplicationService
from src.bk_entitlement.domain.models import AccessDecision
from src.bk_gateway.auth.dependencies import get_current_merchant
from src.bk_gateway.merchant.db_models import MerchantModel

_service = EntitlementApplicationService()


async def require_access(
    current_merchant: MerchantModel = Depends(get_current_merchant),
    db: AsyncSession = Depends(get_db_session),
) -> MerchantModel:
    """Return the merchant when their subscription grants access.

    Raises SubscriptionRequiredError (402) carrying the denial reason otherwise.
    Disabled entirely when ``settings.ENFORCE_SUBSCRIPTION`` is false.
    """
    if not settings.ENFORCE_SUBSCRIPTION:
        return current_merchant

    decision: AccessDecision = await _service.decide(db, str(current_merchant.id))
    if not decision.has_access:
        raise SubscriptionRequiredError(decision.reason or "no_subscription", decision.message)
    return current_merchant
