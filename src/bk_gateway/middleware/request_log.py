"""Request logging middleware.

The mobile app sends its own ``X-Request-ID`` so a merchant's retried voice
command can be traced end to end; a well-formed one is kept, anything else is
replaced by a fresh ``req_<12 hex>`` id. The id lands on ``request.state`` for
the ApiResponse envelope and is echoed back in the response header.

    INFO    [POST] /api/v1/commands/apply → 201 (41ms) req_a1b2c3d4e5f6
    WARNING [POST] /api/v1/clients/payments → 422 (12ms) app-7f3e
"""

import logging
import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("bk.request")

REQUEST_ID_HEADER = "X-Request-ID"
_CLIENT_ID_RE = re.compile(r"^[A-Za-z0-9_-]{1,64}$")
_QUIET_PATHS = frozenset({"/health"})


def resolve_request_id(incoming: str | None) -> str:
    if incoming and _CLIENT_ID_RE.match(incoming):
        return incoming
    return f"req_{uuid.uuid4().hex[:12]}"


def _level_for(path: str, status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    if path in _QUIET_PATHS:
        return logging.DEBUG
    return logging.INFO


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        response.headers[REQUEST_ID_HEADER] = request_id
        logger.log(
            _level_for(request.url.path, response.status_code),
            "[%s] %s → %d (%.0fms) %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        return response
