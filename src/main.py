"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from config.settings import settings
from src.bk_commands.api.router import router as commands_router
from src.bk_common.database import check_database, engine
from src.bk_common.errors import AppError, ValidationError
from src.bk_common.response import error_response
from src.bk_entitlement.api.router import router as subscription_router
from src.bk_gateway.api.router import router as auth_router
from src.bk_gateway.middleware.request_log import RequestLogMiddleware
from src.bk_ledger.api.router import router as ledger_router
from src.bk_reports.api.router import router as stats_router

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify the DB connection. Shutdown: dispose the pool."""
    await check_database()
    logger.info("%s started (subscriptions enforced: %s)", settings.APP_NAME, settings.ENFORCE_SUBSCRIPTION)
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error("%s on %s %s: %s", exc.kind, request.method, request.url.path, exc.message)
    resp = error_response(exc.code, exc.message, exc.kind, exc.data)
    request_id = _request_id(request)
    if request_id:
        resp.request_id = request_id
    return JSONResponse(status_code=exc.http_status, content=resp.model_dump())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'] if p != 'body')}: {err['msg']}"
        for err in exc.errors()
    )
    return await app_error_handler(request, ValidationError(problems or "Invalid request"))


app.include_router(auth_router, prefix="/api/v1")
app.include_router(ledger_router, prefix="/api/v1")
app.include_router(commands_router, prefix="/api/v1")
app.include_router(subscription_router, prefix="/api/v1")
app.include_router(stats_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
