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
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError

from config.settings import settings
from src.mk_common.database import engine
from src.mk_common.errors import AppError, ServiceUnavailableError
from src.mk_common.redis_client import close_redis, get_redis
from src.mk_common.response import error_response
from src.mk_delivery.api.router import router as delivery_router
from src.mk_gateway.middleware.request_log import RequestLogMiddleware
from src.mk_invoice.api.router import router as invoice_router
from src.mk_order.api.router import router as order_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB + Redis connections. Shutdown: dispose."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    await get_redis()
    yield
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


def _render(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message, getattr(request.state, "request_id", None))
    return JSONResponse(status_code=exc.http_status, content=resp.model_dump())


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _render(request, exc)


@app.exception_handler(DBAPIError)
async def db_error_handler(request: Request, exc: DBAPIError) -> JSONResponse:
    # Connection drops, lock timeouts and a lost history-seq race all retry cleanly
    logger.warning("Database error on %s %s: %s", request.method, request.url.path, exc)
    return _render(request, ServiceUnavailableError("database temporarily unavailable"))


app.include_router(order_router, prefix="/api/v1")
app.include_router(invoice_router, prefix="/api/v1")
app.include_router(delivery_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
