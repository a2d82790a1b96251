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

from config.settings import settings
from src.econ_bank.api.router import router as bank_router
from src.econ_common.database import async_session_factory, engine
from src.econ_common.errors import AppError
from src.econ_common.request_log import RequestLogMiddleware
from src.econ_common.response import error_response
from src.econ_events.api.router import router as events_router
from src.econ_invest.api.router import router as invest_router
from src.econ_loan.api.router import router as loan_router
from src.econ_market.api.router import router as market_router
from src.econ_orchestrator.api.router import router as economy_router
from src.econ_scheduler.jobs import build_scheduler
from src.econ_supply.api.router import router as supply_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify the DB connection, start the scheduler when enabled.
    Shutdown: stop the scheduler, dispose the engine."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    scheduler = None
    if settings.SCHEDULER_ENABLED:
        scheduler = build_scheduler(settings, async_session_factory)
        scheduler.start()
    else:
        logger.info("Maintenance scheduler disabled")
    yield
    if scheduler is not None:
        await scheduler.stop()
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(bank_router, prefix="/api/v1")
app.include_router(loan_router, prefix="/api/v1")
app.include_router(invest_router, prefix="/api/v1")
app.include_router(market_router, prefix="/api/v1")
app.include_router(events_router, prefix="/api/v1")
app.include_router(supply_router, prefix="/api/v1")
app.include_router(economy_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
