"""econ_market REST API."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.econ_common.database import get_db_session
from src.econ_common.response import ApiResponse, api_result
from src.econ_market.application.schemas import TradeRequest
from src.econ_market.application.service import MarketApplicationService

router = APIRouter(prefix="/market", tags=["market"])

_service = MarketApplicationService()

DbSession = Annotated[AsyncSession, Depends(get_db_session)]


@router.post("/initialize")
async def initialize_market(
    db: DbSession, request: Request, response: Response
) -> ApiResponse:
    result = await _service.initialize_market(db)
    return api_result(result, request, response)


@router.get("/companies")
async def list_companies(db: DbSession, request: Request, response: Response) -> ApiResponse:
    result = await _service.list_companies(db)
    return api_result(result, request, response)


@router.get("/companies/{company_id}")
async def get_company(
    company_id: str, db: DbSession, request: Request, response: Response
) -> ApiResponse:
    result = await _service.get_company(db, company_id)
    return api_result(result, request, response)


@router.get("/companies/{company_id}/history")
async def get_price_history(
    company_id: str,
    db: DbSession,
    request: Request,
    response: Response,
    limit: int = Query(30, ge=1, le=500),
) -> ApiResponse:
    result = await _service.get_price_history(db, company_id, limit)
    return api_result(result, request, response)


@router.get("/overview")
async def get_market_overview(
    db: DbSession, request: Request, response: Response
) -> ApiResponse:
    result = await _service.get_market_overview(db)
    return api_result(result, request, response)


@router.post("/{character_id}/buy")
async def buy_stock(
    character_id: str,
    body: TradeRequest,
    db: DbSession,
    request: Request,
    response: Response,
) -> ApiResponse:
    result = await _service.buy_stock(db, character_id, body.company_id, body.shares)
    return api_result(result, request, response)


@router.post("/{character_id}/sell")
async def sell_stock(
    character_id: str,
    body: TradeRequest,
    db: DbSession,
    request: Request,
    response: Response,
) -> ApiResponse:
    result = await _service.sell_stock(db, character_id, body.company_id, body.shares)
    return api_result(result, request, response)


@router.get("/{character_id}/portfolio")
async def get_portfolio(
    character_id: str, db: DbSession, request: Request, response: Response
) -> ApiResponse:
    result = await _service.get_portfolio(db, character_id)
    return api_result(result, request, response)
