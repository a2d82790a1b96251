"""econ_invest REST API."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.econ_common.database import get_db_session
from src.econ_common.response import ApiResponse, api_result, success_response
from src.econ_invest.application.schemas import PurchaseRequest
from src.econ_invest.application.service import InvestmentApplicationService

router = APIRouter(prefix="/investments", tags=["investments"])

_service = InvestmentApplicationService()

DbSession = Annotated[AsyncSession, Depends(get_db_session)]


@router.get("/products")
async def list_products(request: Request) -> ApiResponse:
    resp = success_response([item.model_dump() for item in _service.list_products()])
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/{character_id}/products")
async def list_available_products(
    character_id: str, db: DbSession, request: Request, response: Response
) -> ApiResponse:
    result = await _service.list_available_products(db, character_id)
    return api_result(result, request, response)


@router.post("/{character_id}")
async def purchase(
    character_id: str,
    body: PurchaseRequest,
    db: DbSession,
    request: Request,
    response: Response,
) -> ApiResponse:
    result = await _service.purchase(db, character_id, body.product_id, body.amount_cents)
    return api_result(result, request, response)


@router.get("/{character_id}")
async def get_portfolio(
    character_id: str, db: DbSession, request: Request, response: Response
) -> ApiResponse:
    result = await _service.get_portfolio(db, character_id)
    return api_result(result, request, response)


@router.post("/{character_id}/{investment_id}/liquidate")
async def liquidate(
    character_id: str,
    investment_id: str,
    db: DbSession,
    request: Request,
    response: Response,
) -> ApiResponse:
    result = await _service.liquidate(db, character_id, investment_id)
    return api_result(result, request, response)
