"""econ_supply REST API."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.econ_common.database import get_db_session
from src.econ_common.enums import CharacterClass
from src.econ_common.response import ApiResponse, api_result, success_response
from src.econ_supply.application.schemas import PurchaseOrderRequest
from src.econ_supply.application.service import SupplyApplicationService

router = APIRouter(prefix="/supply", tags=["supply"])

_service = SupplyApplicationService()

DbSession = Annotated[AsyncSession, Depends(get_db_session)]


@router.post("/initialize")
async def initialize_suppliers(
    db: DbSession, request: Request, response: Response
) -> ApiResponse:
    result = await _service.initialize_suppliers(db)
    return api_result(result, request, response)


@router.get("/gifts/{target_class}")
async def list_gifts(target_class: CharacterClass, request: Request) -> ApiResponse:
    gifts = _service.list_gifts(target_class.value)
    resp = success_response([g.model_dump() for g in gifts])
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/suppliers")
async def list_suppliers(
    db: DbSession,
    request: Request,
    response: Response,
    specialty: str | None = Query(None),
) -> ApiResponse:
    result = await _service.list_suppliers(db, specialty)
    return api_result(result, request, response)


@router.get("/gift-cost/{target_class}")
async def calculate_gift_cost(
    target_class: str, db: DbSession, request: Request, response: Response
) -> ApiResponse:
    result = await _service.calculate_gift_cost(db, target_class)
    return api_result(result, request, response)


@router.post("/orders")
async def create_purchase_order(
    body: PurchaseOrderRequest, db: DbSession, request: Request, response: Response
) -> ApiResponse:
    result = await _service.create_purchase_order(
        db, body.target_class.value, body.supplier_id, body.ordered_by
    )
    return api_result(result, request, response)


@router.get("/suppliers/{supplier_id}/inventory/{target_class}")
async def check_supplier_inventory(
    supplier_id: str,
    target_class: str,
    db: DbSession,
    request: Request,
    response: Response,
) -> ApiResponse:
    result = await _service.check_supplier_inventory(db, supplier_id, target_class)
    return api_result(result, request, response)
