"""econ_orchestrator REST API."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.econ_common.database import get_db_session
from src.econ_common.response import ApiResponse, api_result, success_response
from src.econ_orchestrator.application.schemas import ServiceRequest
from src.econ_orchestrator.application.service import IntegrationService

router = APIRouter(prefix="/economy", tags=["economy"])

_service = IntegrationService()

DbSession = Annotated[AsyncSession, Depends(get_db_session)]


@router.get("/packages/{character_id}/{target_class}")
async def get_service_package(
    character_id: str,
    target_class: str,
    db: DbSession,
    request: Request,
    response: Response,
) -> ApiResponse:
    result = await _service.get_service_package(db, character_id, target_class)
    return api_result(result, request, response)


@router.post("/services/{character_id}")
async def process_service(
    character_id: str,
    body: ServiceRequest,
    db: DbSession,
    request: Request,
    response: Response,
) -> ApiResponse:
    result = await _service.process_service(
        db,
        character_id,
        body.target_class.value,
        body.npc_id,
        body.payment_type.value,
        body.term_months,
    )
    return api_result(result, request, response)


@router.get("/status/{character_id}")
async def get_character_status(
    character_id: str, db: DbSession, request: Request, response: Response
) -> ApiResponse:
    result = await _service.get_character_status(db, character_id)
    return api_result(result, request, response)


@router.get("/report")
async def get_economic_report(
    db: DbSession, request: Request, response: Response
) -> ApiResponse:
    result = await _service.get_economic_report(db)
    return api_result(result, request, response)


@router.post("/maintenance/daily")
async def perform_daily_maintenance(db: DbSession, request: Request) -> ApiResponse:
    report = await _service.perform_daily_maintenance(db)
    resp = success_response(report.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/maintenance/monthly")
async def perform_monthly_maintenance(db: DbSession, request: Request) -> ApiResponse:
    report = await _service.perform_monthly_maintenance(db)
    resp = success_response(report.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
