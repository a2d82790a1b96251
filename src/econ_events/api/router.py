"""econ_events REST API."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.econ_common.database import get_db_session
from src.econ_common.response import ApiResponse, api_result, success_response
from src.econ_events.application.service import EventApplicationService

router = APIRouter(prefix="/events", tags=["events"])

_service = EventApplicationService()

DbSession = Annotated[AsyncSession, Depends(get_db_session)]


@router.get("/templates")
async def list_templates(request: Request) -> ApiResponse:
    resp = success_response([item.model_dump() for item in _service.list_templates()])
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/active")
async def list_active_events(
    db: DbSession, request: Request, response: Response
) -> ApiResponse:
    result = await _service.list_active_events(db)
    return api_result(result, request, response)


@router.get("/history")
async def get_event_history(
    db: DbSession,
    request: Request,
    response: Response,
    limit: int = Query(20, ge=1, le=100),
) -> ApiResponse:
    result = await _service.get_event_history(db, limit)
    return api_result(result, request, response)


@router.post("/trigger")
async def trigger_random_event(
    db: DbSession, request: Request, response: Response
) -> ApiResponse:
    result = await _service.trigger_random_event(db)
    return api_result(result, request, response)


@router.post("/trigger/{event_type}")
async def trigger_specific_event(
    event_type: str, db: DbSession, request: Request, response: Response
) -> ApiResponse:
    result = await _service.trigger_specific_event(db, event_type)
    return api_result(result, request, response)


@router.post("/process-impacts")
async def process_ongoing_impacts(db: DbSession, request: Request) -> ApiResponse:
    summary = await _service.process_ongoing_impacts(db)
    resp = success_response(summary.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
