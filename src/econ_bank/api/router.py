"""econ_bank REST API: accounts, money movement, credit, ledger audit."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.econ_bank.application.schemas import (
    AmountRequest,
    CreditAdjustRequest,
    OpenAccountRequest,
)
from src.econ_bank.application.service import BankApplicationService
from src.econ_common.database import get_db_session
from src.econ_common.response import ApiResponse, api_result

router = APIRouter(prefix="/bank", tags=["bank"])

_service = BankApplicationService()

DbSession = Annotated[AsyncSession, Depends(get_db_session)]


@router.post("/accounts/{character_id}")
async def open_account(
    character_id: str,
    body: OpenAccountRequest,
    db: DbSession,
    request: Request,
    response: Response,
) -> ApiResponse:
    result = await _service.open_account(db, character_id, body.account_type.value)
    return api_result(result, request, response)


@router.get("/accounts/{character_id}")
async def get_account(
    character_id: str, db: DbSession, request: Request, response: Response
) -> ApiResponse:
    result = await _service.get_account(db, character_id)
    return api_result(result, request, response)


@router.get("/accounts/{character_id}/balance")
async def get_balance(
    character_id: str, db: DbSession, request: Request, response: Response
) -> ApiResponse:
    result = await _service.get_balance(db, character_id)
    return api_result(result, request, response)


@router.post("/accounts/{character_id}/deposit")
async def deposit(
    character_id: str,
    body: AmountRequest,
    db: DbSession,
    request: Request,
    response: Response,
) -> ApiResponse:
    result = await _service.deposit(db, character_id, body.amount_cents)
    return api_result(result, request, response)


@router.post("/accounts/{character_id}/withdraw")
async def withdraw(
    character_id: str,
    body: AmountRequest,
    db: DbSession,
    request: Request,
    response: Response,
) -> ApiResponse:
    result = await _service.withdraw(db, character_id, body.amount_cents)
    return api_result(result, request, response)


@router.post("/accounts/{character_id}/credit-score")
async def adjust_credit_score(
    character_id: str,
    body: CreditAdjustRequest,
    db: DbSession,
    request: Request,
    response: Response,
) -> ApiResponse:
    result = await _service.adjust_credit_score(db, character_id, body.delta)
    return api_result(result, request, response)


@router.post("/accounts/{character_id}/suspend")
async def suspend_account(
    character_id: str, db: DbSession, request: Request, response: Response
) -> ApiResponse:
    result = await _service.suspend_account(db, character_id)
    return api_result(result, request, response)


@router.post("/accounts/{character_id}/reactivate")
async def reactivate_account(
    character_id: str, db: DbSession, request: Request, response: Response
) -> ApiResponse:
    result = await _service.reactivate_account(db, character_id)
    return api_result(result, request, response)


@router.post("/accounts/{character_id}/close")
async def close_account(
    character_id: str, db: DbSession, request: Request, response: Response
) -> ApiResponse:
    result = await _service.close_account(db, character_id)
    return api_result(result, request, response)


@router.get("/accounts/{character_id}/transactions")
async def list_transactions(
    character_id: str,
    db: DbSession,
    request: Request,
    response: Response,
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    tx_type: str | None = Query(None, description="Filter by TransactionType"),
) -> ApiResponse:
    result = await _service.list_transactions(db, character_id, cursor, limit, tx_type)
    return api_result(result, request, response)


@router.get("/accounts/{character_id}/ledger-audit")
async def verify_ledger(
    character_id: str, db: DbSession, request: Request, response: Response
) -> ApiResponse:
    result = await _service.verify_ledger(db, character_id)
    return api_result(result, request, response)
