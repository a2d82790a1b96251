"""econ_loan REST API."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.econ_common.database import get_db_session
from src.econ_common.response import ApiResponse, api_result
from src.econ_loan.application.schemas import LoanApplicationRequest, LoanPaymentRequest
from src.econ_loan.application.service import LoanApplicationService

router = APIRouter(prefix="/loans", tags=["loans"])

_service = LoanApplicationService()

DbSession = Annotated[AsyncSession, Depends(get_db_session)]


@router.post("/{character_id}")
async def apply_for_loan(
    character_id: str,
    body: LoanApplicationRequest,
    db: DbSession,
    request: Request,
    response: Response,
) -> ApiResponse:
    result = await _service.apply_for_loan(
        db,
        character_id,
        body.amount_cents,
        body.term_months,
        body.purpose.value,
        body.collateral_type,
        body.collateral_value_cents,
    )
    return api_result(result, request, response)


@router.get("/{character_id}")
async def list_loans(
    character_id: str, db: DbSession, request: Request, response: Response
) -> ApiResponse:
    result = await _service.list_loans(db, character_id)
    return api_result(result, request, response)


@router.post("/{character_id}/{loan_id}/payments")
async def make_payment(
    character_id: str,
    loan_id: str,
    body: LoanPaymentRequest,
    db: DbSession,
    request: Request,
    response: Response,
) -> ApiResponse:
    result = await _service.make_payment(db, character_id, loan_id, body.amount_cents)
    return api_result(result, request, response)


@router.get("/{character_id}/{loan_id}/schedule")
async def get_amortization_schedule(
    character_id: str,
    loan_id: str,
    db: DbSession,
    request: Request,
    response: Response,
) -> ApiResponse:
    result = await _service.get_amortization_schedule(db, character_id, loan_id)
    return api_result(result, request, response)
