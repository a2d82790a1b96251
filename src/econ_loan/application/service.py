"""LoanApplicationService: origination, repayment, schedules.

``originate_loan`` and ``pay_loan`` run inside the caller's unit and raise on
rule violations; the orchestrator composes them into larger units. The public
``apply_for_loan`` / ``make_payment`` wrap them in their own unit.
"""

import logging
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from src.econ_bank.domain.models import Account
from src.econ_bank.domain.repository import AccountRepositoryProtocol
from src.econ_bank.infrastructure.persistence import AccountRepository
from src.econ_common.cents import cents_to_display
from src.econ_common.datetime_utils import utc_now
from src.econ_common.enums import LoanPurpose, LoanStatus, TransactionType
from src.econ_common.errors import (
    AccountNotFoundError,
    InvalidAmountError,
    InvalidParameterError,
    LoanIneligibleError,
    LoanNotFoundError,
)
from src.econ_common.id_generator import generate_id
from src.econ_common.response import OperationResult
from src.econ_common.unit_of_work import run_operation
from src.econ_loan.application.schemas import (
    AmortizationResponse,
    LoanItem,
    LoanPaymentResponse,
    LoanTermsResponse,
    ScheduleRowItem,
)
from src.econ_loan.domain.amortization import (
    amortization_schedule,
    loan_rate,
    monthly_payment,
    rejection_reason,
    split_payment,
)
from src.econ_loan.domain.models import Loan, LoanPayment
from src.econ_loan.domain.repository import LoanRepositoryProtocol
from src.econ_loan.infrastructure.persistence import LoanRepository

logger = logging.getLogger(__name__)

PAYMENT_INTERVAL = timedelta(days=30)
MAX_TERM_MONTHS = 360
PAYOFF_CREDIT_BONUS = 25
ON_TIME_CREDIT_BONUS = 2


class LoanApplicationService:
    def __init__(
        self,
        repo: LoanRepositoryProtocol | None = None,
        accounts: AccountRepositoryProtocol | None = None,
    ) -> None:
        self._repo: LoanRepositoryProtocol = repo or LoanRepository()
        self._accounts: AccountRepositoryProtocol = accounts or AccountRepository()

    async def _require_account(
        self, db: AsyncSession, character_id: str, for_update: bool = False
    ) -> Account:
        account = await self._accounts.get_account(db, character_id, for_update=for_update)
        if account is None:
            raise AccountNotFoundError(character_id)
        return account

    async def _owned_active_loan(
        self, db: AsyncSession, account: Account, loan_id: str
    ) -> Loan:
        loan = await self._repo.get_loan_for_update(db, loan_id)
        if loan is None or loan.account_id != account.id or not loan.is_active:
            raise LoanNotFoundError(loan_id)
        return loan

    # ------------------------------------------------------------------
    # Composable steps (no commit)
    # ------------------------------------------------------------------

    async def originate_loan(
        self,
        db: AsyncSession,
        character_id: str,
        amount: int,
        term_months: int,
        purpose: str,
        collateral_type: str | None = None,
        collateral_value: int = 0,
    ) -> Loan:
        """Approve, book and disburse a loan in the caller's unit."""
        if amount <= 0:
            raise InvalidAmountError()
        if not 1 <= term_months <= MAX_TERM_MONTHS:
            raise InvalidParameterError(f"term_months must be 1-{MAX_TERM_MONTHS}")
        try:
            purpose = LoanPurpose(purpose).value
        except ValueError:
            raise InvalidParameterError(f"purpose {purpose}") from None

        # Account row lock serialises originations so the active-loan cap holds
        account = await self._require_account(db, character_id, for_update=True)
        active = await self._repo.count_active(db, account.id)
        reason = rejection_reason(amount, account.credit_limit, active, account.credit_score)
        if reason is not None:
            raise LoanIneligibleError(reason)

        rate = loan_rate(
            account.interest_rate, purpose, account.credit_score, collateral_type is not None
        )
        loan = await self._repo.create_loan(
            db,
            Loan(
                id=generate_id("LN"),
                account_id=account.id,
                principal=amount,
                interest_rate=rate,
                term_months=term_months,
                monthly_payment=monthly_payment(amount, rate, term_months),
                remaining_balance=amount,
                status=LoanStatus.ACTIVE.value,
                purpose=purpose,
                collateral_type=collateral_type,
                collateral_value=collateral_value,
                next_payment_due=utc_now() + PAYMENT_INTERVAL,
            ),
        )
        await self._accounts.post_transaction(
            db,
            character_id,
            amount,
            TransactionType.LOAN.value,
            f"Loan disbursement ({purpose})",
            reference_type="LOAN",
            reference_id=loan.id,
        )
        logger.info(
            "Loan approved: loan=%s character=%s principal=%d rate=%.2f term=%d",
            loan.id, character_id, amount, rate, term_months,
        )
        return loan

    async def pay_loan(
        self, db: AsyncSession, character_id: str, loan_id: str, amount: int
    ) -> tuple[Loan, LoanPayment, Account]:
        """Apply one repayment in the caller's unit."""
        if amount <= 0:
            raise InvalidAmountError()
        account = await self._require_account(db, character_id)
        loan = await self._owned_active_loan(db, account, loan_id)

        split = split_payment(loan.remaining_balance, loan.interest_rate, amount)
        paid_off = split.remaining_after == 0
        account, _ = await self._accounts.post_transaction(
            db,
            character_id,
            -split.charged,
            TransactionType.LOAN.value,
            "Loan repayment",
            reference_type="LOAN",
            reference_id=loan.id,
        )
        payment = await self._repo.insert_payment(
            db,
            LoanPayment(
                id=0,
                loan_id=loan.id,
                payment_amount=split.charged,
                principal_amount=split.principal,
                interest_amount=split.interest,
                payment_type="PAYOFF" if paid_off else "REGULAR",
            ),
        )
        next_due = None if paid_off else (loan.next_payment_due or utc_now()) + PAYMENT_INTERVAL
        loan = await self._repo.record_payment(
            db,
            loan.id,
            split.remaining_after,
            LoanStatus.PAID_OFF.value if paid_off else LoanStatus.ACTIVE.value,
            next_due,
        )
        bonus = PAYOFF_CREDIT_BONUS if paid_off else ON_TIME_CREDIT_BONUS
        await self._accounts.adjust_credit_score(db, character_id, bonus)
        if paid_off:
            logger.info("Loan paid off: loan=%s character=%s", loan.id, character_id)
        return loan, payment, account

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    async def apply_for_loan(
        self,
        db: AsyncSession,
        character_id: str,
        amount: int,
        term_months: int,
        purpose: str,
        collateral_type: str | None = None,
        collateral_value: int = 0,
    ) -> OperationResult:
        async def work() -> OperationResult:
            loan = await self.originate_loan(
                db, character_id, amount, term_months, purpose,
                collateral_type, collateral_value,
            )
            return OperationResult.ok(
                f"Loan of {cents_to_display(amount)} approved",
                LoanTermsResponse.from_loan(loan),
            )

        return await run_operation(db, work)

    async def make_payment(
        self, db: AsyncSession, character_id: str, loan_id: str, amount: int
    ) -> OperationResult:
        async def work() -> OperationResult:
            loan, payment, account = await self.pay_loan(db, character_id, loan_id, amount)
            message = (
                "Loan paid off"
                if loan.status == LoanStatus.PAID_OFF.value
                else f"Payment of {cents_to_display(payment.payment_amount)} received"
            )
            return OperationResult.ok(
                message, LoanPaymentResponse.from_result(loan, payment, account.balance)
            )

        return await run_operation(db, work)

    async def loans_for_account(self, db: AsyncSession, account_id: str) -> list[Loan]:
        return await self._repo.list_loans(db, account_id)

    async def summarize(self, db: AsyncSession) -> dict[str, int]:
        return await self._repo.summarize(db)

    async def list_loans(self, db: AsyncSession, character_id: str) -> OperationResult:
        async def work() -> OperationResult:
            account = await self._require_account(db, character_id)
            loans = await self._repo.list_loans(db, account.id)
            return OperationResult.ok(
                f"{len(loans)} loans", [LoanItem.from_loan(loan) for loan in loans]
            )

        return await run_operation(db, work)

    async def get_amortization_schedule(
        self, db: AsyncSession, character_id: str, loan_id: str
    ) -> OperationResult:
        """Projection of the remaining payments; changes nothing."""
        async def work() -> OperationResult:
            account = await self._require_account(db, character_id)
            loan = await self._repo.get_loan(db, loan_id)
            if loan is None or loan.account_id != account.id:
                raise LoanNotFoundError(loan_id)
            rows = amortization_schedule(
                loan.remaining_balance,
                loan.interest_rate,
                loan.monthly_payment,
                max_months=loan.term_months,
            )
            return OperationResult.ok(
                f"{len(rows)} payments remaining",
                AmortizationResponse(
                    loan_id=loan.id,
                    rows=[ScheduleRowItem.from_row(row) for row in rows],
                    total_payments_cents=sum(row.payment for row in rows),
                    total_interest_cents=sum(row.interest for row in rows),
                ),
            )

        return await run_operation(db, work)
