"""Unit tests for LoanApplicationService against in-memory repositories."""

import asyncio
from datetime import UTC, datetime

from src.econ_bank.domain.models import Account
from src.econ_loan.application.schemas import AmortizationResponse, LoanTermsResponse
from src.econ_loan.application.service import LoanApplicationService
from tests.fake_repositories import (
    FakeAccountRepository,
    FakeLoanRepository,
    make_session,
)


def _make_account(**kwargs) -> Account:
    return Account(
        id=kwargs.get("id", "ACC-1"),
        character_id=kwargs.get("character_id", "char-1"),
        account_type="BASIC",
        balance=kwargs.get("balance", 0),
        credit_score=kwargs.get("credit_score", 600),
        credit_limit=kwargs.get("credit_limit", 300000),
        interest_rate=10.0,
        status="ACTIVE",
        opened_at=datetime.now(UTC),
    )


def _make_service(**account_kwargs):
    accounts = FakeAccountRepository()
    accounts.add(_make_account(**account_kwargs))
    loans = FakeLoanRepository(accounts)
    return LoanApplicationService(repo=loans, accounts=accounts), loans, accounts


class TestApplyForLoan:
    async def test_approved_loan_is_disbursed(self) -> None:
        svc, loans, accounts = _make_service()

        result = await svc.apply_for_loan(make_session(), "char-1", 100000, 12, "JOB_CHANGE")

        assert result.success
        assert isinstance(result.data, LoanTermsResponse)
        assert result.data.interest_rate == 10.0
        assert accounts.accounts["char-1"].balance == 100000
        tx = accounts.ledger_for("char-1")[-1]
        assert (tx.tx_type, tx.amount, tx.reference_id) == ("LOAN", 100000, result.data.loan_id)
        assert loans.loans[result.data.loan_id].remaining_balance == 100000
        assert accounts.active_loans["ACC-1"] == 1

    async def test_over_credit_limit_rejected(self) -> None:
        svc, loans, accounts = _make_service(credit_limit=50000)

        result = await svc.apply_for_loan(make_session(), "char-1", 100000, 12, "EQUIPMENT")

        assert result.code == 3002
        assert loans.loans == {}
        assert accounts.transactions == []

    async def test_fourth_loan_rejected(self) -> None:
        svc, loans, _ = _make_service()
        for _ in range(3):
            assert (await svc.apply_for_loan(make_session(), "char-1", 1000, 6, "EQUIPMENT")).success

        result = await svc.apply_for_loan(make_session(), "char-1", 1000, 6, "EQUIPMENT")

        assert result.code == 3002
        assert len(loans.loans) == 3

    async def test_low_credit_score_rejected(self) -> None:
        svc, _, _ = _make_service(credit_score=350)

        result = await svc.apply_for_loan(make_session(), "char-1", 1000, 6, "EQUIPMENT")

        assert result.code == 3002
        assert "credit score" in result.message

    async def test_invalid_term(self) -> None:
        svc, _, _ = _make_service()

        result = await svc.apply_for_loan(make_session(), "char-1", 1000, 0, "EQUIPMENT")

        assert result.code == 1003

    async def test_unknown_purpose(self) -> None:
        svc, _, _ = _make_service()

        result = await svc.apply_for_loan(make_session(), "char-1", 1000, 6, "GAMBLING")

        assert result.code == 1003


class TestMakePayment:
    async def _with_loan(self, amount: int = 100000):
        svc, loans, accounts = _make_service()
        approved = await svc.apply_for_loan(make_session(), "char-1", amount, 12, "JOB_CHANGE")
        return svc, loans, accounts, approved.data.loan_id

    async def test_regular_payment_splits_interest(self) -> None:
        svc, loans, accounts, loan_id = await self._with_loan()

        result = await svc.make_payment(make_session(), "char-1", loan_id, 5000)

        # interest floor(100000 × 10% / 12) = 833
        assert result.success
        assert result.data.interest_cents == 833
        assert result.data.principal_cents == 4167
        assert result.data.remaining_balance_cents == 95833
        assert result.data.account_balance_cents == 95000
        assert loans.payments[-1].payment_type == "REGULAR"
        assert accounts.accounts["char-1"].credit_score == 602

    async def test_overpayment_pays_off_and_charges_only_payoff(self) -> None:
        svc, loans, accounts, loan_id = await self._with_loan()
        accounts.accounts["char-1"].balance = 300000

        result = await svc.make_payment(make_session(), "char-1", loan_id, 200000)

        assert result.message == "Loan paid off"
        assert result.data.paid_cents == 100833
        assert result.data.status == "PAID_OFF"
        assert accounts.accounts["char-1"].balance == 300000 - 100833
        assert accounts.accounts["char-1"].credit_score == 625
        assert loans.loans[loan_id].next_payment_due is None
        assert accounts.active_loans["ACC-1"] == 0

    async def test_cannot_pay_without_funds(self) -> None:
        svc, loans, accounts, loan_id = await self._with_loan()
        accounts.accounts["char-1"].balance = 100

        result = await svc.make_payment(make_session(), "char-1", loan_id, 5000)

        assert result.code == 2001
        assert loans.payments == []

    async def test_other_characters_loan_not_found(self) -> None:
        svc, _, accounts, loan_id = await self._with_loan()
        accounts.add(_make_account(id="ACC-2", character_id="char-2", balance=50000))

        result = await svc.make_payment(make_session(), "char-2", loan_id, 1000)

        assert result.code == 3001

    async def test_paid_off_loan_cannot_be_paid_again(self) -> None:
        svc, _, accounts, loan_id = await self._with_loan()
        accounts.accounts["char-1"].balance = 300000
        await svc.make_payment(make_session(), "char-1", loan_id, 200000)

        result = await svc.make_payment(make_session(), "char-1", loan_id, 1000)

        assert result.code == 3001


class TestQueries:
    async def test_amortization_schedule_clears_balance(self) -> None:
        svc, _, _ = _make_service()
        approved = await svc.apply_for_loan(make_session(), "char-1", 120000, 12, "JOB_CHANGE")

        result = await svc.get_amortization_schedule(make_session(), "char-1", approved.data.loan_id)

        assert isinstance(result.data, AmortizationResponse)
        assert 0 < len(result.data.rows) <= 12
        assert result.data.rows[-1].remaining_cents == 0
        assert result.data.total_payments_cents == 120000 + result.data.total_interest_cents

    async def test_list_loans(self) -> None:
        svc, _, _ = _make_service()
        await svc.apply_for_loan(make_session(), "char-1", 1000, 6, "EQUIPMENT")

        result = await svc.list_loans(make_session(), "char-1")

        assert result.message == "1 loans"
        assert result.data[0].status == "ACTIVE"

    async def test_summarize(self) -> None:
        svc, _, _ = _make_service()
        await svc.apply_for_loan(make_session(), "char-1", 1000, 6, "EQUIPMENT")

        assert await svc.summarize(make_session()) == {"active_loans": 1, "outstanding": 1000}


class TestFullTerm:
    async def test_twelve_scheduled_payments_pay_off(self) -> None:
        svc, loans, accounts = _make_service(balance=100_000, credit_limit=2_000_000)
        approved = await svc.apply_for_loan(
            make_session(), "char-1", 1_000_000, 12, "JOB_CHANGE"
        )
        loan_id = approved.data.loan_id
        payment = approved.data.monthly_payment_cents

        statuses = []
        for _ in range(12):
            result = await svc.make_payment(make_session(), "char-1", loan_id, payment)
            statuses.append(result.data.status)

        assert statuses[:11] == ["ACTIVE"] * 11
        assert statuses[-1] == "PAID_OFF"
        assert loans.loans[loan_id].remaining_balance == 0
        # the last payment is charged only what was still owed
        assert accounts.accounts["char-1"].balance >= 1_100_000 - 12 * payment


class _RowLockingAccounts(FakeAccountRepository):
    """Rows read FOR UPDATE stay locked until the session commits or rolls back."""

    def __init__(self) -> None:
        super().__init__()
        self._locks: dict[str, asyncio.Lock] = {}

    async def get_account(self, db, character_id, for_update=False):
        if for_update:
            lock = self._locks.setdefault(character_id, asyncio.Lock())
            await lock.acquire()

            def release() -> None:
                lock.release()

            db.commit.side_effect = release
            db.rollback.side_effect = release
        return await super().get_account(db, character_id, for_update)


class _SlowLoanRepository(FakeLoanRepository):
    """Counting suspends after reading, like a database round trip."""

    async def count_active(self, db, account_id):
        count = await super().count_active(db, account_id)
        await asyncio.sleep(0)
        return count


class TestConcurrentApplications:
    async def test_active_loan_cap_holds_under_interleaving(self) -> None:
        accounts = _RowLockingAccounts()
        accounts.add(_make_account())
        loans = _SlowLoanRepository(accounts)
        svc = LoanApplicationService(repo=loans, accounts=accounts)
        for _ in range(2):
            assert (await svc.apply_for_loan(make_session(), "char-1", 1000, 6, "EQUIPMENT")).success

        first, second = await asyncio.gather(
            svc.apply_for_loan(make_session(), "char-1", 1000, 6, "EQUIPMENT"),
            svc.apply_for_loan(make_session(), "char-1", 1000, 6, "EQUIPMENT"),
        )

        assert sorted([first.success, second.success]) == [False, True]
        assert {first.code, second.code} == {0, 3002}
        assert await loans.count_active(make_session(), "ACC-1") == 3
        assert accounts.accounts["char-1"].balance == 3000
