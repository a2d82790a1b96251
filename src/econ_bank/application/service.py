"""BankApplicationService: accounts, balances, credit standing, interest.

Player-facing operations run as one unit through ``run_operation`` and
return an ``OperationResult``. ``accrue_daily_interest`` is a batch pass with
one unit per account.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.econ_bank.application.schemas import (
    AccountResponse,
    BalanceResponse,
    LedgerAuditResponse,
    TransactionItem,
    TransactionPage,
    TransferResponse,
    cursor_decode,
    cursor_encode,
)
from src.econ_bank.domain.credit import (
    base_interest_rate,
    credit_limit_cents,
    daily_interest_cents,
    initial_credit_score,
    replay_ledger,
)
from src.econ_bank.domain.models import Account
from src.econ_bank.domain.repository import (
    AccountRepositoryProtocol,
    CharacterGatewayProtocol,
)
from src.econ_bank.infrastructure.character_gateway import SqlCharacterGateway
from src.econ_bank.infrastructure.persistence import AccountRepository
from src.econ_common.cents import cents_to_display
from src.econ_common.datetime_utils import utc_now
from src.econ_common.enums import AccountStatus, AccountType, TransactionType
from src.econ_common.errors import (
    AccountExistsError,
    AccountNotActiveError,
    AccountNotClosableError,
    AccountNotFoundError,
    CharacterNotFoundError,
    InvalidAmountError,
    InvalidParameterError,
)
from src.econ_common.id_generator import generate_id
from src.econ_common.response import OperationResult
from src.econ_common.unit_of_work import run_batch, run_operation

logger = logging.getLogger(__name__)


class BankApplicationService:
    def __init__(
        self,
        repo: AccountRepositoryProtocol | None = None,
        characters: CharacterGatewayProtocol | None = None,
    ) -> None:
        self._repo: AccountRepositoryProtocol = repo or AccountRepository()
        self._characters: CharacterGatewayProtocol = characters or SqlCharacterGateway()

    async def _require_account(self, db: AsyncSession, character_id: str) -> Account:
        account = await self._repo.get_account(db, character_id)
        if account is None:
            raise AccountNotFoundError(character_id)
        return account

    # ------------------------------------------------------------------
    # Account lifecycle
    # ------------------------------------------------------------------

    async def open_account(
        self,
        db: AsyncSession,
        character_id: str,
        account_type: str = AccountType.BASIC.value,
    ) -> OperationResult:
        async def work() -> OperationResult:
            try:
                kind = AccountType(account_type).value
            except ValueError:
                raise InvalidParameterError(f"account_type {account_type}") from None
            profile = await self._characters.get_profile(db, character_id)
            if profile is None:
                raise CharacterNotFoundError(character_id)
            if await self._repo.get_account(db, character_id) is not None:
                raise AccountExistsError(character_id)

            score = initial_credit_score(profile)
            account = await self._repo.create_account(
                db,
                Account(
                    id=generate_id("ACC"),
                    character_id=character_id,
                    account_type=kind,
                    balance=0,
                    credit_score=score,
                    credit_limit=credit_limit_cents(score, kind),
                    interest_rate=base_interest_rate(score, kind),
                    status=AccountStatus.ACTIVE.value,
                ),
            )
            logger.info(
                "Account opened: character=%s type=%s score=%d",
                character_id, account.account_type, score,
            )
            return OperationResult.ok(
                "Bank account opened", AccountResponse.from_account(account)
            )

        return await run_operation(db, work)

    async def get_account(self, db: AsyncSession, character_id: str) -> OperationResult:
        async def work() -> OperationResult:
            account = await self._require_account(db, character_id)
            return OperationResult.ok("Account found", AccountResponse.from_account(account))

        return await run_operation(db, work)

    async def get_balance(self, db: AsyncSession, character_id: str) -> OperationResult:
        async def work() -> OperationResult:
            account = await self._require_account(db, character_id)
            return OperationResult.ok(
                "Balance retrieved",
                BalanceResponse.from_cents(character_id, account.balance),
            )

        return await run_operation(db, work)

    async def set_status(
        self, db: AsyncSession, character_id: str, status: str
    ) -> OperationResult:
        """Suspend or reactivate an account. CLOSED is terminal."""
        async def work() -> OperationResult:
            account = await self._require_account(db, character_id)
            if account.status == AccountStatus.CLOSED:
                raise AccountNotActiveError(character_id, account.status)
            updated = await self._repo.set_status(db, character_id, status)
            logger.info("Account %s status %s -> %s", character_id, account.status, status)
            return OperationResult.ok(
                f"Account is now {status}", AccountResponse.from_account(updated)
            )

        return await run_operation(db, work)

    async def suspend_account(self, db: AsyncSession, character_id: str) -> OperationResult:
        return await self.set_status(db, character_id, AccountStatus.SUSPENDED.value)

    async def reactivate_account(
        self, db: AsyncSession, character_id: str
    ) -> OperationResult:
        return await self.set_status(db, character_id, AccountStatus.ACTIVE.value)

    async def close_account(self, db: AsyncSession, character_id: str) -> OperationResult:
        async def work() -> OperationResult:
            account = await self._repo.get_account(db, character_id, for_update=True)
            if account is None:
                raise AccountNotFoundError(character_id)
            if account.status == AccountStatus.CLOSED:
                raise AccountNotActiveError(character_id, account.status)
            if account.balance != 0:
                raise AccountNotClosableError(
                    f"balance is {cents_to_display(account.balance)}"
                )
            if await self._repo.count_active_loans(db, account.id) > 0:
                raise AccountNotClosableError("active loans outstanding")
            closed = await self._repo.set_status(db, character_id, AccountStatus.CLOSED.value)
            logger.info("Account closed: character=%s", character_id)
            return OperationResult.ok("Account closed", AccountResponse.from_account(closed))

        return await run_operation(db, work)

    # ------------------------------------------------------------------
    # Money movement
    # ------------------------------------------------------------------

    async def deposit(
        self, db: AsyncSession, character_id: str, amount: int
    ) -> OperationResult:
        async def work() -> OperationResult:
            if amount <= 0:
                raise InvalidAmountError()
            account, tx = await self._repo.post_transaction(
                db, character_id, amount, TransactionType.DEPOSIT.value, "Deposit",
            )
            return OperationResult.ok(
                f"Deposited {cents_to_display(amount)}",
                TransferResponse.from_result(account, tx),
            )

        return await run_operation(db, work)

    async def withdraw(
        self, db: AsyncSession, character_id: str, amount: int
    ) -> OperationResult:
        async def work() -> OperationResult:
            if amount <= 0:
                raise InvalidAmountError()
            account, tx = await self._repo.post_transaction(
                db, character_id, -amount, TransactionType.WITHDRAWAL.value, "Withdrawal",
            )
            return OperationResult.ok(
                f"Withdrew {cents_to_display(amount)}",
                TransferResponse.from_result(account, tx),
            )

        return await run_operation(db, work)

    async def adjust_credit_score(
        self, db: AsyncSession, character_id: str, delta: int
    ) -> OperationResult:
        async def work() -> OperationResult:
            account = await self._repo.adjust_credit_score(db, character_id, delta)
            if account is None:
                raise AccountNotFoundError(character_id)
            return OperationResult.ok(
                f"Credit score is now {account.credit_score}",
                AccountResponse.from_account(account),
            )

        return await run_operation(db, work)

    # ------------------------------------------------------------------
    # History and audit
    # ------------------------------------------------------------------

    async def list_transactions(
        self,
        db: AsyncSession,
        character_id: str,
        cursor: str | None = None,
        limit: int = 20,
        tx_type: str | None = None,
    ) -> OperationResult:
        async def work() -> OperationResult:
            account = await self._require_account(db, character_id)
            cursor_id = cursor_decode(cursor)
            # Fetch limit+1 to detect has_more without a COUNT(*) query
            rows = await self._repo.list_transactions(
                db, account.id, cursor_id, limit + 1, tx_type
            )
            has_more = len(rows) > limit
            page = rows[:limit]
            next_cursor = cursor_encode(page[-1].id) if has_more and page else None
            return OperationResult.ok(
                f"{len(page)} transactions",
                TransactionPage(
                    items=[TransactionItem.from_transaction(tx) for tx in page],
                    next_cursor=next_cursor,
                    has_more=has_more,
                ),
            )

        return await run_operation(db, work)

    async def verify_ledger(self, db: AsyncSession, character_id: str) -> OperationResult:
        """Replay every transaction and compare against the stored balance."""
        async def work() -> OperationResult:
            account = await self._require_account(db, character_id)
            transactions = await self._repo.replay_transactions(db, account.id)
            audit = replay_ledger(account.id, account.balance, transactions)
            if not audit.consistent:
                logger.error(
                    "Ledger mismatch: account=%s stored=%d replayed=%d bad_rows=%s",
                    account.id, audit.stored_balance, audit.replayed_balance,
                    audit.mismatched_ids,
                )
            message = "Ledger consistent" if audit.consistent else "Ledger mismatch"
            return OperationResult.ok(message, LedgerAuditResponse.from_audit(audit))

        return await run_operation(db, work)

    async def summarize(self, db: AsyncSession) -> dict[str, int]:
        return await self._repo.summarize(db)

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    async def accrue_daily_interest(self, db: AsyncSession) -> int:
        """Credit one day of savings interest to every ACTIVE funded account.

        Returns the number of accounts credited. Accounts already credited
        today, or whose interest is under one cent, are skipped.
        """
        accounts = await self._repo.list_interest_candidates(db)
        now = utc_now()

        async def accrue(candidate: Account) -> bool:
            account = await self._repo.get_account(db, candidate.character_id, for_update=True)
            if account is None or not account.is_active or account.balance <= 0:
                return False
            interest = daily_interest_cents(account.balance, account.interest_rate)
            if interest < 1:
                return False
            if not await self._repo.mark_interest_accrued(db, account.id, now):
                return False
            await self._repo.post_transaction(
                db,
                account.character_id,
                interest,
                TransactionType.INTEREST.value,
                "Daily savings interest",
                reference_type="INTEREST",
            )
            return True

        credited = await run_batch(db, "accrue_daily_interest", accounts, accrue)
        logger.info("Daily interest credited to %d/%d accounts", credited, len(accounts))
        return credited
