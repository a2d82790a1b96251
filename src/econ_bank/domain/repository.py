"""Repository Protocols: dependency inversion for testability.

Unit tests inject a mock or an in-memory fake that conforms to these Protocols.
Infrastructure layer provides the real implementations.

Every other subsystem moves money exclusively through
``AccountRepositoryProtocol.post_transaction``, which changes the balance and
appends the matching ledger row in the caller's transaction.
"""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.econ_bank.domain.models import Account, CharacterProfile, Transaction


class AccountRepositoryProtocol(Protocol):
    async def get_account(
        self, db: AsyncSession, character_id: str, for_update: bool = False
    ) -> Account | None: ...

    async def create_account(self, db: AsyncSession, account: Account) -> Account: ...

    async def post_transaction(
        self,
        db: AsyncSession,
        character_id: str,
        amount: int,
        tx_type: str,
        description: str,
        reference_type: str | None = None,
        reference_id: str | None = None,
        require_active: bool = True,
    ) -> tuple[Account, Transaction]: ...

    async def adjust_credit_score(
        self, db: AsyncSession, character_id: str, delta: int
    ) -> Account | None: ...

    async def set_status(
        self, db: AsyncSession, character_id: str, status: str
    ) -> Account | None: ...

    async def count_active_loans(self, db: AsyncSession, account_id: str) -> int: ...

    async def list_interest_candidates(self, db: AsyncSession) -> list[Account]: ...

    async def mark_interest_accrued(
        self, db: AsyncSession, account_id: str, accrued_at: datetime
    ) -> bool: ...

    async def list_transactions(
        self,
        db: AsyncSession,
        account_id: str,
        cursor_id: int | None,
        limit: int,
        tx_type: str | None,
    ) -> list[Transaction]: ...

    async def replay_transactions(
        self, db: AsyncSession, account_id: str
    ) -> list[Transaction]: ...

    async def summarize(self, db: AsyncSession) -> dict[str, int]: ...


class CharacterGatewayProtocol(Protocol):
    """Read-only access to the host game's character data."""

    async def get_profile(
        self, db: AsyncSession, character_id: str
    ) -> CharacterProfile | None: ...
