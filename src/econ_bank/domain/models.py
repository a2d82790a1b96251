"""Domain models for econ_bank: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Account:
    id: str
    character_id: str
    account_type: str        # AccountType value
    balance: int             # cents, never negative
    credit_score: int        # 300-850
    credit_limit: int        # cents
    interest_rate: float     # annual %, savings and loan base rate
    status: str              # AccountStatus value
    version: int = 0
    opened_at: datetime | None = None
    updated_at: datetime | None = None
    last_interest_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status == "ACTIVE"


@dataclass
class Transaction:
    id: int                          # BIGSERIAL
    account_id: str
    tx_type: str                     # TransactionType value
    amount: int                      # cents, positive=credit negative=debit
    balance_after: int               # cents, balance snapshot after op
    description: str | None = None
    reference_type: str | None = None
    reference_id: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class CharacterProfile:
    """Read-only view of a character, owned by the host game."""

    character_id: str
    level: int
    character_class: str
    gold: int          # whole gold coins carried
    luck: int          # percentage, 50 = neutral


@dataclass
class LedgerAudit:
    account_id: str
    stored_balance: int
    replayed_balance: int
    transaction_count: int
    # ids of transactions whose balance_after disagrees with the running sum
    mismatched_ids: list[int] = field(default_factory=list)

    @property
    def consistent(self) -> bool:
        return not self.mismatched_ids and self.replayed_balance == self.stored_balance
