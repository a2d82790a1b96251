"""Pydantic schemas and cursor utilities for econ_bank."""

import base64
import json

from pydantic import BaseModel, Field

from src.econ_bank.domain.models import Account, LedgerAudit, Transaction
from src.econ_common.cents import cents_to_display
from src.econ_common.enums import AccountType

# ---------------------------------------------------------------------------
# Cursor-based pagination utilities
# ---------------------------------------------------------------------------


def cursor_encode(last_id: int) -> str:
    """Encode a BIGINT primary key into an opaque Base64 cursor string."""
    payload = json.dumps({"id": last_id})
    return base64.b64encode(payload.encode()).decode()


def cursor_decode(cursor: str | None) -> int | None:
    """Decode a cursor string back to the last seen id. Returns None on error."""
    if cursor is None:
        return None
    try:
        payload = json.loads(base64.b64decode(cursor.encode()).decode())
        return int(payload["id"])
    except (ValueError, KeyError, TypeError):
        return None


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class OpenAccountRequest(BaseModel):
    account_type: AccountType = AccountType.BASIC


class AmountRequest(BaseModel):
    amount_cents: int = Field(..., gt=0, description="Amount in cents")


class CreditAdjustRequest(BaseModel):
    delta: int = Field(..., description="Signed credit score change")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class AccountResponse(BaseModel):
    account_id: str
    character_id: str
    account_type: str
    status: str
    balance_cents: int
    balance_display: str
    credit_score: int
    credit_limit_cents: int
    credit_limit_display: str
    interest_rate: float
    opened_at: str | None

    @classmethod
    def from_account(cls, account: Account) -> "AccountResponse":
        return cls(
            account_id=account.id,
            character_id=account.character_id,
            account_type=account.account_type,
            status=account.status,
            balance_cents=account.balance,
            balance_display=cents_to_display(account.balance),
            credit_score=account.credit_score,
            credit_limit_cents=account.credit_limit,
            credit_limit_display=cents_to_display(account.credit_limit),
            interest_rate=round(account.interest_rate, 2),
            opened_at=account.opened_at.isoformat() if account.opened_at else None,
        )


class BalanceResponse(BaseModel):
    character_id: str
    balance_cents: int
    balance_display: str

    @classmethod
    def from_cents(cls, character_id: str, balance: int) -> "BalanceResponse":
        return cls(
            character_id=character_id,
            balance_cents=balance,
            balance_display=cents_to_display(balance),
        )


class TransferResponse(BaseModel):
    """Outcome of a deposit or withdrawal."""

    balance_cents: int
    balance_display: str
    amount_cents: int
    amount_display: str
    transaction_id: int

    @classmethod
    def from_result(cls, account: Account, tx: Transaction) -> "TransferResponse":
        return cls(
            balance_cents=account.balance,
            balance_display=cents_to_display(account.balance),
            amount_cents=abs(tx.amount),
            amount_display=cents_to_display(abs(tx.amount)),
            transaction_id=tx.id,
        )


class TransactionItem(BaseModel):
    id: int
    tx_type: str
    amount_cents: int
    amount_display: str
    balance_after_cents: int
    balance_after_display: str
    description: str | None
    reference_type: str | None
    reference_id: str | None
    created_at: str  # ISO8601 string

    @classmethod
    def from_transaction(cls, tx: Transaction) -> "TransactionItem":
        return cls(
            id=tx.id,
            tx_type=tx.tx_type,
            amount_cents=tx.amount,
            amount_display=cents_to_display(tx.amount),
            balance_after_cents=tx.balance_after,
            balance_after_display=cents_to_display(tx.balance_after),
            description=tx.description,
            reference_type=tx.reference_type,
            reference_id=tx.reference_id,
            created_at=tx.created_at.isoformat() if tx.created_at else "",
        )


class TransactionPage(BaseModel):
    items: list[TransactionItem]
    next_cursor: str | None
    has_more: bool


class LedgerAuditResponse(BaseModel):
    account_id: str
    consistent: bool
    stored_balance_cents: int
    replayed_balance_cents: int
    transaction_count: int
    mismatched_transaction_ids: list[int]

    @classmethod
    def from_audit(cls, audit: LedgerAudit) -> "LedgerAuditResponse":
        return cls(
            account_id=audit.account_id,
            consistent=audit.consistent,
            stored_balance_cents=audit.stored_balance,
            replayed_balance_cents=audit.replayed_balance,
            transaction_count=audit.transaction_count,
            mismatched_transaction_ids=list(audit.mismatched_ids),
        )
