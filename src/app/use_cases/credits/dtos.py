"""Data Transfer Objects for Credit Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field
from src.domain.credit_transaction import CreditTransaction, TransactionType
from src.domain.subscription_tier import SubscriptionTier


class GrantCreditsCommandDTO(BaseModel):
    """
    Command DTO for granting credits

    Used as input to GrantCredits use case.
    """

    user_id: str = Field(..., min_length=1, description="User identifier")

    amount: int = Field(..., gt=0, description="Credits to grant (must be > 0)")

    transaction_type: TransactionType = Field(..., description="Grant type")

    description: Optional[str] = Field(default=None, description="Human-readable description")

    metadata: Optional[Dict[str, Any]] = Field(default=None, description="Audit metadata")

    idempotency_key: Optional[str] = Field(
        default=None,
        description="Unique key; repeated keys return the original transaction"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "user_abc123",
                "amount": 40,
                "transaction_type": "subscription_grant",
                "description": "Monthly pro subscription credits",
                "metadata": {"tier": "pro", "period": "monthly"},
                "idempotency_key": "subscription_grant:user_abc123:1704067200000"
            }
        }


class ChargeCreditsCommandDTO(BaseModel):
    """
    Command DTO for charging credits

    Used as input to ChargeCredits use case. Feature code charges only after
    its work succeeded, so a failed generation never costs credits.
    """

    user_id: str = Field(..., min_length=1, description="User identifier")

    amount: int = Field(..., gt=0, description="Credits to charge (must be > 0)")

    transaction_type: TransactionType = Field(..., description="Feature charge type")

    description: Optional[str] = Field(default=None, description="Human-readable description")

    metadata: Optional[Dict[str, Any]] = Field(default=None, description="Audit metadata")

    idempotency_key: Optional[str] = Field(default=None, description="Optional retry key")

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "user_abc123",
                "amount": 1,
                "transaction_type": "ai_receipt_scan",
                "description": "Scanned receipt: 12 items extracted",
                "metadata": {"items_extracted": 12}
            }
        }


class CreditTransactionResponseDTO(BaseModel):
    """
    Response DTO for credit transaction operations

    Returned by GrantCredits, ChargeCredits, etc.
    """

    transaction_id: int
    user_id: str
    transaction_type: str
    amount: int = Field(..., description="Signed amount (negative for charges)")
    balance_after: int
    description: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    idempotency_key: Optional[str] = None
    is_replay: bool = Field(default=False, description="True when an earlier transaction was returned")
    created_at: datetime

    @classmethod
    def from_transaction(
        cls, transaction: CreditTransaction, is_replay: bool = False
    ) -> "CreditTransactionResponseDTO":
        return cls(
            transaction_id=transaction.id,
            user_id=transaction.user_id,
            transaction_type=TransactionType(transaction.transaction_type).value,
            amount=transaction.amount,
            balance_after=transaction.balance_after,
            description=transaction.description,
            metadata=transaction.transaction_metadata or {},
            idempotency_key=transaction.idempotency_key,
            is_replay=is_replay,
            created_at=transaction.created_at,
        )


class BalanceResponseDTO(BaseModel):
    """Response DTO for GetBalance"""

    user_id: str
    balance: int
    last_updated: datetime


class CreditCheckResponseDTO(BaseModel):
    """Response DTO for CheckCredits"""

    user_id: str
    required: int
    balance: int
    has_enough_credits: bool


class TransactionDTO(BaseModel):
    """Single entry of a transaction history page"""

    id: int
    transaction_type: str
    amount: int
    balance_after: int
    description: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime

    @classmethod
    def from_transaction(cls, transaction: CreditTransaction) -> "TransactionDTO":
        return cls(
            id=transaction.id,
            transaction_type=TransactionType(transaction.transaction_type).value,
            amount=transaction.amount,
            balance_after=transaction.balance_after,
            description=transaction.description,
            metadata=transaction.transaction_metadata or {},
            created_at=transaction.created_at,
        )


class ListTransactionsResponseDTO(BaseModel):
    """Paginated transaction history, newest first"""

    transactions: List[TransactionDTO]
    total: int
    limit: int
    offset: int


class AccountResponseDTO(BaseModel):
    """Response DTO for OpenAccount"""

    user_id: str
    credit_balance: int
    subscription_tier: str
    is_pro_user: bool
    is_power_user: bool
    total_walmart_checkouts: int
    created_at: datetime


class CreditStatusResponseDTO(BaseModel):
    """Balance, tier flags and recent activity for one user"""

    user_id: str
    balance: int
    subscription_tier: str
    is_pro_user: bool
    is_power_user: bool
    total_walmart_checkouts: int
    member_since: datetime
    recent_transactions: List[TransactionDTO]
    needs_entitlement_refresh: bool


class TierAccessResponseDTO(BaseModel):
    user_id: str
    required_tier: SubscriptionTier
    current_tier: SubscriptionTier
    has_access: bool


class LedgerDiscrepancyDTO(BaseModel):
    """Balance that does not match its transaction sum"""

    user_id: str
    account_id: int
    account_balance: int
    calculated_balance: int
    discrepancy: int


class ReconciliationResultDTO(BaseModel):
    total_accounts_checked: int
    discrepancies_found: int
    discrepancies: List[LedgerDiscrepancyDTO]
    reconciliation_time: datetime
    execution_time_ms: int
