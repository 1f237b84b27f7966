"""Credit Transaction Domain Entity

Immutable append-only audit trail of all credit mutations.
The sum of a user's transaction amounts is the user's balance.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, BigInteger, Integer, JSON, String
from src.domain.base import BaseModel, BigIntegerPK


class TransactionType(str, Enum):
    """
    Credit transaction types

    Metadata keys written per type:
    - SIGNUP_BONUS: none
    - WALMART_CHECKOUT: checkout_number, credits_granted
    - SUBSCRIPTION_GRANT: tier, period, product_id, event_id
    - CREDIT_PURCHASE: product_id, credits, event_id
    - ADJUSTMENT: reason
    - charges: feature specific (recipe_id, items_extracted, url, ...)
    """
    SIGNUP_BONUS = "signup_bonus"
    WALMART_CHECKOUT = "walmart_checkout"
    SUBSCRIPTION_GRANT = "subscription_grant"
    CREDIT_PURCHASE = "credit_purchase"
    ADJUSTMENT = "adjustment"
    AI_RECIPE = "ai_recipe"
    AI_MEAL_PLAN = "ai_meal_plan"
    AI_RECEIPT_SCAN = "ai_receipt_scan"
    CHAT_SESSION = "chat_session"
    URL_IMPORT = "url_import"
    RECIPE_USE = "recipe_use"


class CreditTransaction(BaseModel, table=True):
    """
    Credit Transaction - Immutable audit trail of credit mutations

    Domain Rules:
    - Transactions are immutable (append-only, never updated or deleted)
    - amount is signed: positive for grants, negative for charges
    - balance_after snapshots the account balance right after posting
    - idempotency_key, when present, must be unique (prevents double grants)
    """

    __tablename__ = "credit_transactions"
    __table_args__ = (
        Index('ix_credit_transactions_created_at', 'created_at'),
        Index('ix_credit_transactions_user_type', 'user_id', 'transaction_type'),
    )

    id: int = Field(
        sa_column=Column(BigIntegerPK, primary_key=True, autoincrement=True),
        description="Unique transaction identifier (auto-increment)"
    )

    user_id: str = Field(
        index=True,
        description="User ID for query optimization"
    )

    account_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("user_accounts.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key to UserAccount"
    )

    transaction_type: TransactionType = Field(
        description="Type of transaction"
    )

    amount: int = Field(
        sa_column=Column(Integer, nullable=False),
        description="Signed credit amount (positive = grant, negative = charge)"
    )

    balance_after: int = Field(
        sa_column=Column(Integer, nullable=False),
        description="Account balance after this transaction"
    )

    description: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Human-readable description"
    )

    transaction_metadata: Dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column("metadata", JSON, nullable=False),
        description="Schema-less context, keys documented on TransactionType"
    )

    idempotency_key: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True, unique=True, index=True),
        description="Unique key for idempotent grants (e.g. signup_bonus:user_abc123)"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Transaction timestamp (immutable)"
    )

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "user_id": "user_abc123",
                "account_id": 1,
                "transaction_type": "walmart_checkout",
                "amount": 15,
                "balance_after": 40,
                "description": "Walmart checkout #1",
                "metadata": {"checkout_number": 1, "credits_granted": 15},
                "idempotency_key": None,
                "created_at": "2024-01-01T00:00:00Z"
            }
        }
