"""User Account Domain Entity

Per-user credit balance and subscription state. Each user has exactly one
account. The balance is a materialised cache of the sum of the user's
CreditTransactions and is only mutated through ledger postings.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import CheckConstraint, Integer
from src.domain.base import BaseModel, BigIntegerPK
from src.domain.subscription_tier import SubscriptionTier, has_tier_access


class UserAccount(BaseModel, table=True):
    """
    User Account - Tracks credit balance and subscription tier

    Domain Rules:
    - One account per user (user_id is unique)
    - credit_balance must be non-negative
    - credit_balance == sum(CreditTransaction.amount) for the user
    - is_power_user implies is_pro_user; tier and flags change together
    - total_walmart_checkouts only ever increases
    """

    __tablename__ = "user_accounts"
    __table_args__ = (
        CheckConstraint('credit_balance >= 0', name='credit_balance_non_negative'),
        CheckConstraint('total_walmart_checkouts >= 0', name='walmart_checkouts_non_negative'),
        CheckConstraint('NOT is_power_user OR is_pro_user', name='power_implies_pro'),
    )

    id: int = Field(
        sa_column=Column(BigIntegerPK, primary_key=True, autoincrement=True),
        description="Unique account identifier (auto-increment)"
    )

    user_id: str = Field(
        index=True,
        unique=True,
        description="External user ID (unique - one account per user)"
    )

    credit_balance: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Spendable credit balance (must be >= 0)"
    )

    subscription_tier: SubscriptionTier = Field(
        default=SubscriptionTier.NONE,
        description="Resolved subscription tier (none, pro, power)"
    )

    is_pro_user: bool = Field(default=False, description="Pro features unlocked")

    is_power_user: bool = Field(default=False, description="Power features unlocked")

    total_walmart_checkouts: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Number of completed retail checkouts"
    )

    entitlement_last_checked_at: Optional[datetime] = Field(
        default=None,
        description="Last time tier was set from an entitlement event"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Account creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp"
    )

    def has_tier_access(self, required: SubscriptionTier) -> bool:
        return has_tier_access(self.subscription_tier, required)

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "user_id": "user_abc123",
                "credit_balance": 65,
                "subscription_tier": "pro",
                "is_pro_user": True,
                "is_power_user": False,
                "total_walmart_checkouts": 2,
                "entitlement_last_checked_at": "2024-01-01T00:00:00Z",
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-01T00:00:00Z"
            }
        }
