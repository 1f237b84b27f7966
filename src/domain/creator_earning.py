"""Creator Earning Domain Entity

Accrual tied 1:1 to a RecipeUsage with a nonzero creator earning.
Settled in payout batches identified by batch_id.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, ForeignKey, Numeric, String
from src.domain.base import BaseModel, BigIntegerPK


class CreatorEarning(BaseModel, table=True):
    """
    Creator Earning - Amount owed to a recipe creator for one usage

    Domain Rules:
    - Exactly one earning per RecipeUsage with creator_earning_amount > 0
    - Payable only when the usage has walmart_checkout_at set
    - is_paid, paid_at and batch_id are set together in one settlement
    """

    __tablename__ = "creator_earnings"
    __table_args__ = (
        Index('ix_creator_earnings_creator_unpaid', 'creator_id', 'is_paid'),
        Index('ix_creator_earnings_batch_id', 'batch_id'),
    )

    id: int = Field(
        sa_column=Column(BigIntegerPK, primary_key=True, autoincrement=True),
        description="Unique earning identifier (auto-increment)"
    )

    creator_id: str = Field(description="Recipe creator receiving the earning")

    recipe_usage_id: int = Field(
        sa_column=Column(
            BigInteger,
            ForeignKey("recipe_usages.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        description="Foreign key to RecipeUsage (1:1)"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Earning amount in base currency (precision: 18,2)"
    )

    is_paid: bool = Field(default=False, description="Settled in a payout batch")

    paid_at: Optional[datetime] = Field(default=None, description="Settlement timestamp")

    batch_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(64), nullable=True),
        description="Payout batch that settled this earning"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Accrual timestamp"
    )
