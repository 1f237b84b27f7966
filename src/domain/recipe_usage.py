"""Recipe Usage Domain Entity

One row per consumption of a recipe. Usages of creator-authored recipes
accrue a creator earning that becomes payable once the consuming user
completes a qualifying retail checkout.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, Integer, Numeric, String
from src.domain.base import BaseModel, BigIntegerPK


class RecipeUsage(BaseModel, table=True):
    """
    Recipe Usage - Records a user consuming a recipe

    Domain Rules:
    - Never deleted
    - walmart_checkout_at is stamped once, when the user checks out
    - is_paid/paid_at mirror the linked CreatorEarning after payout
    """

    __tablename__ = "recipe_usages"
    __table_args__ = (
        CheckConstraint('creator_earning_amount >= 0', name='creator_earning_non_negative'),
        Index('ix_recipe_usages_user_eligibility', 'user_id', 'is_paid', 'requires_walmart'),
    )

    id: int = Field(
        sa_column=Column(BigIntegerPK, primary_key=True, autoincrement=True),
        description="Unique usage identifier (auto-increment)"
    )

    user_id: str = Field(
        index=True,
        description="User who consumed the recipe"
    )

    recipe_id: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Consumed recipe"
    )

    creator_id: Optional[str] = Field(
        default=None,
        index=True,
        description="Recipe author (None for AI-generated or system recipes)"
    )

    creator_earning_amount: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
        description="Earning accrued to the creator (precision: 18,2)"
    )

    credit_cost: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Credits charged to the user for this usage"
    )

    is_paid: bool = Field(default=False, description="Creator earning paid out")

    requires_walmart: bool = Field(
        default=False,
        description="Earning only becomes payable after a retail checkout"
    )

    walmart_checkout_at: Optional[datetime] = Field(
        default=None,
        description="When the user's qualifying checkout was confirmed"
    )

    paid_at: Optional[datetime] = Field(default=None, description="Payout timestamp")

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Usage timestamp"
    )
