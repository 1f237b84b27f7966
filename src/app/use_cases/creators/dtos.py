"""Data Transfer Objects for creator earnings and payouts"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field
from src.domain.credit_transaction import TransactionType


class RecordRecipeUsageCommandDTO(BaseModel):
    """
    Command DTO for recording a recipe usage

    A nonzero creator_earning_amount with a creator_id accrues one
    CreatorEarning. A nonzero credit_cost is charged in the same transaction.
    """

    user_id: str = Field(..., min_length=1)
    recipe_id: str = Field(..., min_length=1)
    creator_id: Optional[str] = None
    creator_earning_amount: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)
    credit_cost: int = Field(default=0, ge=0)
    requires_walmart: bool = Field(
        default=True, description="Earning becomes payable only after a retail checkout"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "user_abc123",
                "recipe_id": "recipe_789",
                "creator_id": "creator_42",
                "creator_earning_amount": "0.25",
                "credit_cost": 1,
                "requires_walmart": True
            }
        }


class RecipeUsageResponseDTO(BaseModel):
    usage_id: int
    user_id: str
    recipe_id: str
    creator_earning_id: Optional[int] = None
    credits_charged: int = 0
    balance_after: Optional[int] = None
    transaction_type: Optional[TransactionType] = None


class CreatorPayoutDTO(BaseModel):
    """One creator settled in a payout batch"""

    creator_id: str
    batch_id: str
    total_amount: Decimal
    earnings_paid: int
    paid_at: datetime


class PayoutFailureDTO(BaseModel):
    creator_id: str
    error_code: str
    message: str


class PayoutBatchResultDTO(BaseModel):
    """Summary of a payout batch run"""

    batch_id: str
    creators_considered: int
    creators_paid: int
    total_amount: Decimal
    payouts: List[CreatorPayoutDTO]
    failures: List[PayoutFailureDTO]
    execution_time_ms: int


class CreatorEarningsSummaryDTO(BaseModel):
    creator_id: str
    total_earned: Decimal
    paid_out: Decimal
    pending: Decimal
    pending_eligible: Decimal
    total_uses: int
    pro_user_uses: int
    free_user_uses: int
    minimum_payout: Decimal
    payout_ready: bool = Field(..., description="pending_eligible has reached minimum_payout")
