"""Data Transfer Objects for retail checkout use cases"""

from pydantic import BaseModel, Field


class CheckoutRewardResponseDTO(BaseModel):
    """
    Response DTO for RecordCheckout

    checkout_number is the 1-based ordinal of this checkout for the user.
    """

    user_id: str
    checkout_number: int = Field(..., ge=1)
    credits_granted: int
    balance_after: int
    transaction_id: int
    next_reward: int
    usages_marked: int = Field(0, description="Recipe usages made payout-eligible by this checkout")


class CheckoutRewardInfoDTO(BaseModel):
    """What the user earns on their next checkout"""

    user_id: str
    total_checkouts: int
    checkout_number: int = Field(..., description="Ordinal the next checkout will get")
    next_reward: int
    is_steady_state: bool


class MarkUsagesEligibleResponseDTO(BaseModel):
    user_id: str
    usages_marked: int
