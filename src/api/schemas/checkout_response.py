"""Response schemas for the Checkout API"""

from pydantic import BaseModel
from src.app.use_cases.checkout.dtos import CheckoutRewardResponseDTO


class CheckoutCompleteResponseSchema(BaseModel):
    reward: CheckoutRewardResponseDTO
    usages_marked: int
