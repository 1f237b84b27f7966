"""Retail checkout use cases"""

from .record_checkout import RecordCheckout
from .mark_usages_eligible import MarkUsagesEligible
from .get_checkout_reward_info import GetCheckoutRewardInfo
from .dtos import (
    CheckoutRewardResponseDTO,
    CheckoutRewardInfoDTO,
    MarkUsagesEligibleResponseDTO,
)

__all__ = [
    "RecordCheckout",
    "MarkUsagesEligible",
    "GetCheckoutRewardInfo",
    "CheckoutRewardResponseDTO",
    "CheckoutRewardInfoDTO",
    "MarkUsagesEligibleResponseDTO",
]
