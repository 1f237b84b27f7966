"""Creator earnings and payout use cases"""

from .record_recipe_usage import RecordRecipeUsage
from .settle_creator_payout import SettleCreatorPayout
from .get_creator_earnings_summary import GetCreatorEarningsSummary
from .dtos import (
    RecordRecipeUsageCommandDTO,
    RecipeUsageResponseDTO,
    CreatorPayoutDTO,
    PayoutFailureDTO,
    PayoutBatchResultDTO,
    CreatorEarningsSummaryDTO,
)

__all__ = [
    "RecordRecipeUsage",
    "SettleCreatorPayout",
    "GetCreatorEarningsSummary",
    "RecordRecipeUsageCommandDTO",
    "RecipeUsageResponseDTO",
    "CreatorPayoutDTO",
    "PayoutFailureDTO",
    "PayoutBatchResultDTO",
    "CreatorEarningsSummaryDTO",
]
