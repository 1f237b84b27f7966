from .user_account_repository import UserAccountRepository
from .credit_transaction_repository import CreditTransactionRepository
from .recipe_usage_repository import RecipeUsageRepository
from .creator_earning_repository import CreatorEarningRepository

__all__ = [
    "UserAccountRepository",
    "CreditTransactionRepository",
    "RecipeUsageRepository",
    "CreatorEarningRepository",
]
