from .user_account_repository import SqlAlchemyUserAccountRepository
from .credit_transaction_repository import SqlAlchemyCreditTransactionRepository
from .recipe_usage_repository import SqlAlchemyRecipeUsageRepository
from .creator_earning_repository import SqlAlchemyCreatorEarningRepository

__all__ = [
    "SqlAlchemyUserAccountRepository",
    "SqlAlchemyCreditTransactionRepository",
    "SqlAlchemyRecipeUsageRepository",
    "SqlAlchemyCreatorEarningRepository",
]
