"""CheckTierAccess Use Case"""

from libs.result import Result, Return, Error
from src.app.errors import ErrorCode
from src.app.repositories.user_account_repository import UserAccountRepository
from src.domain.subscription_tier import SubscriptionTier
from .dtos import TierAccessResponseDTO


class CheckTierAccess:
    """Pro features are open to pro and power users; power features only to power."""

    def __init__(self, account_repo: UserAccountRepository):
        self.account_repo = account_repo

    async def execute(self, user_id: str, required_tier: SubscriptionTier) -> Result[TierAccessResponseDTO]:
        account = await self.account_repo.get_by_user_id(user_id)
        if not account:
            return Return.err(
                Error(
                    code=ErrorCode.USER_NOT_FOUND,
                    message=f"User account not found for user {user_id}",
                )
            )

        current = SubscriptionTier(account.subscription_tier)
        return Return.ok(
            TierAccessResponseDTO(
                user_id=user_id,
                required_tier=required_tier,
                current_tier=current,
                has_access=account.has_tier_access(required_tier),
            )
        )
