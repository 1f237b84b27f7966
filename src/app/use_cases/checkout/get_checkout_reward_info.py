"""GetCheckoutRewardInfo Use Case"""

from typing import Sequence
from libs.result import Result, Return, Error
from src.app.errors import ErrorCode
from src.app.repositories.user_account_repository import UserAccountRepository
from src.domain.loyalty import CHECKOUT_REWARD_SCHEDULE, checkout_reward, is_steady_state
from .dtos import CheckoutRewardInfoDTO


class GetCheckoutRewardInfo:
    """Preview of the reward for the user's next checkout"""

    def __init__(
        self,
        account_repo: UserAccountRepository,
        reward_schedule: Sequence[int] = CHECKOUT_REWARD_SCHEDULE,
    ):
        self.account_repo = account_repo
        self.reward_schedule = reward_schedule

    async def execute(self, user_id: str) -> Result[CheckoutRewardInfoDTO]:
        account = await self.account_repo.get_by_user_id(user_id)
        if not account:
            return Return.err(
                Error(
                    code=ErrorCode.USER_NOT_FOUND,
                    message=f"User account not found for user {user_id}",
                )
            )

        next_number = account.total_walmart_checkouts + 1
        return Return.ok(
            CheckoutRewardInfoDTO(
                user_id=user_id,
                total_checkouts=account.total_walmart_checkouts,
                checkout_number=next_number,
                next_reward=checkout_reward(next_number, self.reward_schedule),
                is_steady_state=is_steady_state(next_number, self.reward_schedule),
            )
        )
