"""RecordCheckout Use Case

Counts a completed retail checkout and grants the loyalty reward.
"""

import logging
from datetime import datetime
from typing import Optional, Sequence
from libs.result import Result, Return, Error
from src.app.errors import ErrorCode
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.ledger_posting import LedgerPosting
from src.app.repositories.user_account_repository import UserAccountRepository
from src.app.repositories.credit_transaction_repository import CreditTransactionRepository
from src.app.repositories.recipe_usage_repository import RecipeUsageRepository
from src.domain.credit_transaction import TransactionType
from src.domain.loyalty import CHECKOUT_REWARD_SCHEDULE, checkout_reward
from .dtos import CheckoutRewardResponseDTO

logger = logging.getLogger(__name__)


class RecordCheckout:
    """
    Use Case: Record a completed retail checkout

    Business Rules:
    1. Reward declines with the checkout ordinal: 15, 10, then 5 forever
    2. Counter increment, reward grant, transaction insert and usage
       stamping are one transaction; concurrent checkouts for a user get
       distinct ordinals, and a failure leaves no reward behind

    Flow:
    1. Increment total_walmart_checkouts (UPDATE takes the row lock) and read the new value
    2. Compute reward for that ordinal
    3. Post walmart_checkout grant with {checkout_number, credits_granted}
    4. Stamp the user's pending recipe usages payout-eligible (when a usage repo is given)
    5. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: UserAccountRepository,
        transaction_repo: CreditTransactionRepository,
        usage_repo: Optional[RecipeUsageRepository] = None,
        reward_schedule: Sequence[int] = CHECKOUT_REWARD_SCHEDULE,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.usage_repo = usage_repo
        self.posting = LedgerPosting(account_repo, transaction_repo)
        self.reward_schedule = reward_schedule

    async def execute(
        self, user_id: str, checkout_at: Optional[datetime] = None
    ) -> Result[CheckoutRewardResponseDTO]:
        try:
            checkout_number = await self.account_repo.increment_checkout_count(user_id)
            if checkout_number is None:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code=ErrorCode.USER_NOT_FOUND,
                        message=f"User account not found for user {user_id}",
                    )
                )

            reward = checkout_reward(checkout_number, self.reward_schedule)

            result = await self.posting.grant(
                user_id=user_id,
                amount=reward,
                transaction_type=TransactionType.WALMART_CHECKOUT,
                description=f"Walmart checkout #{checkout_number}",
                metadata={"checkout_number": checkout_number, "credits_granted": reward},
            )
            if result.is_err():
                await self.uow.rollback()
                return Return.err(result.error)

            transaction = result.value.transaction

            usages_marked = 0
            if self.usage_repo is not None:
                usages_marked = await self.usage_repo.mark_checkout_eligible(
                    user_id, checkout_at or datetime.utcnow()
                )

            await self.uow.commit()

            logger.info(
                f"Granted {reward} credits to user {user_id} for checkout #{checkout_number}, "
                f"{usages_marked} recipe usages marked payout-eligible"
            )

            return Return.ok(
                CheckoutRewardResponseDTO(
                    user_id=user_id,
                    checkout_number=checkout_number,
                    credits_granted=reward,
                    balance_after=transaction.balance_after,
                    transaction_id=transaction.id,
                    next_reward=checkout_reward(checkout_number + 1, self.reward_schedule),
                    usages_marked=usages_marked,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to record checkout for user {user_id}: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.RECORD_CHECKOUT_FAILED,
                    message="Failed to record checkout",
                    reason=str(e),
                )
            )
