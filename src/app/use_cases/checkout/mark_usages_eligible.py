"""MarkUsagesEligible Use Case

After a retail checkout, the user's pending recipe usages become eligible
for creator payout.
"""

import logging
from datetime import datetime
from typing import Optional
from libs.result import Result, Return, Error
from src.app.errors import ErrorCode
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.recipe_usage_repository import RecipeUsageRepository
from .dtos import MarkUsagesEligibleResponseDTO

logger = logging.getLogger(__name__)


class MarkUsagesEligible:
    """
    Stamps walmart_checkout_at on every unpaid usage of the user that
    requires a checkout and is not stamped yet. Already stamped usages keep
    their original timestamp.
    """

    def __init__(self, uow: UnitOfWork, usage_repo: RecipeUsageRepository):
        self.uow = uow
        self.usage_repo = usage_repo

    async def execute(
        self, user_id: str, checkout_at: Optional[datetime] = None
    ) -> Result[MarkUsagesEligibleResponseDTO]:
        try:
            count = await self.usage_repo.mark_checkout_eligible(
                user_id, checkout_at or datetime.utcnow()
            )
            await self.uow.commit()

            if count:
                logger.info(f"Marked {count} recipe usages payout-eligible for user {user_id}")

            return Return.ok(MarkUsagesEligibleResponseDTO(user_id=user_id, usages_marked=count))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to mark usages eligible for user {user_id}: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.MARK_USAGES_FAILED,
                    message="Failed to mark recipe usages eligible",
                    reason=str(e),
                )
            )
