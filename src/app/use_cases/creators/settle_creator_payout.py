"""SettleCreatorPayout Use Case

Settles one creator's eligible earnings as part of a payout batch.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional
from libs.result import Result, Return, Error
from src.app.errors import ErrorCode
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.creator_earning_repository import CreatorEarningRepository
from src.app.repositories.recipe_usage_repository import RecipeUsageRepository
from src.domain.payout import MINIMUM_PAYOUT
from .dtos import CreatorPayoutDTO

logger = logging.getLogger(__name__)


class SettleCreatorPayout:
    """
    Use Case: Settle a single creator within a payout batch

    Business Rules:
    1. Only unpaid earnings whose usage has a retail checkout are paid
    2. The threshold is re-checked on the locked rows; earnings that arrived
       or were paid since aggregation are accounted for
    3. Earnings get is_paid, paid_at and the batch id; their usages get
       is_paid and paid_at. All in one transaction.

    Flow:
    1. Select the creator's eligible earnings FOR UPDATE
    2. Sum and compare with minimum_payout (BELOW_PAYOUT_THRESHOLD otherwise)
    3. Mark earnings paid, mirror onto usages
    4. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        earning_repo: CreatorEarningRepository,
        usage_repo: RecipeUsageRepository,
        minimum_payout: Decimal = MINIMUM_PAYOUT,
    ):
        self.uow = uow
        self.earning_repo = earning_repo
        self.usage_repo = usage_repo
        self.minimum_payout = minimum_payout

    async def execute(
        self, creator_id: str, batch_id: str, paid_at: Optional[datetime] = None
    ) -> Result[CreatorPayoutDTO]:
        """
        Execute settlement for one creator

        Args:
            creator_id: Creator to settle
            batch_id: Shared id of the running batch
            paid_at: Settlement timestamp (defaults to now)

        Returns:
            Result[CreatorPayoutDTO]: settled amount or error
        """
        paid_at = paid_at or datetime.utcnow()

        try:
            earnings = await self.earning_repo.get_eligible_unpaid_by_creator(
                creator_id, for_update=True
            )
            total = sum((Decimal(e.amount) for e in earnings), Decimal("0"))

            if total < self.minimum_payout:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code=ErrorCode.BELOW_PAYOUT_THRESHOLD,
                        message=f"Creator {creator_id} has {total} eligible, minimum is {self.minimum_payout}",
                    )
                )

            earning_ids = [e.id for e in earnings]
            marked = await self.earning_repo.mark_paid(earning_ids, paid_at, batch_id)
            if marked != len(earning_ids):
                raise RuntimeError(
                    f"Expected to settle {len(earning_ids)} earnings, settled {marked}"
                )

            await self.usage_repo.mark_paid([e.recipe_usage_id for e in earnings], paid_at)
            await self.uow.commit()

            logger.info(
                f"Paid {total} to creator {creator_id} for {len(earning_ids)} earnings (batch {batch_id})"
            )

            return Return.ok(
                CreatorPayoutDTO(
                    creator_id=creator_id,
                    batch_id=batch_id,
                    total_amount=total,
                    earnings_paid=len(earning_ids),
                    paid_at=paid_at,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to settle payout for creator {creator_id}: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.PAYOUT_FAILED,
                    message=f"Failed to settle payout for creator {creator_id}",
                    reason=str(e),
                )
            )
