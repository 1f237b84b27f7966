"""GetCreatorEarningsSummary Use Case"""

from decimal import Decimal
from libs.result import Result, Return
from src.app.repositories.creator_earning_repository import CreatorEarningRepository
from src.domain.payout import MINIMUM_PAYOUT
from .dtos import CreatorEarningsSummaryDTO


class GetCreatorEarningsSummary:
    """
    Lifetime totals for a creator's earnings

    pending_eligible counts unpaid earnings whose usage already has a
    retail checkout, i.e. what the next payout run would consider.
    Uses by users whose account no longer exists count as free uses.
    """

    def __init__(
        self,
        earning_repo: CreatorEarningRepository,
        minimum_payout: Decimal = MINIMUM_PAYOUT,
    ):
        self.earning_repo = earning_repo
        self.minimum_payout = minimum_payout

    async def execute(self, creator_id: str) -> Result[CreatorEarningsSummaryDTO]:
        rows = await self.earning_repo.get_by_creator_with_usage(creator_id)

        zero = Decimal("0")
        total_earned = sum((Decimal(e.amount) for e, _, _ in rows), zero)
        paid_out = sum((Decimal(e.amount) for e, _, _ in rows if e.is_paid), zero)
        pending_eligible = sum(
            (
                Decimal(e.amount)
                for e, usage, _ in rows
                if not e.is_paid and usage.walmart_checkout_at is not None
            ),
            zero,
        )
        pro_user_uses = sum(1 for _, _, is_pro in rows if is_pro)

        return Return.ok(
            CreatorEarningsSummaryDTO(
                creator_id=creator_id,
                total_earned=total_earned,
                paid_out=paid_out,
                pending=total_earned - paid_out,
                pending_eligible=pending_eligible,
                total_uses=len(rows),
                pro_user_uses=pro_user_uses,
                free_user_uses=len(rows) - pro_user_uses,
                minimum_payout=self.minimum_payout,
                payout_ready=pending_eligible >= self.minimum_payout,
            )
        )
