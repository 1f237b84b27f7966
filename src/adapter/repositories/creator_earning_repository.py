"""SQLAlchemy implementation of CreatorEarningRepository"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple
from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.creator_earning_repository import CreatorEarningRepository
from src.domain.creator_earning import CreatorEarning
from src.domain.recipe_usage import RecipeUsage
from src.domain.user_account import UserAccount


class SqlAlchemyCreatorEarningRepository(CreatorEarningRepository):
    """
    SQLAlchemy implementation of CreatorEarningRepository

    Eligibility is a join on the linked usage's walmart_checkout_at.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    def _eligible_conditions(self):
        return (
            CreatorEarning.is_paid.is_(False),
            RecipeUsage.walmart_checkout_at.is_not(None),
        )

    async def create(self, earning: CreatorEarning) -> CreatorEarning:
        self.session.add(earning)
        await self.session.flush()
        await self.session.refresh(earning)
        return earning

    async def get_eligible_unpaid_amounts(self) -> List[Tuple[str, Decimal]]:
        stmt = (
            select(CreatorEarning.creator_id, CreatorEarning.amount)
            .join(RecipeUsage, RecipeUsage.id == CreatorEarning.recipe_usage_id)
            .where(*self._eligible_conditions())
        )
        result = await self.session.execute(stmt)
        return [(creator_id, amount) for creator_id, amount in result.all()]

    async def get_eligible_unpaid_by_creator(
        self, creator_id: str, for_update: bool = False
    ) -> List[CreatorEarning]:
        """
        Eligible earnings of one creator, optionally locked for settlement

        Args:
            creator_id: Creator identifier
            for_update: If True, locks the earning rows with SELECT FOR UPDATE

        Returns:
            List of eligible unpaid CreatorEarning rows
        """
        stmt = (
            select(CreatorEarning)
            .join(RecipeUsage, RecipeUsage.id == CreatorEarning.recipe_usage_id)
            .where(CreatorEarning.creator_id == creator_id, *self._eligible_conditions())
            .order_by(CreatorEarning.id)
            .execution_options(populate_existing=True)
        )

        if for_update:
            stmt = stmt.with_for_update(of=CreatorEarning)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def mark_paid(self, earning_ids: List[int], paid_at: datetime, batch_id: str) -> int:
        if not earning_ids:
            return 0
        stmt = (
            update(CreatorEarning)
            .where(CreatorEarning.id.in_(earning_ids), CreatorEarning.is_paid.is_(False))
            .values(is_paid=True, paid_at=paid_at, batch_id=batch_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def get_by_batch_id(self, batch_id: str) -> List[CreatorEarning]:
        stmt = (
            select(CreatorEarning)
            .where(CreatorEarning.batch_id == batch_id)
            .order_by(CreatorEarning.id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_creator_with_usage(
        self, creator_id: str
    ) -> List[Tuple[CreatorEarning, RecipeUsage, Optional[bool]]]:
        stmt = (
            select(CreatorEarning, RecipeUsage, UserAccount.is_pro_user)
            .join(RecipeUsage, RecipeUsage.id == CreatorEarning.recipe_usage_id)
            .outerjoin(UserAccount, UserAccount.user_id == RecipeUsage.user_id)
            .where(CreatorEarning.creator_id == creator_id)
            .order_by(CreatorEarning.id)
        )
        result = await self.session.execute(stmt)
        return [(earning, usage, is_pro) for earning, usage, is_pro in result.all()]
