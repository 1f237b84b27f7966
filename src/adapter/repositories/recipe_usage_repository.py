"""SQLAlchemy implementation of RecipeUsageRepository"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.recipe_usage_repository import RecipeUsageRepository
from src.domain.recipe_usage import RecipeUsage


class SqlAlchemyRecipeUsageRepository(RecipeUsageRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, usage: RecipeUsage) -> RecipeUsage:
        self.session.add(usage)
        await self.session.flush()
        await self.session.refresh(usage)
        return usage

    async def get_by_id(self, usage_id: int) -> Optional[RecipeUsage]:
        stmt = (
            select(RecipeUsage)
            .where(RecipeUsage.id == usage_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def mark_checkout_eligible(self, user_id: str, checkout_at: datetime) -> int:
        """
        Stamp the checkout time on eligible usages in one statement

        Args:
            user_id: User who completed the checkout
            checkout_at: Timestamp to stamp

        Returns:
            Number of usages stamped
        """
        stmt = (
            update(RecipeUsage)
            .where(
                RecipeUsage.user_id == user_id,
                RecipeUsage.is_paid.is_(False),
                RecipeUsage.requires_walmart.is_(True),
                RecipeUsage.walmart_checkout_at.is_(None),
            )
            .values(walmart_checkout_at=checkout_at)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def mark_paid(self, usage_ids: List[int], paid_at: datetime) -> int:
        if not usage_ids:
            return 0
        stmt = (
            update(RecipeUsage)
            .where(RecipeUsage.id.in_(usage_ids))
            .values(is_paid=True, paid_at=paid_at)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount
