"""SQLAlchemy implementation of UserAccountRepository

Balance and counter changes are single UPDATE statements evaluated by the
database, so concurrent requests for the same user serialize on the row
lock instead of racing on a read-then-write.
"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.user_account_repository import UserAccountRepository
from src.domain.subscription_tier import SubscriptionTier, tier_flags
from src.domain.user_account import UserAccount


class SqlAlchemyUserAccountRepository(UserAccountRepository):
    """
    SQLAlchemy implementation of UserAccountRepository

    Features:
    - Conditional decrement (balance >= amount) in a single statement
    - Relative increments for balance and checkout counter
    - Single update path for tier + feature flags
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_id(self, user_id: str, for_update: bool = False) -> Optional[UserAccount]:
        """
        Retrieve account by user ID with optional row-level locking

        Args:
            user_id: External user identifier
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            UserAccount if found, None otherwise
        """
        stmt = (
            select(UserAccount)
            .where(UserAccount.user_id == user_id)
            .execution_options(populate_existing=True)
        )

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_all(self) -> List[UserAccount]:
        result = await self.session.execute(select(UserAccount).order_by(UserAccount.id))
        return list(result.scalars().all())

    async def create(self, account: UserAccount) -> UserAccount:
        self.session.add(account)
        await self.session.flush()
        await self.session.refresh(account)
        return account

    async def get_balance(self, user_id: str) -> Optional[int]:
        stmt = select(UserAccount.credit_balance).where(UserAccount.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def increment_balance(self, user_id: str, amount: int) -> Optional[int]:
        stmt = (
            update(UserAccount)
            .where(UserAccount.user_id == user_id)
            .values(
                credit_balance=UserAccount.credit_balance + amount,
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            return None
        return await self.get_balance(user_id)

    async def decrement_balance_if_sufficient(self, user_id: str, amount: int) -> Optional[int]:
        """
        Atomic conditional decrement

        The WHERE clause is re-evaluated by the database after acquiring the
        row lock, so two concurrent charges can never both observe a
        sufficient balance.
        """
        stmt = (
            update(UserAccount)
            .where(
                UserAccount.user_id == user_id,
                UserAccount.credit_balance >= amount,
            )
            .values(
                credit_balance=UserAccount.credit_balance - amount,
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            return None
        return await self.get_balance(user_id)

    async def increment_checkout_count(self, user_id: str) -> Optional[int]:
        stmt = (
            update(UserAccount)
            .where(UserAccount.user_id == user_id)
            .values(
                total_walmart_checkouts=UserAccount.total_walmart_checkouts + 1,
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            return None

        count_stmt = select(UserAccount.total_walmart_checkouts).where(
            UserAccount.user_id == user_id
        )
        count_result = await self.session.execute(count_stmt)
        return count_result.scalar_one()

    async def update_subscription_tier(
        self, user_id: str, tier: SubscriptionTier, checked_at: datetime
    ) -> bool:
        is_pro_user, is_power_user = tier_flags(tier)
        stmt = (
            update(UserAccount)
            .where(UserAccount.user_id == user_id)
            .values(
                subscription_tier=tier,
                is_pro_user=is_pro_user,
                is_power_user=is_power_user,
                entitlement_last_checked_at=checked_at,
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0
