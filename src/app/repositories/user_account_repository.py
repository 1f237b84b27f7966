"""User Account Repository Interface

Defines the contract for user account persistence. Balance and counter
mutations are single conditional/relative UPDATE statements so that
concurrent requests for the same user cannot interleave.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from src.domain.subscription_tier import SubscriptionTier
from src.domain.user_account import UserAccount


class UserAccountRepository(ABC):
    """
    Repository interface for UserAccount persistence

    None returned from a mutation means no row was affected.
    """

    @abstractmethod
    async def get_by_user_id(self, user_id: str, for_update: bool = False) -> Optional[UserAccount]:
        """
        Retrieve account by user ID

        Args:
            user_id: External user identifier
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            UserAccount if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_all(self) -> List[UserAccount]:
        pass

    @abstractmethod
    async def create(self, account: UserAccount) -> UserAccount:
        pass

    @abstractmethod
    async def get_balance(self, user_id: str) -> Optional[int]:
        """Current committed (or in-transaction) balance, None if no account"""
        pass

    @abstractmethod
    async def increment_balance(self, user_id: str, amount: int) -> Optional[int]:
        """
        Add amount to the balance

        Returns:
            New balance, or None if the account does not exist
        """
        pass

    @abstractmethod
    async def decrement_balance_if_sufficient(self, user_id: str, amount: int) -> Optional[int]:
        """
        Subtract amount only where balance >= amount

        Returns:
            New balance, or None if the decrement did not take effect
            (account missing or balance insufficient)
        """
        pass

    @abstractmethod
    async def increment_checkout_count(self, user_id: str) -> Optional[int]:
        """
        Increment total_walmart_checkouts

        Returns:
            New checkout count, or None if the account does not exist
        """
        pass

    @abstractmethod
    async def update_subscription_tier(
        self, user_id: str, tier: SubscriptionTier, checked_at: datetime
    ) -> bool:
        """
        Set tier, both feature flags and entitlement_last_checked_at together

        Returns:
            True if the account exists and was updated
        """
        pass
