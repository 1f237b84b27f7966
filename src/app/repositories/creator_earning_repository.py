"""Creator Earning Repository Interface"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple
from src.domain.creator_earning import CreatorEarning
from src.domain.recipe_usage import RecipeUsage


class CreatorEarningRepository(ABC):
    """
    Repository interface for CreatorEarning persistence

    "Eligible" means unpaid and linked to a usage whose
    walmart_checkout_at is set.
    """

    @abstractmethod
    async def create(self, earning: CreatorEarning) -> CreatorEarning:
        pass

    @abstractmethod
    async def get_eligible_unpaid_amounts(self) -> List[Tuple[str, Decimal]]:
        """Projection of (creator_id, amount) for every eligible earning"""
        pass

    @abstractmethod
    async def get_eligible_unpaid_by_creator(
        self, creator_id: str, for_update: bool = False
    ) -> List[CreatorEarning]:
        pass

    @abstractmethod
    async def mark_paid(self, earning_ids: List[int], paid_at: datetime, batch_id: str) -> int:
        pass

    @abstractmethod
    async def get_by_batch_id(self, batch_id: str) -> List[CreatorEarning]:
        pass

    @abstractmethod
    async def get_by_creator_with_usage(
        self, creator_id: str
    ) -> List[Tuple[CreatorEarning, RecipeUsage, Optional[bool]]]:
        """
        Every earning of a creator with its usage and whether the consuming
        user is currently a Pro user (None if the account is gone)
        """
        pass
