"""Recipe Usage Repository Interface"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from src.domain.recipe_usage import RecipeUsage


class RecipeUsageRepository(ABC):

    @abstractmethod
    async def create(self, usage: RecipeUsage) -> RecipeUsage:
        pass

    @abstractmethod
    async def get_by_id(self, usage_id: int) -> Optional[RecipeUsage]:
        pass

    @abstractmethod
    async def mark_checkout_eligible(self, user_id: str, checkout_at: datetime) -> int:
        """
        Stamp walmart_checkout_at on the user's unpaid usages that require
        a retail checkout and have not been stamped yet

        Returns:
            Number of usages stamped
        """
        pass

    @abstractmethod
    async def mark_paid(self, usage_ids: List[int], paid_at: datetime) -> int:
        pass
