"""GrantSignupBonus Use Case

One-time welcome credits for new users.
"""

from libs.result import Result
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.user_account_repository import UserAccountRepository
from src.app.repositories.credit_transaction_repository import CreditTransactionRepository
from src.domain.credit_products import SIGNUP_BONUS_CREDITS
from src.domain.credit_transaction import TransactionType
from .dtos import GrantCreditsCommandDTO, CreditTransactionResponseDTO
from .grant_credits import GrantCredits


class GrantSignupBonus:
    """
    Grants the signup bonus exactly once per user.

    The idempotency key signup_bonus:<user_id> turns repeated calls into
    replays of the first grant.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: UserAccountRepository,
        transaction_repo: CreditTransactionRepository,
        bonus_credits: int = SIGNUP_BONUS_CREDITS,
    ):
        self.grant_credits = GrantCredits(uow, account_repo, transaction_repo)
        self.bonus_credits = bonus_credits

    async def execute(self, user_id: str) -> Result[CreditTransactionResponseDTO]:
        return await self.grant_credits.execute(
            GrantCreditsCommandDTO(
                user_id=user_id,
                amount=self.bonus_credits,
                transaction_type=TransactionType.SIGNUP_BONUS,
                description="Welcome bonus credits",
                metadata={},
                idempotency_key=f"signup_bonus:{user_id}",
            )
        )
