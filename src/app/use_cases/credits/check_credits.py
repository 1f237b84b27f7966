"""Check Credits Use Case

Answers whether a user can afford a feature before running it.
"""

from libs.result import Result, Return, Error
from src.app.errors import ErrorCode
from src.app.repositories.user_account_repository import UserAccountRepository
from .dtos import CreditCheckResponseDTO


class CheckCredits:
    """
    Read-only pre-flight check. The answer may be stale by the time the
    caller charges; ChargeCredits is the authoritative check.
    """

    def __init__(self, account_repo: UserAccountRepository):
        self.account_repo = account_repo

    async def execute(self, user_id: str, amount: int) -> Result[CreditCheckResponseDTO]:
        balance = await self.account_repo.get_balance(user_id)

        if balance is None:
            return Return.err(
                Error(
                    code=ErrorCode.USER_NOT_FOUND,
                    message=f"User account not found for user {user_id}",
                )
            )

        return Return.ok(
            CreditCheckResponseDTO(
                user_id=user_id,
                required=amount,
                balance=balance,
                has_enough_credits=balance >= amount,
            )
        )
