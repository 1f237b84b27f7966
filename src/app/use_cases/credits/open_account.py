"""OpenAccount Use Case

Creates the ledger account for a newly registered user.
"""

import logging
from sqlalchemy.exc import IntegrityError
from libs.result import Result, Return, Error
from src.app.errors import ErrorCode
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.user_account_repository import UserAccountRepository
from src.domain.user_account import UserAccount
from src.domain.subscription_tier import SubscriptionTier
from .dtos import AccountResponseDTO

logger = logging.getLogger(__name__)


class OpenAccount:
    """
    Use Case: Open a credit account

    Business Rules:
    1. One account per user (ACCOUNT_ALREADY_EXISTS otherwise)
    2. Starts with zero balance and no subscription tier
    """

    def __init__(self, uow: UnitOfWork, account_repo: UserAccountRepository):
        self.uow = uow
        self.account_repo = account_repo

    async def execute(self, user_id: str) -> Result[AccountResponseDTO]:
        try:
            existing = await self.account_repo.get_by_user_id(user_id)
            if existing:
                return Return.err(
                    Error(
                        code=ErrorCode.ACCOUNT_ALREADY_EXISTS,
                        message=f"Account already exists for user {user_id}",
                    )
                )

            account = await self.account_repo.create(
                UserAccount(
                    user_id=user_id,
                    credit_balance=0,
                    subscription_tier=SubscriptionTier.NONE,
                    is_pro_user=False,
                    is_power_user=False,
                    total_walmart_checkouts=0,
                )
            )
            await self.uow.commit()

            logger.info(f"Opened credit account for user {user_id}")

            return Return.ok(
                AccountResponseDTO(
                    user_id=account.user_id,
                    credit_balance=account.credit_balance,
                    subscription_tier=SubscriptionTier(account.subscription_tier).value,
                    is_pro_user=account.is_pro_user,
                    is_power_user=account.is_power_user,
                    total_walmart_checkouts=account.total_walmart_checkouts,
                    created_at=account.created_at,
                )
            )

        except IntegrityError:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code=ErrorCode.ACCOUNT_ALREADY_EXISTS,
                    message=f"Account already exists for user {user_id}",
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to open account for user {user_id}: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.OPEN_ACCOUNT_FAILED,
                    message="Failed to open account",
                    reason=str(e),
                )
            )
