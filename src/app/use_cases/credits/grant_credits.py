"""GrantCredits Use Case

Grants credits to a user's balance. Balance increment and transaction
insert commit together; an idempotency key makes repeated grants no-ops.
"""

import logging
from sqlalchemy.exc import IntegrityError
from libs.result import Result, Return, Error
from src.app.errors import ErrorCode
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.ledger_posting import LedgerPosting
from src.app.repositories.user_account_repository import UserAccountRepository
from src.app.repositories.credit_transaction_repository import CreditTransactionRepository
from .dtos import GrantCreditsCommandDTO, CreditTransactionResponseDTO

logger = logging.getLogger(__name__)


class GrantCredits:
    """
    Use Case: Grant credits to a user

    Business Rules:
    1. Idempotency: Same idempotency_key returns same transaction
    2. User must have an account (USER_NOT_FOUND otherwise)
    3. Atomic updates: Balance and transaction committed together

    Flow:
    1. Post grant through LedgerPosting
    2. Commit
    3. On a concurrent duplicate key, roll back and return the winner
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: UserAccountRepository,
        transaction_repo: CreditTransactionRepository,
    ):
        self.uow = uow
        self.transaction_repo = transaction_repo
        self.posting = LedgerPosting(account_repo, transaction_repo)

    async def execute(self, command: GrantCreditsCommandDTO) -> Result[CreditTransactionResponseDTO]:
        """
        Execute credit grant

        Args:
            command: GrantCreditsCommandDTO with user_id, amount, type

        Returns:
            Result[CreditTransactionResponseDTO]: Success with transaction details or error
        """
        try:
            result = await self.posting.grant(
                user_id=command.user_id,
                amount=command.amount,
                transaction_type=command.transaction_type,
                description=command.description,
                metadata=command.metadata,
                idempotency_key=command.idempotency_key,
            )

            if result.is_err():
                await self.uow.rollback()
                return Return.err(result.error)

            posting = result.value
            if not posting.is_replay:
                await self.uow.commit()
                logger.info(
                    f"Granted {command.amount} credits ({command.transaction_type.value}) "
                    f"to user {command.user_id}"
                )

            return Return.ok(
                CreditTransactionResponseDTO.from_transaction(posting.transaction, posting.is_replay)
            )

        except IntegrityError:
            # Lost a race on the idempotency key: the other grant already committed
            await self.uow.rollback()
            existing = None
            if command.idempotency_key:
                existing = await self.transaction_repo.get_by_idempotency_key(command.idempotency_key)
            if existing:
                return Return.ok(CreditTransactionResponseDTO.from_transaction(existing, is_replay=True))
            return Return.err(
                Error(
                    code=ErrorCode.GRANT_CREDITS_FAILED,
                    message="Failed to grant credits",
                    reason="Integrity error without a matching idempotency key",
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to grant credits to user {command.user_id}: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.GRANT_CREDITS_FAILED,
                    message="Failed to grant credits",
                    reason=str(e),
                )
            )
