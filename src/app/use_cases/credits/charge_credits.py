"""ChargeCredits Use Case

Charges credits from a user's balance. The balance check and decrement are
one conditional UPDATE, so concurrent charges for the same user can never
overdraw the balance.
"""

import logging
from sqlalchemy.exc import IntegrityError
from libs.result import Result, Return, Error
from src.app.errors import ErrorCode
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.ledger_posting import LedgerPosting
from src.app.repositories.user_account_repository import UserAccountRepository
from src.app.repositories.credit_transaction_repository import CreditTransactionRepository
from .dtos import ChargeCreditsCommandDTO, CreditTransactionResponseDTO

logger = logging.getLogger(__name__)


class ChargeCredits:
    """
    Use Case: Charge credits for a feature

    Business Rules:
    1. Sufficient balance: balance >= amount, checked atomically with the decrement
    2. All-or-nothing: INSUFFICIENT_CREDITS writes nothing
    3. Atomic updates: Balance and negative transaction committed together
    4. Optional idempotency_key makes client retries safe

    Flow:
    1. Post charge through LedgerPosting (conditional decrement + insert)
    2. Commit, or roll back on any error
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

    async def execute(self, command: ChargeCreditsCommandDTO) -> Result[CreditTransactionResponseDTO]:
        """
        Execute credit charge

        Args:
            command: ChargeCreditsCommandDTO with user_id, amount, type

        Returns:
            Result[CreditTransactionResponseDTO]: Success with transaction details or error
        """
        try:
            result = await self.posting.charge(
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

            return Return.ok(
                CreditTransactionResponseDTO.from_transaction(posting.transaction, posting.is_replay)
            )

        except IntegrityError:
            await self.uow.rollback()
            existing = None
            if command.idempotency_key:
                existing = await self.transaction_repo.get_by_idempotency_key(command.idempotency_key)
            if existing:
                return Return.ok(CreditTransactionResponseDTO.from_transaction(existing, is_replay=True))
            return Return.err(
                Error(
                    code=ErrorCode.CHARGE_CREDITS_FAILED,
                    message="Failed to charge credits",
                    reason="Integrity error without a matching idempotency key",
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to charge credits for user {command.user_id}: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.CHARGE_CREDITS_FAILED,
                    message="Failed to charge credits",
                    reason=str(e),
                )
            )
