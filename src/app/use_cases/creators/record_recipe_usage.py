"""RecordRecipeUsage Use Case

Records that a user used a recipe, accruing the creator's earning and
optionally charging the user in the same transaction.
"""

import logging
from libs.result import Result, Return, Error
from src.app.errors import ErrorCode
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.ledger_posting import LedgerPosting
from src.app.repositories.user_account_repository import UserAccountRepository
from src.app.repositories.credit_transaction_repository import CreditTransactionRepository
from src.app.repositories.recipe_usage_repository import RecipeUsageRepository
from src.app.repositories.creator_earning_repository import CreatorEarningRepository
from src.domain.credit_transaction import TransactionType
from src.domain.creator_earning import CreatorEarning
from src.domain.recipe_usage import RecipeUsage
from .dtos import RecordRecipeUsageCommandDTO, RecipeUsageResponseDTO

logger = logging.getLogger(__name__)


class RecordRecipeUsage:
    """
    Use Case: Record a recipe usage

    Business Rules:
    1. The charge (if any) happens first; INSUFFICIENT_CREDITS records nothing
    2. A usage with a creator and a nonzero earning gets exactly one CreatorEarning
    3. Usage, earning and charge commit together
    """

    def __init__(
        self,
        uow: UnitOfWork,
        usage_repo: RecipeUsageRepository,
        earning_repo: CreatorEarningRepository,
        account_repo: UserAccountRepository,
        transaction_repo: CreditTransactionRepository,
    ):
        self.uow = uow
        self.usage_repo = usage_repo
        self.earning_repo = earning_repo
        self.posting = LedgerPosting(account_repo, transaction_repo)

    async def execute(self, command: RecordRecipeUsageCommandDTO) -> Result[RecipeUsageResponseDTO]:
        try:
            balance_after = None
            if command.credit_cost > 0:
                charge = await self.posting.charge(
                    user_id=command.user_id,
                    amount=command.credit_cost,
                    transaction_type=TransactionType.RECIPE_USE,
                    description=f"Recipe {command.recipe_id}",
                    metadata={"recipe_id": command.recipe_id},
                )
                if charge.is_err():
                    await self.uow.rollback()
                    return Return.err(charge.error)
                balance_after = charge.value.transaction.balance_after

            usage = await self.usage_repo.create(
                RecipeUsage(
                    user_id=command.user_id,
                    recipe_id=command.recipe_id,
                    creator_id=command.creator_id,
                    creator_earning_amount=command.creator_earning_amount,
                    credit_cost=command.credit_cost,
                    is_paid=False,
                    requires_walmart=command.requires_walmart,
                )
            )

            earning = None
            if command.creator_id and command.creator_earning_amount > 0:
                earning = await self.earning_repo.create(
                    CreatorEarning(
                        creator_id=command.creator_id,
                        recipe_usage_id=usage.id,
                        amount=command.creator_earning_amount,
                        is_paid=False,
                    )
                )

            await self.uow.commit()

            logger.info(
                f"Recorded usage of recipe {command.recipe_id} by user {command.user_id}"
                + (f", {command.creator_earning_amount} accrued to {command.creator_id}" if earning else "")
            )

            return Return.ok(
                RecipeUsageResponseDTO(
                    usage_id=usage.id,
                    user_id=usage.user_id,
                    recipe_id=usage.recipe_id,
                    creator_earning_id=earning.id if earning else None,
                    credits_charged=command.credit_cost,
                    balance_after=balance_after,
                    transaction_type=TransactionType.RECIPE_USE if command.credit_cost > 0 else None,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to record recipe usage for user {command.user_id}: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.RECORD_USAGE_FAILED,
                    message="Failed to record recipe usage",
                    reason=str(e),
                )
            )
