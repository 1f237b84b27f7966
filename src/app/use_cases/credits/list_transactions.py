"""
List Transactions Use Case

Retrieves credit transaction history for a user with pagination.
"""
from typing import Optional
from libs.result import Result, Return
from src.app.repositories.credit_transaction_repository import CreditTransactionRepository
from src.domain.credit_transaction import TransactionType
from .dtos import ListTransactionsResponseDTO, TransactionDTO

DEFAULT_PAGE_SIZE = 50


class ListTransactions:
    """
    Use case: View Credit Transactions

    Retrieves paginated transaction history for a user, optionally
    filtered by transaction type.
    Transactions are ordered by created_at DESC (most recent first).
    """

    def __init__(self, transaction_repo: CreditTransactionRepository):
        """
        Initialize with transaction repository.

        Args:
            transaction_repo: CreditTransactionRepository instance
        """
        self.transaction_repo = transaction_repo

    async def execute(
        self,
        user_id: str,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
        transaction_type: Optional[TransactionType] = None,
    ) -> Result[ListTransactionsResponseDTO]:
        """
        List transactions for a user with pagination.

        Args:
            user_id: User identifier
            limit: Maximum number of transactions to return (default 50)
            offset: Number of transactions to skip (default 0)
            transaction_type: Only return transactions of this type

        Returns:
            Result[ListTransactionsResponseDTO]: Paginated transaction list
        """
        transactions, total = await self.transaction_repo.get_by_user_id(
            user_id=user_id,
            limit=limit,
            offset=offset,
            transaction_type=transaction_type,
        )

        return Return.ok(
            ListTransactionsResponseDTO(
                transactions=[TransactionDTO.from_transaction(txn) for txn in transactions],
                total=total,
                limit=limit,
                offset=offset,
            )
        )
