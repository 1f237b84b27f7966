"""Ledger Posting

The only code path that mutates credit balances. Every posting pairs one
balance mutation with exactly one CreditTransaction inside the caller's
unit of work; the caller commits or rolls back, so postings compose with
other writes (checkout counter, recipe usage, tier update) atomically.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional
from libs.result import Result, Return, Error
from src.app.errors import ErrorCode
from src.app.repositories.credit_transaction_repository import CreditTransactionRepository
from src.app.repositories.user_account_repository import UserAccountRepository
from src.domain.credit_transaction import CreditTransaction, TransactionType

logger = logging.getLogger(__name__)


@dataclass
class Posting:
    transaction: CreditTransaction
    is_replay: bool = False


class LedgerPosting:
    """
    Ledger Core primitives: grant and charge

    Business Rules:
    1. Amounts are positive integers; charges are stored negated
    2. Balance and transaction move together (same DB transaction)
    3. Charges use a conditional decrement, never check-then-act
    4. A known idempotency_key returns the original transaction untouched

    Does not commit; IntegrityError on a concurrent duplicate
    idempotency_key propagates to the caller, which must roll back.
    """

    def __init__(
        self,
        account_repo: UserAccountRepository,
        transaction_repo: CreditTransactionRepository,
    ):
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo

    async def grant(
        self,
        user_id: str,
        amount: int,
        transaction_type: TransactionType,
        description: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        idempotency_key: Optional[str] = None,
    ) -> Result[Posting]:
        """
        Add credits to a user's balance

        Returns:
            Result[Posting]: the new (or replayed) transaction, or USER_NOT_FOUND
        """
        self._validate_amount(amount)

        replay = await self._find_replay(idempotency_key)
        if replay:
            return Return.ok(replay)

        account = await self.account_repo.get_by_user_id(user_id)
        if not account:
            return Return.err(self._user_not_found(user_id))

        balance_after = await self.account_repo.increment_balance(user_id, amount)
        if balance_after is None:
            return Return.err(self._user_not_found(user_id))

        transaction = await self.transaction_repo.create(
            CreditTransaction(
                user_id=user_id,
                account_id=account.id,
                transaction_type=transaction_type,
                amount=amount,
                balance_after=balance_after,
                description=description,
                transaction_metadata=metadata or {},
                idempotency_key=idempotency_key,
            )
        )
        return Return.ok(Posting(transaction=transaction))

    async def charge(
        self,
        user_id: str,
        amount: int,
        transaction_type: TransactionType,
        description: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        idempotency_key: Optional[str] = None,
    ) -> Result[Posting]:
        """
        Deduct credits from a user's balance

        Returns:
            Result[Posting]: the new (or replayed) transaction, or
            INSUFFICIENT_CREDITS / USER_NOT_FOUND with nothing written
        """
        self._validate_amount(amount)

        replay = await self._find_replay(idempotency_key)
        if replay:
            return Return.ok(replay)

        account = await self.account_repo.get_by_user_id(user_id)
        if not account:
            return Return.err(self._user_not_found(user_id))

        balance_after = await self.account_repo.decrement_balance_if_sufficient(user_id, amount)
        if balance_after is None:
            available = await self.account_repo.get_balance(user_id)
            if available is None:
                return Return.err(self._user_not_found(user_id))
            logger.info(
                f"Charge rejected for user {user_id}: required={amount}, available={available}"
            )
            return Return.err(
                Error(
                    code=ErrorCode.INSUFFICIENT_CREDITS,
                    message=f"Insufficient credits. Required: {amount}, Available: {available}",
                    reason=f"balance={available}, required={amount}",
                )
            )

        transaction = await self.transaction_repo.create(
            CreditTransaction(
                user_id=user_id,
                account_id=account.id,
                transaction_type=transaction_type,
                amount=-amount,
                balance_after=balance_after,
                description=description,
                transaction_metadata=metadata or {},
                idempotency_key=idempotency_key,
            )
        )
        return Return.ok(Posting(transaction=transaction))

    async def _find_replay(self, idempotency_key: Optional[str]) -> Optional[Posting]:
        if not idempotency_key:
            return None
        existing = await self.transaction_repo.get_by_idempotency_key(idempotency_key)
        if existing:
            logger.info(f"Idempotent replay for key {idempotency_key} (transaction {existing.id})")
            return Posting(transaction=existing, is_replay=True)
        return None

    @staticmethod
    def _validate_amount(amount: int) -> None:
        if amount <= 0:
            raise ValueError(f"Posting amount must be a positive integer, got {amount}")

    @staticmethod
    def _user_not_found(user_id: str) -> Error:
        return Error(
            code=ErrorCode.USER_NOT_FOUND,
            message=f"User account not found for user {user_id}",
            reason="User may not exist or account not opened",
        )
