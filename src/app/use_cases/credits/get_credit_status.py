"""GetCreditStatus Use Case

Everything a client needs to render the credits screen in one call.
"""

from datetime import datetime, timedelta
from typing import Optional
from libs.result import Result, Return, Error
from src.app.errors import ErrorCode
from src.app.repositories.user_account_repository import UserAccountRepository
from src.app.repositories.credit_transaction_repository import CreditTransactionRepository
from src.domain.subscription_tier import SubscriptionTier
from .dtos import CreditStatusResponseDTO, TransactionDTO

RECENT_TRANSACTIONS_LIMIT = 10
DEFAULT_ENTITLEMENT_STALE_HOURS = 24


class GetCreditStatus:
    """
    Balance, tier flags, checkout count and the latest transactions.

    needs_entitlement_refresh is set when the tier was never confirmed by an
    entitlement event or the last confirmation is older than stale_hours,
    so the client can re-sync with the subscription platform.
    """

    def __init__(
        self,
        account_repo: UserAccountRepository,
        transaction_repo: CreditTransactionRepository,
        stale_hours: int = DEFAULT_ENTITLEMENT_STALE_HOURS,
    ):
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo
        self.stale_hours = stale_hours

    async def execute(
        self, user_id: str, now: Optional[datetime] = None
    ) -> Result[CreditStatusResponseDTO]:
        account = await self.account_repo.get_by_user_id(user_id)
        if not account:
            return Return.err(
                Error(
                    code=ErrorCode.USER_NOT_FOUND,
                    message=f"User account not found for user {user_id}",
                )
            )

        transactions, _ = await self.transaction_repo.get_by_user_id(
            user_id=user_id, limit=RECENT_TRANSACTIONS_LIMIT, offset=0
        )

        now = now or datetime.utcnow()
        last_checked = account.entitlement_last_checked_at
        needs_refresh = last_checked is None or now - last_checked > timedelta(hours=self.stale_hours)

        return Return.ok(
            CreditStatusResponseDTO(
                user_id=account.user_id,
                balance=account.credit_balance,
                subscription_tier=SubscriptionTier(account.subscription_tier).value,
                is_pro_user=account.is_pro_user,
                is_power_user=account.is_power_user,
                total_walmart_checkouts=account.total_walmart_checkouts,
                member_since=account.created_at,
                recent_transactions=[TransactionDTO.from_transaction(txn) for txn in transactions],
                needs_entitlement_refresh=needs_refresh,
            )
        )
