"""ReconcileLedger Use Case

Reconciles account balances against transaction history to detect discrepancies.
"""

import logging
import time
from datetime import datetime
from libs.result import Result, Return, Error
from src.app.errors import ErrorCode
from src.app.repositories.user_account_repository import UserAccountRepository
from src.app.repositories.credit_transaction_repository import CreditTransactionRepository
from .dtos import LedgerDiscrepancyDTO, ReconciliationResultDTO

logger = logging.getLogger(__name__)


class ReconcileLedger:
    """
    Use Case: Reconcile account balances against transactions

    Business Rules:
    1. The transaction log is the source of truth
    2. For each account, the expected balance is the sum of its transaction amounts
    3. Mismatches are recorded and logged
    4. Does NOT modify any data (read-only reconciliation)

    Flow:
    1. Get all accounts
    2. For each account:
       a. Get sum of all transactions for the user
       b. Compare with the account's credit_balance
       c. If mismatch, record discrepancy
    3. Return reconciliation result with all discrepancies
    """

    def __init__(
        self,
        account_repo: UserAccountRepository,
        transaction_repo: CreditTransactionRepository,
    ):
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo

    async def execute(self) -> Result[ReconciliationResultDTO]:
        """
        Execute ledger reconciliation

        Returns:
            Result[ReconciliationResultDTO]: Reconciliation result with any discrepancies
        """
        start_time = time.time()
        reconciliation_time = datetime.utcnow()

        try:
            logger.info("Starting credit ledger reconciliation")

            accounts = await self.account_repo.get_all()
            total_accounts = len(accounts)

            logger.info(f"Found {total_accounts} accounts to reconcile")

            discrepancies: list[LedgerDiscrepancyDTO] = []

            for account in accounts:
                transaction_sum = await self.transaction_repo.get_transaction_sum_by_user(
                    account.user_id
                )

                if account.credit_balance != transaction_sum:
                    discrepancy_amount = account.credit_balance - transaction_sum

                    discrepancies.append(
                        LedgerDiscrepancyDTO(
                            user_id=account.user_id,
                            account_id=account.id,
                            account_balance=account.credit_balance,
                            calculated_balance=transaction_sum,
                            discrepancy=discrepancy_amount,
                        )
                    )

                    logger.warning(
                        f"Discrepancy found for user {account.user_id} "
                        f"(account_id={account.id}): "
                        f"balance={account.credit_balance}, "
                        f"transaction_sum={transaction_sum}, "
                        f"discrepancy={discrepancy_amount}"
                    )

            execution_time_ms = int((time.time() - start_time) * 1000)

            if discrepancies:
                logger.warning(
                    f"Reconciliation complete. Found {len(discrepancies)} discrepancies "
                    f"out of {total_accounts} accounts in {execution_time_ms}ms"
                )
            else:
                logger.info(
                    f"Reconciliation complete. All {total_accounts} accounts balanced "
                    f"in {execution_time_ms}ms"
                )

            return Return.ok(
                ReconciliationResultDTO(
                    total_accounts_checked=total_accounts,
                    discrepancies_found=len(discrepancies),
                    discrepancies=discrepancies,
                    reconciliation_time=reconciliation_time,
                    execution_time_ms=execution_time_ms,
                )
            )

        except Exception as e:
            logger.error(f"Ledger reconciliation failed: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.RECONCILIATION_FAILED,
                    message="Failed to reconcile credit ledger",
                    reason=str(e),
                )
            )
