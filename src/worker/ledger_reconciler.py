"""Ledger Reconciliation Background Worker

Periodically reconciles account balances against transaction history and
raises a ledger alert per discrepancy.
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import sessionmaker

from config import ApplicationConfig
from src.adapter.repositories import (
    SqlAlchemyCreditTransactionRepository,
    SqlAlchemyUserAccountRepository,
)
from src.adapter.services.notification_service import create_notification_service
from src.app.services.notification_service import NotificationService
from src.app.use_cases.credits import ReconcileLedger, ReconciliationResultDTO
from src.domain.ledger_alert import AlertKind, LedgerAlert
from src.worker.base import BackgroundWorker, run_worker

logger = logging.getLogger(__name__)


class LedgerReconcilerWorker(BackgroundWorker):
    """
    Background worker for credit ledger reconciliation

    Usage:
        worker = LedgerReconcilerWorker()
        result = await worker.run_once()
        await worker.run_forever(interval_seconds=86400)  # Daily
    """

    name = "LedgerReconcilerWorker"

    def __init__(
        self,
        db_uri: Optional[str] = None,
        session_factory: Optional[sessionmaker] = None,
        notification_service: Optional[NotificationService] = None,
    ):
        super().__init__(db_uri=db_uri, session_factory=session_factory)
        self.notification_service = notification_service or create_notification_service(
            ApplicationConfig.LEDGER_ALERT_WEBHOOK
        )

        logger.info("LedgerReconcilerWorker initialized")

    async def run_once(self) -> ReconciliationResultDTO:
        """
        Run reconciliation once

        Returns:
            ReconciliationResultDTO with reconciliation results
        """
        if not getattr(ApplicationConfig, "RECONCILIATION_ENABLED", True):
            logger.info("Ledger reconciliation is disabled, skipping")
            return ReconciliationResultDTO(
                total_accounts_checked=0,
                discrepancies_found=0,
                discrepancies=[],
                reconciliation_time=datetime.utcnow(),
                execution_time_ms=0,
            )

        async with self.async_session_factory() as session:
            use_case = ReconcileLedger(
                account_repo=SqlAlchemyUserAccountRepository(session),
                transaction_repo=SqlAlchemyCreditTransactionRepository(session),
            )

            result = await use_case.execute()

        if result.is_err():
            logger.error(f"Reconciliation failed: {result.error.message}")
            raise RuntimeError(f"Reconciliation failed: {result.error.message}")

        response = result.value

        if response.discrepancies_found > 0:
            logger.error(f"ALERT: {response.discrepancies_found} ledger discrepancies found!")
            for d in response.discrepancies:
                await self.notification_service.send_ledger_alert(
                    LedgerAlert(
                        kind=AlertKind.LEDGER_DISCREPANCY,
                        message=(
                            f"Balance {d.account_balance} does not match "
                            f"transaction sum {d.calculated_balance}"
                        ),
                        user_id=d.user_id,
                        context={
                            "account_id": d.account_id,
                            "account_balance": d.account_balance,
                            "calculated_balance": d.calculated_balance,
                            "discrepancy": d.discrepancy,
                        },
                    )
                )

        return response

    def summarize(self, result: ReconciliationResultDTO) -> str:
        return (
            f"Reconciliation complete: checked {result.total_accounts_checked} accounts, "
            f"found {result.discrepancies_found} discrepancies in {result.execution_time_ms}ms"
        )


if __name__ == "__main__":
    asyncio.run(run_worker(LedgerReconcilerWorker, ApplicationConfig.RECONCILIATION_INTERVAL_SECONDS))
