"""Creator Payout Background Worker

Settles creator earnings in batches. Creators whose eligible earnings reach
the minimum payout are paid; everyone else carries over to the next run.
"""

import asyncio
import logging
import time
from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlalchemy.orm import sessionmaker

from config import ApplicationConfig
from src.adapter.repositories import (
    SqlAlchemyCreatorEarningRepository,
    SqlAlchemyRecipeUsageRepository,
)
from src.adapter.services.notification_service import create_notification_service
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.errors import ErrorCode
from src.app.services.notification_service import NotificationService
from src.app.use_cases.creators import (
    CreatorPayoutDTO,
    PayoutBatchResultDTO,
    PayoutFailureDTO,
    SettleCreatorPayout,
)
from src.domain.ledger_alert import AlertKind, LedgerAlert
from src.domain.payout import aggregate_payable_creators, generate_batch_id
from src.worker.base import BackgroundWorker, run_worker

logger = logging.getLogger(__name__)


class CreatorPayoutWorker(BackgroundWorker):
    """
    Background worker for creator payouts

    Features:
    - Pass 1: project eligible unpaid earnings and sum them per creator
    - Pass 2: settle each creator at or above the threshold in its own
      session and transaction
    - A failing creator is rolled back alone and reported; the batch continues
    - Every earning settled in one run shares the run's batch_id

    Usage:
        # Run once
        worker = CreatorPayoutWorker()
        result = await worker.run_once()

        # Run continuously
        worker = CreatorPayoutWorker()
        await worker.run_forever(interval_seconds=86400)  # Daily
    """

    name = "CreatorPayoutWorker"

    def __init__(
        self,
        db_uri: Optional[str] = None,
        session_factory: Optional[sessionmaker] = None,
        minimum_payout: Optional[Decimal] = None,
        notification_service: Optional[NotificationService] = None,
    ):
        """
        Args:
            db_uri, session_factory: see BackgroundWorker
            minimum_payout: Threshold per creator (defaults to MINIMUM_CREATOR_PAYOUT)
            notification_service: Alert sink for failed creators
        """
        super().__init__(db_uri=db_uri, session_factory=session_factory)
        self.minimum_payout = (
            minimum_payout
            if minimum_payout is not None
            else Decimal(str(ApplicationConfig.MINIMUM_CREATOR_PAYOUT))
        )
        self.notification_service = notification_service or create_notification_service(
            ApplicationConfig.LEDGER_ALERT_WEBHOOK
        )

        logger.info("CreatorPayoutWorker initialized")

    async def run_once(self, now: Optional[datetime] = None) -> PayoutBatchResultDTO:
        """
        Run one payout batch

        Returns:
            PayoutBatchResultDTO with the batch id, paid creators and failures
        """
        start_time = time.time()
        now = now or datetime.utcnow()
        batch_id = generate_batch_id(now)

        if not getattr(ApplicationConfig, "PAYOUT_ENABLED", True):
            logger.info("Creator payouts are disabled, skipping")
            return self._result(batch_id, 0, [], [], start_time)

        # Pass 1: aggregate (short read-only session)
        async with self.async_session_factory() as session:
            earning_repo = SqlAlchemyCreatorEarningRepository(session)
            rows = await earning_repo.get_eligible_unpaid_amounts()

        payable = aggregate_payable_creators(rows, self.minimum_payout)
        logger.info(
            f"Payout batch {batch_id}: {len(payable)} creators at or above {self.minimum_payout} "
            f"({len(rows)} eligible earnings)"
        )

        # Pass 2: settle creator by creator
        payouts: list[CreatorPayoutDTO] = []
        failures: list[PayoutFailureDTO] = []

        for creator in payable:
            try:
                async with self.async_session_factory() as creator_session:
                    use_case = SettleCreatorPayout(
                        uow=SqlAlchemyUnitOfWork(creator_session),
                        earning_repo=SqlAlchemyCreatorEarningRepository(creator_session),
                        usage_repo=SqlAlchemyRecipeUsageRepository(creator_session),
                        minimum_payout=self.minimum_payout,
                    )
                    result = await use_case.execute(creator.creator_id, batch_id, paid_at=now)

                if result.is_ok():
                    payouts.append(result.value)
                    continue

                if result.error.code == ErrorCode.BELOW_PAYOUT_THRESHOLD:
                    # Earnings changed since aggregation; retried next run
                    logger.info(result.error.message)
                    continue

                failures.append(
                    PayoutFailureDTO(
                        creator_id=creator.creator_id,
                        error_code=ErrorCode.PAYOUT_BATCH_PARTIAL_FAILURE,
                        message=result.error.reason or result.error.message,
                    )
                )

            except Exception as e:
                logger.error(f"Unexpected error paying creator {creator.creator_id}: {e}")
                failures.append(
                    PayoutFailureDTO(
                        creator_id=creator.creator_id,
                        error_code=ErrorCode.PAYOUT_BATCH_PARTIAL_FAILURE,
                        message=str(e),
                    )
                )

        for failure in failures:
            await self._alert_failure(batch_id, failure)

        result = self._result(batch_id, len(payable), payouts, failures, start_time)

        logger.info(
            f"Payout batch {batch_id} complete: "
            f"{result.creators_paid}/{result.creators_considered} creators paid, "
            f"total {result.total_amount}, {len(failures)} failures, "
            f"{result.execution_time_ms}ms"
        )

        return result

    async def _alert_failure(self, batch_id: str, failure: PayoutFailureDTO) -> None:
        try:
            await self.notification_service.send_ledger_alert(
                LedgerAlert(
                    kind=AlertKind.PAYOUT_FAILED,
                    message=f"Payout failed for creator {failure.creator_id}",
                    context={"batch_id": batch_id, "creator_id": failure.creator_id, "reason": failure.message},
                )
            )
        except Exception as e:
            logger.error(f"Failed to send payout alert for {failure.creator_id}: {e}")

    @staticmethod
    def _result(batch_id, considered, payouts, failures, start_time) -> PayoutBatchResultDTO:
        return PayoutBatchResultDTO(
            batch_id=batch_id,
            creators_considered=considered,
            creators_paid=len(payouts),
            total_amount=sum((p.total_amount for p in payouts), Decimal("0")),
            payouts=payouts,
            failures=failures,
            execution_time_ms=int((time.time() - start_time) * 1000),
        )

    def summarize(self, result: PayoutBatchResultDTO) -> str:
        lines = [
            f"Payout batch {result.batch_id}: {result.creators_paid}/{result.creators_considered} "
            f"creators paid, total {result.total_amount}, {result.execution_time_ms}ms"
        ]
        lines.extend(f"FAILED {f.creator_id}: {f.message}" for f in result.failures)
        return "\n".join(lines)


if __name__ == "__main__":
    asyncio.run(run_worker(CreatorPayoutWorker, ApplicationConfig.PAYOUT_INTERVAL_SECONDS))
