"""Unit tests for LedgerReconcilerWorker

Tests cover:
- Worker initialization with configuration
- run_once execution with reconciliation
- Reconciliation disabled scenario
- Discrepancy alerts
- Shutdown and cleanup
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from datetime import datetime

from src.app.use_cases.credits import ReconciliationResultDTO, LedgerDiscrepancyDTO
from src.domain.ledger_alert import AlertKind
from src.worker.ledger_reconciler import LedgerReconcilerWorker


@pytest.fixture
def mock_session_factory():
    session = MagicMock()
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=session)


@pytest.fixture
def mock_notification_service():
    return AsyncMock()


@pytest.fixture
def sample_discrepancy_result():
    """Sample reconciliation result with discrepancies"""
    return ReconciliationResultDTO(
        total_accounts_checked=10,
        discrepancies_found=1,
        discrepancies=[
            LedgerDiscrepancyDTO(
                user_id="user_123",
                account_id=1,
                account_balance=65,
                calculated_balance=60,
                discrepancy=5,
            ),
        ],
        reconciliation_time=datetime.utcnow(),
        execution_time_ms=250,
    )


class TestLedgerReconcilerWorkerInit:
    """Test worker initialization"""

    @patch("src.worker.base.ApplicationConfig")
    @patch("src.worker.base.create_async_engine")
    def test_initializes_with_default_config(self, mock_create_engine, mock_app_config):
        mock_app_config.DB_URI = "postgresql+asyncpg://default@localhost/db"
        mock_create_engine.return_value = MagicMock()

        worker = LedgerReconcilerWorker(notification_service=AsyncMock())

        assert worker.db_uri == "postgresql+asyncpg://default@localhost/db"
        mock_create_engine.assert_called_once()

    @patch("src.worker.base.create_async_engine")
    def test_session_factory_skips_engine(self, mock_create_engine, mock_session_factory):
        worker = LedgerReconcilerWorker(
            session_factory=mock_session_factory, notification_service=AsyncMock()
        )

        assert worker.engine is None
        mock_create_engine.assert_not_called()


@pytest.mark.asyncio
class TestLedgerReconcilerWorkerRunOnce:
    """Test run_once execution"""

    @patch("src.worker.ledger_reconciler.ApplicationConfig")
    @patch("src.worker.ledger_reconciler.ReconcileLedger")
    async def test_discrepancies_raise_alerts(
        self,
        mock_use_case_class,
        mock_app_config,
        mock_session_factory,
        mock_notification_service,
        sample_discrepancy_result,
    ):
        mock_app_config.RECONCILIATION_ENABLED = True
        mock_result = MagicMock()
        mock_result.is_err.return_value = False
        mock_result.value = sample_discrepancy_result
        mock_use_case_class.return_value.execute = AsyncMock(return_value=mock_result)

        worker = LedgerReconcilerWorker(
            session_factory=mock_session_factory,
            notification_service=mock_notification_service,
        )
        result = await worker.run_once()

        assert result.discrepancies_found == 1
        alert = mock_notification_service.send_ledger_alert.call_args.args[0]
        assert alert.kind == AlertKind.LEDGER_DISCREPANCY
        assert alert.user_id == "user_123"
        assert alert.context["discrepancy"] == 5

    @patch("src.worker.ledger_reconciler.ApplicationConfig")
    async def test_run_once_skips_when_disabled(
        self, mock_app_config, mock_session_factory, mock_notification_service
    ):
        mock_app_config.RECONCILIATION_ENABLED = False

        worker = LedgerReconcilerWorker(
            session_factory=mock_session_factory,
            notification_service=mock_notification_service,
        )
        result = await worker.run_once()

        assert result.total_accounts_checked == 0
        assert result.execution_time_ms == 0
        mock_session_factory.assert_not_called()

    @patch("src.worker.ledger_reconciler.ApplicationConfig")
    @patch("src.worker.ledger_reconciler.ReconcileLedger")
    async def test_failure_raises(self, mock_use_case_class, mock_app_config, mock_session_factory):
        mock_app_config.RECONCILIATION_ENABLED = True
        mock_result = MagicMock()
        mock_result.is_err.return_value = True
        mock_result.error.message = "Failed to reconcile credit ledger"
        mock_use_case_class.return_value.execute = AsyncMock(return_value=mock_result)

        worker = LedgerReconcilerWorker(
            session_factory=mock_session_factory, notification_service=AsyncMock()
        )

        with pytest.raises(RuntimeError, match="Reconciliation failed"):
            await worker.run_once()


@pytest.mark.asyncio
class TestLedgerReconcilerWorkerShutdown:

    @patch("src.worker.base.ApplicationConfig")
    @patch("src.worker.base.create_async_engine")
    async def test_shutdown_disposes_engine(self, mock_create_engine, mock_app_config):
        mock_app_config.DB_URI = "sqlite+aiosqlite:///:memory:"
        mock_engine = MagicMock()
        mock_engine.dispose = AsyncMock()
        mock_create_engine.return_value = mock_engine

        worker = LedgerReconcilerWorker(notification_service=AsyncMock())
        await worker.shutdown()

        mock_engine.dispose.assert_awaited_once()
