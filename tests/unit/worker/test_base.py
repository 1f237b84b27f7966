"""Unit tests for the shared worker loop and entry point"""

import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from src.worker.base import BackgroundWorker, run_worker


class CountingWorker(BackgroundWorker):
    name = "CountingWorker"

    def __init__(self, outcomes):
        super().__init__(session_factory=MagicMock())
        self.outcomes = list(outcomes)
        self.runs = 0

    async def run_once(self):
        self.runs += 1
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def summarize(self, result):
        return f"processed {result}"


@pytest.mark.asyncio
class TestRunForever:

    @patch("src.worker.base.asyncio")
    async def test_failed_cycle_does_not_stop_the_loop(self, mock_asyncio):
        # Third sleep ends the loop
        mock_sleep = AsyncMock(side_effect=[None, None, asyncio.CancelledError()])
        mock_asyncio.sleep = mock_sleep
        worker = CountingWorker([3, RuntimeError("db down"), 5])

        with pytest.raises(asyncio.CancelledError):
            await worker.run_forever(interval_seconds=60)

        assert worker.runs == 3
        mock_sleep.assert_awaited_with(60)


@pytest.mark.asyncio
class TestRunWorker:

    async def test_once_runs_a_single_cycle_and_shuts_down(self):
        worker = CountingWorker([7])
        worker.shutdown = AsyncMock()

        await run_worker(lambda: worker, default_interval=86400, argv=["--once"])

        assert worker.runs == 1
        worker.shutdown.assert_awaited_once()

    async def test_interval_is_passed_to_loop(self):
        worker = CountingWorker([])
        worker.run_forever = AsyncMock()
        worker.shutdown = AsyncMock()

        await run_worker(lambda: worker, default_interval=86400, argv=["--interval", "3600"])

        worker.run_forever.assert_awaited_once_with(interval_seconds=3600)
        worker.shutdown.assert_awaited_once()

    async def test_shutdown_after_failure(self):
        worker = CountingWorker([RuntimeError("boom")])
        worker.shutdown = AsyncMock()

        with pytest.raises(RuntimeError):
            await run_worker(lambda: worker, default_interval=86400, argv=["--once"])

        worker.shutdown.assert_awaited_once()
