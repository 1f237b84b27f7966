"""Shared plumbing for the background workers

Engine ownership, the interval loop and the command line entry point.
Subclasses implement run_once() and summarize().
"""

import argparse
import asyncio
import logging
from typing import Any, Callable, List, Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig

logger = logging.getLogger(__name__)


class BackgroundWorker:
    name = "Worker"

    def __init__(self, db_uri: Optional[str] = None, session_factory: Optional[sessionmaker] = None):
        """
        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            session_factory: Existing session factory; no engine is created when given
        """
        self.engine = None
        if session_factory is None:
            self.db_uri = db_uri or ApplicationConfig.DB_URI
            self.engine = create_async_engine(self.db_uri, echo=False, future=True)
            session_factory = sessionmaker(
                self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
            )
        self.async_session_factory = session_factory

    async def run_once(self) -> Any:
        raise NotImplementedError

    def summarize(self, result: Any) -> str:
        return f"{self.name} cycle complete"

    async def run_forever(self, interval_seconds: int = 86400):
        """Run cycles at the given interval; a failed cycle is logged and the loop continues."""
        logger.info(f"Starting {self.name} with {interval_seconds}s interval")

        while True:
            try:
                result = await self.run_once()
                logger.info(self.summarize(result))
            except Exception as e:
                logger.error(f"{self.name} cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        if self.engine is not None:
            await self.engine.dispose()
        logger.info(f"{self.name} shutdown complete")


async def run_worker(
    worker_factory: Callable[[], BackgroundWorker],
    default_interval: int,
    argv: Optional[List[str]] = None,
) -> None:
    """
    Command line entry point shared by the workers

    Usage:
        python -m src.worker.<module> --once
        python -m src.worker.<module> --interval 3600
    """
    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser()
    parser.add_argument("--once", action="store_true", help="Run once and exit")
    parser.add_argument(
        "--interval", type=int, default=int(default_interval),
        help="Interval between runs in seconds",
    )
    args = parser.parse_args(argv)

    worker = worker_factory()

    try:
        if args.once:
            result = await worker.run_once()
            logger.info(worker.summarize(result))
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()
