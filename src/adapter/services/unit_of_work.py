"""SQLAlchemy Unit of Work

Wraps an AsyncSession; one unit of work spans exactly one ledger
operation (balance mutation + transaction insert, or one creator payout).
"""

from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        # No-op once committed; discards pending writes otherwise
        if self.session.in_transaction():
            await self.session.rollback()
