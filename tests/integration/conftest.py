import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from src.depends import get_session
from src.adapter.repositories import (
    SqlAlchemyCreditTransactionRepository,
    SqlAlchemyUserAccountRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.credits import GrantCredits, GrantCreditsCommandDTO, OpenAccount
from src.domain.credit_transaction import TransactionType


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Create test database engine on a throwaway SQLite file"""
    test_db_url = f"sqlite+aiosqlite:///{tmp_path / 'pantry_credits_test.db'}"

    engine = create_async_engine(test_db_url, echo=False, future=True)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a new database session for each test"""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def open_account(session_factory):
    """Open an account and optionally seed it with an adjustment grant"""

    async def _open(user_id: str, balance: int = 0):
        async with session_factory() as session:
            uow = SqlAlchemyUnitOfWork(session)
            account_repo = SqlAlchemyUserAccountRepository(session)
            result = await OpenAccount(uow, account_repo).execute(user_id)
            assert result.is_ok()

            if balance > 0:
                grant = await GrantCredits(
                    uow, account_repo, SqlAlchemyCreditTransactionRepository(session)
                ).execute(
                    GrantCreditsCommandDTO(
                        user_id=user_id,
                        amount=balance,
                        transaction_type=TransactionType.ADJUSTMENT,
                        metadata={"reason": "test seed"},
                    )
                )
                assert grant.is_ok()
            return result.value

    return _open


@pytest_asyncio.fixture
async def client(session_factory):
    """Create test client with database session override"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    # Each request gets its own session, like the production dependency
    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
