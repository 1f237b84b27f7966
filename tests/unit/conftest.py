import pytest
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def mock_account_repo():
    """Mock user account repository"""
    return AsyncMock()


@pytest.fixture
def mock_transaction_repo():
    """Mock credit transaction repository"""
    repo = AsyncMock()
    repo.get_by_idempotency_key.return_value = None
    return repo
