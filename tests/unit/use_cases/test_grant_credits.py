"""Unit tests for GrantCredits use case"""

import pytest
from datetime import datetime
from sqlalchemy.exc import IntegrityError

from src.app.errors import ErrorCode
from src.app.use_cases.credits import GrantCredits, GrantCreditsCommandDTO
from src.domain.credit_transaction import CreditTransaction, TransactionType
from src.domain.user_account import UserAccount


@pytest.fixture
def use_case(mock_uow, mock_account_repo, mock_transaction_repo):
    return GrantCredits(mock_uow, mock_account_repo, mock_transaction_repo)


@pytest.fixture
def command():
    return GrantCreditsCommandDTO(
        user_id="user_123",
        amount=40,
        transaction_type=TransactionType.SUBSCRIPTION_GRANT,
        description="Monthly pro subscription credits",
        metadata={"tier": "pro", "period": "monthly"},
        idempotency_key="subscription_grant:user_123:1704067200000",
    )


def make_transaction(**overrides):
    data = dict(
        id=1,
        user_id="user_123",
        account_id=1,
        transaction_type=TransactionType.SUBSCRIPTION_GRANT,
        amount=40,
        balance_after=65,
        description="Monthly pro subscription credits",
        transaction_metadata={"tier": "pro", "period": "monthly"},
        idempotency_key="subscription_grant:user_123:1704067200000",
        created_at=datetime(2024, 1, 1),
    )
    data.update(overrides)
    return CreditTransaction(**data)


@pytest.mark.asyncio
class TestGrantCredits:

    async def test_grant_commits(self, use_case, command, mock_uow, mock_account_repo, mock_transaction_repo):
        mock_account_repo.get_by_user_id.return_value = UserAccount(id=1, user_id="user_123", credit_balance=25)
        mock_account_repo.increment_balance.return_value = 65
        mock_transaction_repo.create.return_value = make_transaction()

        result = await use_case.execute(command)

        assert result.is_ok()
        response = result.value
        assert response.transaction_id == 1
        assert response.transaction_type == "subscription_grant"
        assert response.amount == 40
        assert response.balance_after == 65
        assert response.metadata == {"tier": "pro", "period": "monthly"}
        assert response.is_replay is False
        mock_uow.commit.assert_awaited_once()

    async def test_replay_returns_original_without_commit(
        self, use_case, command, mock_uow, mock_account_repo, mock_transaction_repo
    ):
        mock_transaction_repo.get_by_idempotency_key.return_value = make_transaction()

        result = await use_case.execute(command)

        assert result.is_ok()
        assert result.value.is_replay is True
        mock_account_repo.increment_balance.assert_not_called()
        mock_uow.commit.assert_not_called()

    async def test_user_not_found_rolls_back(self, use_case, command, mock_uow, mock_account_repo):
        mock_account_repo.get_by_user_id.return_value = None

        result = await use_case.execute(command)

        assert result.is_err()
        assert result.error.code == ErrorCode.USER_NOT_FOUND
        mock_uow.rollback.assert_awaited_once()
        mock_uow.commit.assert_not_called()

    async def test_concurrent_duplicate_key_is_reported_as_replay(
        self, use_case, command, mock_uow, mock_account_repo, mock_transaction_repo
    ):
        mock_account_repo.get_by_user_id.return_value = UserAccount(id=1, user_id="user_123", credit_balance=25)
        mock_account_repo.increment_balance.return_value = 65
        mock_transaction_repo.create.side_effect = IntegrityError("INSERT", {}, Exception("duplicate key"))
        mock_transaction_repo.get_by_idempotency_key.side_effect = [None, make_transaction(id=42)]

        result = await use_case.execute(command)

        assert result.is_ok()
        assert result.value.is_replay is True
        assert result.value.transaction_id == 42
        mock_uow.rollback.assert_awaited_once()
        mock_uow.commit.assert_not_called()

    async def test_unexpected_error(self, use_case, command, mock_uow, mock_account_repo):
        mock_account_repo.get_by_user_id.side_effect = RuntimeError("connection lost")

        result = await use_case.execute(command)

        assert result.is_err()
        assert result.error.code == ErrorCode.GRANT_CREDITS_FAILED
        assert result.error.reason == "connection lost"
        mock_uow.rollback.assert_awaited_once()


def test_command_rejects_non_positive_amount():
    with pytest.raises(ValueError):
        GrantCreditsCommandDTO(user_id="u", amount=0, transaction_type=TransactionType.ADJUSTMENT)
