"""Unit tests for OpenAccount and GrantSignupBonus use cases"""

import pytest
from datetime import datetime
from sqlalchemy.exc import IntegrityError

from src.app.errors import ErrorCode
from src.app.use_cases.credits import GrantSignupBonus, OpenAccount
from src.domain.credit_transaction import CreditTransaction, TransactionType
from src.domain.user_account import UserAccount


def assign_id(transaction):
    transaction.id = 1
    return transaction


@pytest.mark.asyncio
class TestOpenAccount:

    async def test_opens_empty_account(self, mock_uow, mock_account_repo):
        mock_account_repo.get_by_user_id.return_value = None
        mock_account_repo.create.side_effect = lambda account: account

        result = await OpenAccount(mock_uow, mock_account_repo).execute("user_new")

        assert result.is_ok()
        assert result.value.credit_balance == 0
        assert result.value.subscription_tier == "none"
        assert result.value.is_pro_user is False
        mock_uow.commit.assert_awaited_once()

    async def test_existing_account(self, mock_uow, mock_account_repo):
        mock_account_repo.get_by_user_id.return_value = UserAccount(id=1, user_id="user_new")

        result = await OpenAccount(mock_uow, mock_account_repo).execute("user_new")

        assert result.error.code == ErrorCode.ACCOUNT_ALREADY_EXISTS
        mock_account_repo.create.assert_not_called()

    async def test_concurrent_open_maps_to_already_exists(self, mock_uow, mock_account_repo):
        mock_account_repo.get_by_user_id.return_value = None
        mock_account_repo.create.side_effect = IntegrityError("INSERT", {}, Exception("unique"))

        result = await OpenAccount(mock_uow, mock_account_repo).execute("user_new")

        assert result.error.code == ErrorCode.ACCOUNT_ALREADY_EXISTS
        mock_uow.rollback.assert_awaited_once()


@pytest.mark.asyncio
class TestGrantSignupBonus:

    async def test_grants_once_with_user_key(
        self, mock_uow, mock_account_repo, mock_transaction_repo
    ):
        mock_account_repo.get_by_user_id.return_value = UserAccount(id=1, user_id="user_new")
        mock_account_repo.increment_balance.return_value = 25
        mock_transaction_repo.create.side_effect = assign_id

        result = await GrantSignupBonus(mock_uow, mock_account_repo, mock_transaction_repo).execute("user_new")

        assert result.is_ok()
        assert result.value.amount == 25
        assert result.value.transaction_type == "signup_bonus"
        mock_transaction_repo.get_by_idempotency_key.assert_awaited_once_with("signup_bonus:user_new")

    async def test_second_call_is_replay(self, mock_uow, mock_account_repo, mock_transaction_repo):
        mock_transaction_repo.get_by_idempotency_key.return_value = CreditTransaction(
            id=1,
            user_id="user_new",
            account_id=1,
            transaction_type=TransactionType.SIGNUP_BONUS,
            amount=25,
            balance_after=25,
            idempotency_key="signup_bonus:user_new",
            created_at=datetime(2024, 1, 1),
        )

        result = await GrantSignupBonus(mock_uow, mock_account_repo, mock_transaction_repo).execute("user_new")

        assert result.value.is_replay is True
        mock_account_repo.increment_balance.assert_not_called()
