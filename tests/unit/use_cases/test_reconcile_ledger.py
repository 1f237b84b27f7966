"""Unit tests for ReconcileLedger use case"""

import pytest

from src.app.errors import ErrorCode
from src.app.use_cases.credits import ReconcileLedger
from src.domain.user_account import UserAccount


@pytest.fixture
def accounts():
    return [
        UserAccount(id=1, user_id="user_a", credit_balance=65),
        UserAccount(id=2, user_id="user_b", credit_balance=10),
    ]


@pytest.mark.asyncio
class TestReconcileLedger:

    async def test_all_balanced(self, mock_account_repo, mock_transaction_repo, accounts):
        mock_account_repo.get_all.return_value = accounts
        mock_transaction_repo.get_transaction_sum_by_user.side_effect = [65, 10]

        result = await ReconcileLedger(mock_account_repo, mock_transaction_repo).execute()

        assert result.is_ok()
        assert result.value.total_accounts_checked == 2
        assert result.value.discrepancies_found == 0

    async def test_detects_discrepancy(self, mock_account_repo, mock_transaction_repo, accounts):
        mock_account_repo.get_all.return_value = accounts
        mock_transaction_repo.get_transaction_sum_by_user.side_effect = [65, 15]

        result = await ReconcileLedger(mock_account_repo, mock_transaction_repo).execute()

        discrepancy = result.value.discrepancies[0]
        assert result.value.discrepancies_found == 1
        assert discrepancy.user_id == "user_b"
        assert discrepancy.account_balance == 10
        assert discrepancy.calculated_balance == 15
        assert discrepancy.discrepancy == -5

    async def test_failure(self, mock_account_repo, mock_transaction_repo):
        mock_account_repo.get_all.side_effect = RuntimeError("db down")

        result = await ReconcileLedger(mock_account_repo, mock_transaction_repo).execute()

        assert result.is_err()
        assert result.error.code == ErrorCode.RECONCILIATION_FAILED
