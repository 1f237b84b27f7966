"""Unit tests for creator earnings and payout use cases"""

import pytest
from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock

from src.app.errors import ErrorCode
from src.app.use_cases.creators import (
    GetCreatorEarningsSummary,
    RecordRecipeUsage,
    RecordRecipeUsageCommandDTO,
    SettleCreatorPayout,
)
from src.domain.creator_earning import CreatorEarning
from src.domain.recipe_usage import RecipeUsage
from src.domain.user_account import UserAccount


def earning(id, amount, usage_id=None, is_paid=False):
    return CreatorEarning(
        id=id,
        creator_id="creator_1",
        recipe_usage_id=usage_id or id + 100,
        amount=Decimal(amount),
        is_paid=is_paid,
    )


@pytest.fixture
def earning_repo():
    return AsyncMock()


@pytest.fixture
def usage_repo():
    return AsyncMock()


@pytest.mark.asyncio
class TestSettleCreatorPayout:

    async def test_settles_and_mirrors_usages(self, mock_uow, earning_repo, usage_repo):
        earnings = [earning(1, "6.00"), earning(2, "4.00")]
        earning_repo.get_eligible_unpaid_by_creator.return_value = earnings
        earning_repo.mark_paid.return_value = 2
        paid_at = datetime(2024, 2, 1)

        result = await SettleCreatorPayout(mock_uow, earning_repo, usage_repo).execute(
            "creator_1", "batch-x", paid_at=paid_at
        )

        assert result.is_ok()
        assert result.value.total_amount == Decimal("10.00")
        assert result.value.earnings_paid == 2
        earning_repo.get_eligible_unpaid_by_creator.assert_awaited_once_with("creator_1", for_update=True)
        earning_repo.mark_paid.assert_awaited_once_with([1, 2], paid_at, "batch-x")
        usage_repo.mark_paid.assert_awaited_once_with([101, 102], paid_at)
        mock_uow.commit.assert_awaited_once()

    async def test_below_threshold_after_recheck(self, mock_uow, earning_repo, usage_repo):
        earning_repo.get_eligible_unpaid_by_creator.return_value = [earning(1, "9.99")]

        result = await SettleCreatorPayout(mock_uow, earning_repo, usage_repo).execute("creator_1", "batch-x")

        assert result.error.code == ErrorCode.BELOW_PAYOUT_THRESHOLD
        earning_repo.mark_paid.assert_not_called()
        mock_uow.commit.assert_not_called()

    async def test_concurrent_settlement_rolls_back(self, mock_uow, earning_repo, usage_repo):
        earning_repo.get_eligible_unpaid_by_creator.return_value = [earning(1, "6.00"), earning(2, "6.00")]
        earning_repo.mark_paid.return_value = 1

        result = await SettleCreatorPayout(mock_uow, earning_repo, usage_repo).execute("creator_1", "batch-x")

        assert result.error.code == ErrorCode.PAYOUT_FAILED
        usage_repo.mark_paid.assert_not_called()
        mock_uow.rollback.assert_awaited_once()
        mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
class TestRecordRecipeUsage:

    @pytest.fixture
    def use_case(self, mock_uow, usage_repo, earning_repo, mock_account_repo, mock_transaction_repo):
        async def create_usage(usage):
            usage.id = 500
            return usage

        async def create_earning(earning):
            earning.id = 900
            return earning

        usage_repo.create.side_effect = create_usage
        earning_repo.create.side_effect = create_earning
        return RecordRecipeUsage(mock_uow, usage_repo, earning_repo, mock_account_repo, mock_transaction_repo)

    async def test_usage_with_creator_earning(self, use_case, mock_uow, earning_repo, mock_account_repo):
        result = await use_case.execute(
            RecordRecipeUsageCommandDTO(
                user_id="user_123",
                recipe_id="recipe_1",
                creator_id="creator_1",
                creator_earning_amount=Decimal("0.25"),
            )
        )

        assert result.value.usage_id == 500
        assert result.value.creator_earning_id == 900
        assert result.value.credits_charged == 0
        created = earning_repo.create.call_args.args[0]
        assert created.recipe_usage_id == 500
        assert created.amount == Decimal("0.25")
        mock_account_repo.decrement_balance_if_sufficient.assert_not_called()
        mock_uow.commit.assert_awaited_once()

    async def test_zero_earning_creates_no_earning(self, use_case, earning_repo):
        result = await use_case.execute(
            RecordRecipeUsageCommandDTO(user_id="user_123", recipe_id="recipe_1", creator_id="creator_1")
        )

        assert result.value.creator_earning_id is None
        earning_repo.create.assert_not_called()

    async def test_credit_cost_is_charged(self, use_case, mock_account_repo, mock_transaction_repo):
        mock_account_repo.get_by_user_id.return_value = UserAccount(id=1, user_id="user_123", credit_balance=5)
        mock_account_repo.decrement_balance_if_sufficient.return_value = 4
        mock_transaction_repo.create.side_effect = lambda txn: txn

        result = await use_case.execute(
            RecordRecipeUsageCommandDTO(user_id="user_123", recipe_id="recipe_1", credit_cost=1)
        )

        assert result.value.credits_charged == 1
        assert result.value.balance_after == 4
        charged = mock_transaction_repo.create.call_args.args[0]
        assert charged.amount == -1
        assert charged.transaction_metadata == {"recipe_id": "recipe_1"}

    async def test_insufficient_credits_records_nothing(
        self, use_case, mock_uow, usage_repo, mock_account_repo
    ):
        mock_account_repo.get_by_user_id.return_value = UserAccount(id=1, user_id="user_123", credit_balance=0)
        mock_account_repo.decrement_balance_if_sufficient.return_value = None
        mock_account_repo.get_balance.return_value = 0

        result = await use_case.execute(
            RecordRecipeUsageCommandDTO(user_id="user_123", recipe_id="recipe_1", credit_cost=2)
        )

        assert result.error.code == ErrorCode.INSUFFICIENT_CREDITS
        usage_repo.create.assert_not_called()
        mock_uow.rollback.assert_awaited_once()


@pytest.mark.asyncio
class TestGetCreatorEarningsSummary:

    async def test_summary(self, earning_repo):
        checked_out = datetime(2024, 1, 2)
        earning_repo.get_by_creator_with_usage.return_value = [
            (earning(1, "4.00", is_paid=True), RecipeUsage(user_id="u1", recipe_id="r", walmart_checkout_at=checked_out), True),
            (earning(2, "3.00"), RecipeUsage(user_id="u2", recipe_id="r", walmart_checkout_at=checked_out), False),
            (earning(3, "2.50"), RecipeUsage(user_id="u3", recipe_id="r"), None),
        ]

        result = await GetCreatorEarningsSummary(earning_repo).execute("creator_1")

        summary = result.value
        assert summary.total_earned == Decimal("9.50")
        assert summary.paid_out == Decimal("4.00")
        assert summary.pending == Decimal("5.50")
        assert summary.pending_eligible == Decimal("3.00")
        assert summary.total_uses == 3
        assert summary.pro_user_uses == 1
        assert summary.free_user_uses == 2
        assert summary.payout_ready is False

    async def test_no_earnings(self, earning_repo):
        earning_repo.get_by_creator_with_usage.return_value = []

        result = await GetCreatorEarningsSummary(earning_repo).execute("creator_new")

        assert result.value.total_earned == Decimal("0")
        assert result.value.total_uses == 0
