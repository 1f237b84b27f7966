"""Integration tests for grants and charges against a real database

Balances are checked against the transaction log after every scenario.
"""

import asyncio
import pytest
from src.adapter.repositories import (
    SqlAlchemyCreditTransactionRepository,
    SqlAlchemyUserAccountRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.errors import ErrorCode
from src.app.use_cases.credits import (
    ChargeCredits,
    ChargeCreditsCommandDTO,
    GetBalance,
    GrantCredits,
    GrantCreditsCommandDTO,
    GrantSignupBonus,
    ListTransactions,
    ReconcileLedger,
)
from src.domain.credit_transaction import TransactionType


async def charge(session_factory, user_id, amount, idempotency_key=None):
    async with session_factory() as session:
        use_case = ChargeCredits(
            SqlAlchemyUnitOfWork(session),
            SqlAlchemyUserAccountRepository(session),
            SqlAlchemyCreditTransactionRepository(session),
        )
        return await use_case.execute(
            ChargeCreditsCommandDTO(
                user_id=user_id,
                amount=amount,
                transaction_type=TransactionType.AI_RECIPE,
                idempotency_key=idempotency_key,
            )
        )


async def balance_and_sum(session_factory, user_id):
    async with session_factory() as session:
        balance = await SqlAlchemyUserAccountRepository(session).get_balance(user_id)
        total = await SqlAlchemyCreditTransactionRepository(session).get_transaction_sum_by_user(user_id)
        return balance, total


@pytest.mark.asyncio
class TestCreditLedger:

    async def test_signup_bonus_then_charges_keep_balance_equal_to_sum(
        self, session_factory, open_account
    ):
        """
        Given a new account with its signup bonus
        When several charges succeed
        Then the balance equals the sum of the transaction log
        """
        await open_account("user_1")
        async with session_factory() as session:
            bonus = await GrantSignupBonus(
                SqlAlchemyUnitOfWork(session),
                SqlAlchemyUserAccountRepository(session),
                SqlAlchemyCreditTransactionRepository(session),
            ).execute("user_1")
        assert bonus.is_ok()
        assert bonus.value.balance_after == 25

        for amount in (3, 5, 1):
            result = await charge(session_factory, "user_1", amount)
            assert result.is_ok()

        balance, total = await balance_and_sum(session_factory, "user_1")
        assert balance == 16
        assert total == 16

    async def test_signup_bonus_is_granted_once(self, session_factory, open_account):
        await open_account("user_1")

        for _ in range(2):
            async with session_factory() as session:
                result = await GrantSignupBonus(
                    SqlAlchemyUnitOfWork(session),
                    SqlAlchemyUserAccountRepository(session),
                    SqlAlchemyCreditTransactionRepository(session),
                ).execute("user_1")
            assert result.is_ok()

        assert result.value.is_replay is True
        balance, total = await balance_and_sum(session_factory, "user_1")
        assert balance == 25
        assert total == 25

    async def test_insufficient_charge_writes_nothing(self, session_factory, open_account):
        """
        Given a balance of 2
        When a charge of 3 is attempted
        Then INSUFFICIENT_CREDITS is returned and neither balance nor log change
        """
        await open_account("user_1", balance=2)

        result = await charge(session_factory, "user_1", 3)

        assert result.is_err()
        assert result.error.code == ErrorCode.INSUFFICIENT_CREDITS
        async with session_factory() as session:
            history = await ListTransactions(SqlAlchemyCreditTransactionRepository(session)).execute("user_1")
        assert history.value.total == 1
        assert await balance_and_sum(session_factory, "user_1") == (2, 2)

    async def test_concurrent_charges_never_overdraw(self, session_factory, open_account):
        """
        Given a balance of 10
        When ten charges of 3 run concurrently in separate sessions
        Then exactly three succeed and the balance stays non-negative
        """
        await open_account("user_1", balance=10)

        results = await asyncio.gather(*[charge(session_factory, "user_1", 3) for _ in range(10)])

        succeeded = [r for r in results if r.is_ok()]
        rejected = [r for r in results if r.is_err()]
        assert len(succeeded) == 3
        assert all(r.error.code == ErrorCode.INSUFFICIENT_CREDITS for r in rejected)
        assert sorted(r.value.balance_after for r in succeeded) == [1, 4, 7]
        assert await balance_and_sum(session_factory, "user_1") == (1, 1)

    async def test_charge_replay_with_same_idempotency_key(self, session_factory, open_account):
        await open_account("user_1", balance=10)

        first = await charge(session_factory, "user_1", 4, idempotency_key="scan:abc")
        second = await charge(session_factory, "user_1", 4, idempotency_key="scan:abc")

        assert first.is_ok() and second.is_ok()
        assert second.value.is_replay is True
        assert second.value.transaction_id == first.value.transaction_id
        assert await balance_and_sum(session_factory, "user_1") == (6, 6)

    async def test_grant_to_unknown_user(self, session_factory):
        async with session_factory() as session:
            result = await GrantCredits(
                SqlAlchemyUnitOfWork(session),
                SqlAlchemyUserAccountRepository(session),
                SqlAlchemyCreditTransactionRepository(session),
            ).execute(
                GrantCreditsCommandDTO(
                    user_id="ghost", amount=5, transaction_type=TransactionType.ADJUSTMENT
                )
            )

        assert result.is_err()
        assert result.error.code == ErrorCode.USER_NOT_FOUND

    async def test_history_is_newest_first_and_filterable(self, session_factory, open_account):
        await open_account("user_1", balance=10)
        await charge(session_factory, "user_1", 2)
        await charge(session_factory, "user_1", 1)

        async with session_factory() as session:
            use_case = ListTransactions(SqlAlchemyCreditTransactionRepository(session))
            everything = await use_case.execute("user_1")
            charges = await use_case.execute("user_1", transaction_type=TransactionType.AI_RECIPE)
            page = await use_case.execute("user_1", limit=1, offset=1)

        assert [t.amount for t in everything.value.transactions] == [-1, -2, 10]
        assert charges.value.total == 2
        assert page.value.total == 3
        assert [t.amount for t in page.value.transactions] == [-2]

    async def test_reconciliation_finds_no_discrepancies(self, session_factory, open_account):
        await open_account("user_1", balance=10)
        await open_account("user_2", balance=3)
        await charge(session_factory, "user_1", 4)

        async with session_factory() as session:
            result = await ReconcileLedger(
                SqlAlchemyUserAccountRepository(session),
                SqlAlchemyCreditTransactionRepository(session),
            ).execute()
            balance = await GetBalance(SqlAlchemyUserAccountRepository(session)).execute("user_1")

        assert result.value.total_accounts_checked == 2
        assert result.value.discrepancies_found == 0
        assert balance.value.balance == 6
