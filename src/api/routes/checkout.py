"""Checkout API Routes

Retail checkout completion and loyalty reward preview.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.error import ClientError
from src.api.schemas.checkout_response import CheckoutCompleteResponseSchema
from src.app.errors import ErrorCode
from src.app.use_cases.checkout import (
    CheckoutRewardInfoDTO,
    GetCheckoutRewardInfo,
    RecordCheckout,
)
from src.adapter.repositories import (
    SqlAlchemyCreditTransactionRepository,
    SqlAlchemyRecipeUsageRepository,
    SqlAlchemyUserAccountRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session

router = APIRouter(prefix="/checkout", tags=["Checkout"])


@router.post(
    "/{user_id}/complete",
    response_model=CheckoutCompleteResponseSchema,
    status_code=status.HTTP_200_OK,
)
async def complete_checkout(user_id: str, session: AsyncSession = Depends(get_session)):
    """
    Record a completed retail checkout.

    Grants the loyalty reward (15, 10, then 5 credits) and makes the
    user's pending recipe usages eligible for creator payout, in one
    transaction. A failed checkout leaves neither behind, so retrying is safe.
    """
    reward = await RecordCheckout(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyUserAccountRepository(session),
        SqlAlchemyCreditTransactionRepository(session),
        usage_repo=SqlAlchemyRecipeUsageRepository(session),
    ).execute(user_id)
    if reward.is_err():
        if reward.error.code == ErrorCode.USER_NOT_FOUND:
            raise ClientError(reward.error, status_code=status.HTTP_404_NOT_FOUND)
        raise ClientError(reward.error, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return CheckoutCompleteResponseSchema(reward=reward.value, usages_marked=reward.value.usages_marked)


@router.get("/{user_id}/reward-info", response_model=CheckoutRewardInfoDTO)
async def get_reward_info(user_id: str, session: AsyncSession = Depends(get_session)):
    """Checkout ordinal and reward the user's next checkout will get."""
    result = await GetCheckoutRewardInfo(SqlAlchemyUserAccountRepository(session)).execute(user_id)
    if result.is_err():
        raise ClientError(result.error, status_code=status.HTTP_404_NOT_FOUND)
    return result.value
