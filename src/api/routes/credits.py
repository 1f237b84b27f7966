"""Credits API Routes

FastAPI routes for balances, history, status and feature charges.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.error import ClientError
from src.api.schemas.credit_request import ChargeRequestSchema
from src.app.errors import ErrorCode
from src.app.use_cases.credits import (
    AccountResponseDTO,
    BalanceResponseDTO,
    ChargeCredits,
    ChargeCreditsCommandDTO,
    CheckCredits,
    CheckTierAccess,
    CreditCheckResponseDTO,
    CreditStatusResponseDTO,
    CreditTransactionResponseDTO,
    GetBalance,
    GetCreditStatus,
    GrantSignupBonus,
    ListTransactions,
    ListTransactionsResponseDTO,
    OpenAccount,
    TierAccessResponseDTO,
)
from src.app.use_cases.creators import CreatorEarningsSummaryDTO, GetCreatorEarningsSummary
from src.adapter.repositories import (
    SqlAlchemyCreatorEarningRepository,
    SqlAlchemyCreditTransactionRepository,
    SqlAlchemyUserAccountRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_config, get_session, minimum_payout_from_config
from src.domain.credit_transaction import TransactionType
from src.domain.subscription_tier import SubscriptionTier

router = APIRouter(prefix="/credits", tags=["Credits"])

ERROR_EXAMPLES = {
    402: {
        "description": "Insufficient credits",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "INSUFFICIENT_CREDITS",
                        "message": "Insufficient credits. Required: 3, Available: 1"
                    }
                }
            }
        }
    },
    404: {
        "description": "User account not found",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "USER_NOT_FOUND",
                        "message": "User account not found for user user_abc123"
                    }
                }
            }
        }
    },
}


def _raise_client_error(error):
    if error.code == ErrorCode.USER_NOT_FOUND:
        raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
    if error.code == ErrorCode.INSUFFICIENT_CREDITS:
        raise ClientError(error, status_code=status.HTTP_402_PAYMENT_REQUIRED)
    if error.code == ErrorCode.ACCOUNT_ALREADY_EXISTS:
        raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
    raise ClientError(error)


@router.post(
    "/{user_id}/account",
    response_model=AccountResponseDTO,
    status_code=status.HTTP_201_CREATED,
)
async def open_account(
    user_id: str,
    session: AsyncSession = Depends(get_session),
    config=Depends(get_config),
):
    """
    Open a credit account for a new user and grant the signup bonus.

    **Returns:**
    - 201: Account opened, balance includes the signup bonus
    - 409: Account already exists
    """
    uow = SqlAlchemyUnitOfWork(session)
    account_repo = SqlAlchemyUserAccountRepository(session)
    transaction_repo = SqlAlchemyCreditTransactionRepository(session)

    result = await OpenAccount(uow, account_repo).execute(user_id)
    if result.is_err():
        _raise_client_error(result.error)

    bonus = await GrantSignupBonus(
        uow, account_repo, transaction_repo, bonus_credits=int(config.SIGNUP_BONUS_CREDITS)
    ).execute(user_id)
    if bonus.is_err():
        _raise_client_error(bonus.error)

    return result.value.model_copy(update={"credit_balance": bonus.value.balance_after})


@router.get(
    "/{user_id}/balance",
    response_model=BalanceResponseDTO,
    responses={404: ERROR_EXAMPLES[404]},
)
async def get_balance(user_id: str, session: AsyncSession = Depends(get_session)):
    """Current spendable balance for a user."""
    result = await GetBalance(SqlAlchemyUserAccountRepository(session)).execute(user_id)
    if result.is_err():
        _raise_client_error(result.error)
    return result.value


@router.get("/{user_id}/transactions", response_model=ListTransactionsResponseDTO)
async def list_transactions(
    user_id: str,
    limit: int = Query(50, ge=1, le=100, description="Page size"),
    offset: int = Query(0, ge=0, description="Rows to skip"),
    transaction_type: Optional[TransactionType] = Query(None, alias="type", description="Filter by type"),
    session: AsyncSession = Depends(get_session),
):
    """
    Transaction history, newest first.

    **Query parameters:**
    - `limit` (default 50, max 100)
    - `offset` (default 0)
    - `type` (optional): only transactions of this type
    """
    use_case = ListTransactions(SqlAlchemyCreditTransactionRepository(session))
    result = await use_case.execute(user_id, limit=limit, offset=offset, transaction_type=transaction_type)
    return result.value


@router.get(
    "/{user_id}/check",
    response_model=CreditCheckResponseDTO,
    responses={404: ERROR_EXAMPLES[404]},
)
async def check_credits(
    user_id: str,
    amount: int = Query(..., gt=0, description="Credits the feature will cost"),
    session: AsyncSession = Depends(get_session),
):
    """
    Pre-flight affordability check. Advisory only; the charge itself
    re-checks atomically.
    """
    result = await CheckCredits(SqlAlchemyUserAccountRepository(session)).execute(user_id, amount)
    if result.is_err():
        _raise_client_error(result.error)
    return result.value


@router.get(
    "/{user_id}/access/{required_tier}",
    response_model=TierAccessResponseDTO,
    responses={404: ERROR_EXAMPLES[404]},
)
async def check_tier_access(
    user_id: str,
    required_tier: SubscriptionTier,
    session: AsyncSession = Depends(get_session),
):
    """Whether the user's tier unlocks features gated at `required_tier` (pro or power)."""
    result = await CheckTierAccess(SqlAlchemyUserAccountRepository(session)).execute(user_id, required_tier)
    if result.is_err():
        _raise_client_error(result.error)
    return result.value


@router.get(
    "/{user_id}/status",
    response_model=CreditStatusResponseDTO,
    responses={404: ERROR_EXAMPLES[404]},
)
async def get_credit_status(
    user_id: str,
    session: AsyncSession = Depends(get_session),
    config=Depends(get_config),
):
    """Balance, subscription tier flags, checkout count and recent transactions."""
    use_case = GetCreditStatus(
        SqlAlchemyUserAccountRepository(session),
        SqlAlchemyCreditTransactionRepository(session),
        stale_hours=int(config.ENTITLEMENT_STALE_HOURS),
    )
    result = await use_case.execute(user_id)
    if result.is_err():
        _raise_client_error(result.error)
    return result.value


@router.post(
    "/{user_id}/charge",
    response_model=CreditTransactionResponseDTO,
    status_code=status.HTTP_200_OK,
    responses=ERROR_EXAMPLES,
)
async def charge_credits(
    user_id: str,
    request: ChargeRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """
    Charge credits for a feature that has already completed successfully.

    **Example request:**
    ```json
    {
      "amount": 1,
      "transaction_type": "ai_receipt_scan",
      "description": "Scanned receipt: 12 items extracted",
      "metadata": {"items_extracted": 12}
    }
    ```

    **Returns:**
    - 200: Credits charged
    - 402: Insufficient credits (nothing charged)
    - 404: User account not found
    """
    uow = SqlAlchemyUnitOfWork(session)
    account_repo = SqlAlchemyUserAccountRepository(session)
    transaction_repo = SqlAlchemyCreditTransactionRepository(session)

    command = ChargeCreditsCommandDTO(
        user_id=user_id,
        amount=request.amount,
        transaction_type=request.transaction_type,
        description=request.description,
        metadata=request.metadata,
        idempotency_key=request.idempotency_key,
    )

    result = await ChargeCredits(uow, account_repo, transaction_repo).execute(command)
    if result.is_err():
        _raise_client_error(result.error)
    return result.value


@router.get("/creators/{creator_id}/earnings", response_model=CreatorEarningsSummaryDTO)
async def get_creator_earnings(
    creator_id: str,
    session: AsyncSession = Depends(get_session),
    config=Depends(get_config),
):
    """Lifetime, paid and pending earnings for a recipe creator."""
    use_case = GetCreatorEarningsSummary(
        SqlAlchemyCreatorEarningRepository(session),
        minimum_payout=minimum_payout_from_config(config),
    )
    result = await use_case.execute(creator_id)
    return result.value
