"""Credit ledger use cases"""

from .grant_credits import GrantCredits
from .charge_credits import ChargeCredits
from .get_balance import GetBalance
from .check_credits import CheckCredits
from .list_transactions import ListTransactions
from .open_account import OpenAccount
from .grant_signup_bonus import GrantSignupBonus
from .get_credit_status import GetCreditStatus
from .check_tier_access import CheckTierAccess
from .reconcile_ledger import ReconcileLedger
from .dtos import (
    GrantCreditsCommandDTO,
    ChargeCreditsCommandDTO,
    CreditTransactionResponseDTO,
    BalanceResponseDTO,
    CreditCheckResponseDTO,
    TransactionDTO,
    ListTransactionsResponseDTO,
    AccountResponseDTO,
    CreditStatusResponseDTO,
    TierAccessResponseDTO,
    LedgerDiscrepancyDTO,
    ReconciliationResultDTO,
)

__all__ = [
    "GrantCredits",
    "ChargeCredits",
    "GetBalance",
    "CheckCredits",
    "ListTransactions",
    "OpenAccount",
    "GrantSignupBonus",
    "GetCreditStatus",
    "CheckTierAccess",
    "ReconcileLedger",
    "GrantCreditsCommandDTO",
    "ChargeCreditsCommandDTO",
    "CreditTransactionResponseDTO",
    "BalanceResponseDTO",
    "CreditCheckResponseDTO",
    "TransactionDTO",
    "ListTransactionsResponseDTO",
    "AccountResponseDTO",
    "CreditStatusResponseDTO",
    "TierAccessResponseDTO",
    "LedgerDiscrepancyDTO",
    "ReconciliationResultDTO",
]
