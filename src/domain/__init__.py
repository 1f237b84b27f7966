from .base import BaseModel
from .user_account import UserAccount
from .credit_transaction import CreditTransaction, TransactionType
from .recipe_usage import RecipeUsage
from .creator_earning import CreatorEarning
from .subscription_tier import SubscriptionTier, SubscriptionEventType
from .ledger_alert import LedgerAlert, AlertKind

__all__ = [
    "BaseModel",
    "UserAccount",
    "CreditTransaction",
    "TransactionType",
    "RecipeUsage",
    "CreatorEarning",
    "SubscriptionTier",
    "SubscriptionEventType",
    "LedgerAlert",
    "AlertKind",
]
