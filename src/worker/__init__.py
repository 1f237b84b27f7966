"""Background workers for the credits service"""
from .creator_payouts import CreatorPayoutWorker
from .ledger_reconciler import LedgerReconcilerWorker

__all__ = ["CreatorPayoutWorker", "LedgerReconcilerWorker"]
