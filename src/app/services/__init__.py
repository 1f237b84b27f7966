from .unit_of_work import UnitOfWork
from .notification_service import NotificationService
from .ledger_posting import LedgerPosting

__all__ = [
    "UnitOfWork",
    "NotificationService",
    "LedgerPosting",
]
