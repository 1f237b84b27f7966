"""Ledger Alert

Observability record for problems that are handled without failing the
caller: unresolved subscription events, webhook processing errors, payout
failures and ledger discrepancies.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
from sqlmodel import Field
from src.domain.base import BaseModel


class AlertKind(str, Enum):
    UNRESOLVED_ENTITLEMENT = "unresolved_entitlement"
    UNRESOLVED_PRODUCT = "unresolved_product"
    WEBHOOK_PROCESSING_FAILED = "webhook_processing_failed"
    PAYOUT_FAILED = "payout_failed"
    LEDGER_DISCREPANCY = "ledger_discrepancy"


class LedgerAlert(BaseModel):
    kind: AlertKind
    message: str
    user_id: Optional[str] = None
    context: Dict[str, Any] = Field(default_factory=dict)
    raised_at: datetime = Field(default_factory=datetime.utcnow)
