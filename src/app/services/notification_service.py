"""Notification Service Interface

Defines the contract for surfacing ledger alerts to operators.
"""

from abc import ABC, abstractmethod
from src.domain.ledger_alert import LedgerAlert


class NotificationService(ABC):
    """
    Abstract notification service for sending alerts

    Implementations can send notifications via:
    - Logging
    - Webhook (HTTP POST)
    - Slack, PagerDuty, etc.
    """

    @abstractmethod
    async def send_ledger_alert(self, alert: LedgerAlert) -> bool:
        """
        Send a ledger alert

        Args:
            alert: LedgerAlert to deliver

        Returns:
            True if notification sent successfully, False otherwise
        """
        pass
