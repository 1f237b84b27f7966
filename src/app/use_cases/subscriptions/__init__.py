"""Subscription lifecycle use cases"""

from .handle_subscription_event import HandleSubscriptionEvent
from .dtos import SubscriptionEventDTO, SubscriptionEventAckDTO

__all__ = [
    "HandleSubscriptionEvent",
    "SubscriptionEventDTO",
    "SubscriptionEventAckDTO",
]
