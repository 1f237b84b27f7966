"""Data Transfer Objects for subscription webhook handling"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, field_validator


class SubscriptionEventDTO(BaseModel):
    """
    Verified subscription lifecycle event

    Flattened from the platform webhook envelope. event_type is kept as the
    raw string so unknown types are acknowledged instead of rejected.
    """

    event_type: str = Field(..., description="INITIAL_PURCHASE, RENEWAL, CANCELLATION, ...")

    app_user_id: Optional[str] = Field(default=None, description="Platform user id (our user_id)")

    product_id: Optional[str] = Field(default=None, description="Store product identifier")

    entitlement_ids: List[str] = Field(default_factory=list, description="Active entitlements")

    event_id: Optional[str] = Field(default=None, description="Platform event id")

    purchased_at_ms: Optional[int] = Field(
        default=None, description="Start of the purchased billing period (epoch ms)"
    )

    @field_validator("entitlement_ids", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return v or []

    @classmethod
    def from_webhook_payload(cls, payload: Any) -> "SubscriptionEventDTO":
        """
        Build from the platform envelope {"event": {...}}

        The event type is read from event.type, falling back to a top-level
        "type" key. Raises ValueError when the body or the event is not a
        JSON object.
        """
        if not isinstance(payload, dict):
            raise ValueError(f"Webhook body must be a JSON object, got {type(payload).__name__}")
        event = payload.get("event") or {}
        if not isinstance(event, dict):
            raise ValueError(f"Webhook event must be a JSON object, got {type(event).__name__}")
        return cls(
            event_type=event.get("type") or payload.get("type") or "",
            app_user_id=event.get("app_user_id"),
            product_id=event.get("product_id"),
            entitlement_ids=event.get("entitlement_ids"),
            event_id=event.get("id"),
            purchased_at_ms=event.get("purchased_at_ms"),
        )

    class Config:
        json_schema_extra = {
            "example": {
                "event_type": "RENEWAL",
                "app_user_id": "user_abc123",
                "product_id": "pro_monthly",
                "entitlement_ids": ["pantry-chef Pro"],
                "event_id": "evt_0001",
                "purchased_at_ms": 1704067200000
            }
        }


class SubscriptionEventAckDTO(BaseModel):
    """
    Acknowledgement for a processed webhook

    received is always True; problems are reported through error/error_code
    so the platform does not retry.
    """

    received: bool = True
    event_type: str
    user_id: Optional[str] = None
    tier: Optional[str] = Field(default=None, description="Tier after the event")
    credits_granted: int = 0
    transaction_id: Optional[int] = None
    is_replay: bool = False
    error_code: Optional[str] = None
    error: Optional[str] = None
