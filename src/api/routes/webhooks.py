"""Subscription platform webhook

Always answers 200 so the platform does not retry; processing problems are
reported in the acknowledgement body.
"""

import logging
from typing import Any
from fastapi import APIRouter, Depends, Request
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.errors import ErrorCode
from src.app.services.notification_service import NotificationService
from src.app.use_cases.subscriptions import (
    HandleSubscriptionEvent,
    SubscriptionEventAckDTO,
    SubscriptionEventDTO,
)
from src.adapter.repositories import (
    SqlAlchemyCreditTransactionRepository,
    SqlAlchemyUserAccountRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_config, get_notification_service, get_session, tier_credits_from_config

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["Webhooks"])


def _raw_event_type(payload: Any) -> str:
    if not isinstance(payload, dict):
        return ""
    event = payload.get("event")
    event_type = event.get("type") if isinstance(event, dict) else None
    return str(event_type or payload.get("type") or "")


@router.post("/subscriptions", response_model=SubscriptionEventAckDTO)
async def handle_subscription_webhook(
    request: Request,
    session: AsyncSession = Depends(get_session),
    notification_service: NotificationService = Depends(get_notification_service),
    config=Depends(get_config),
):
    """
    Handle subscription lifecycle events.

    **Envelope:**
    ```json
    {
      "event": {
        "type": "RENEWAL",
        "id": "evt_0001",
        "app_user_id": "user_abc123",
        "product_id": "pro_monthly",
        "entitlement_ids": ["pantry-chef Pro"],
        "purchased_at_ms": 1704067200000
      }
    }
    ```
    """
    payload = None
    try:
        payload = await request.json()
        event = SubscriptionEventDTO.from_webhook_payload(payload)
    except Exception as e:
        logger.error(f"Malformed subscription webhook payload: {e}")
        return SubscriptionEventAckDTO(
            event_type=_raw_event_type(payload),
            error_code=ErrorCode.EVENT_PROCESSING_FAILED,
            error="Malformed event payload",
        )

    use_case = HandleSubscriptionEvent(
        uow=SqlAlchemyUnitOfWork(session),
        account_repo=SqlAlchemyUserAccountRepository(session),
        transaction_repo=SqlAlchemyCreditTransactionRepository(session),
        notification_service=notification_service,
        tier_credits=tier_credits_from_config(config),
        credit_packs=config.CREDIT_PACKS,
        max_credit_pack=int(config.MAX_CREDIT_PACK),
        pro_entitlement_id=config.PRO_ENTITLEMENT_ID,
        power_entitlement_id=config.POWER_ENTITLEMENT_ID,
    )
    return await use_case.execute(event)
