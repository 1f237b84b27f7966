"""HandleSubscriptionEvent Use Case

Applies subscription platform events to the ledger and the tier store.
"""

import logging
from datetime import datetime
from typing import Dict, Mapping, Optional
from sqlalchemy.exc import IntegrityError
from libs.result import Error
from src.app.errors import ErrorCode
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.ledger_posting import LedgerPosting
from src.app.services.notification_service import NotificationService
from src.app.repositories.user_account_repository import UserAccountRepository
from src.app.repositories.credit_transaction_repository import CreditTransactionRepository
from src.domain.credit_products import (
    DEFAULT_CREDIT_PACKS,
    DEFAULT_MAX_CREDIT_PACK,
    MONTHLY_TIER_CREDITS,
    credits_for_product,
)
from src.domain.credit_transaction import TransactionType
from src.domain.ledger_alert import AlertKind, LedgerAlert
from src.domain.subscription_tier import (
    DEFAULT_POWER_ENTITLEMENT_ID,
    DEFAULT_PRO_ENTITLEMENT_ID,
    SubscriptionEventType,
    SubscriptionTier,
    next_tier,
    resolve_tier,
)
from .dtos import SubscriptionEventDTO, SubscriptionEventAckDTO

logger = logging.getLogger(__name__)


class HandleSubscriptionEvent:
    """
    Use Case: Handle a subscription webhook event

    Event handling:
    - INITIAL_PURCHASE / RENEWAL: grant the tier's monthly credits and set the tier
    - CANCELLATION: nothing; access runs until EXPIRATION
    - EXPIRATION: tier -> none, flags cleared; credits are never revoked
    - NON_RENEWING_PURCHASE: grant the pack's credits; tier unchanged
    - anything else: logged and acknowledged

    Grant and tier update commit in one transaction. Grants carry an
    idempotency key derived from the billing period or event id so that
    redelivered events never grant twice.

    Never raises: every outcome is a SubscriptionEventAckDTO.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: UserAccountRepository,
        transaction_repo: CreditTransactionRepository,
        notification_service: Optional[NotificationService] = None,
        tier_credits: Optional[Mapping[SubscriptionTier, int]] = None,
        credit_packs: Optional[Mapping[str, int]] = None,
        max_credit_pack: int = DEFAULT_MAX_CREDIT_PACK,
        pro_entitlement_id: str = DEFAULT_PRO_ENTITLEMENT_ID,
        power_entitlement_id: str = DEFAULT_POWER_ENTITLEMENT_ID,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo
        self.posting = LedgerPosting(account_repo, transaction_repo)
        self.notification_service = notification_service
        self.tier_credits: Dict[SubscriptionTier, int] = dict(tier_credits or MONTHLY_TIER_CREDITS)
        self.credit_packs = dict(credit_packs or DEFAULT_CREDIT_PACKS)
        self.max_credit_pack = max_credit_pack
        self.pro_entitlement_id = pro_entitlement_id
        self.power_entitlement_id = power_entitlement_id

    async def execute(self, event: SubscriptionEventDTO) -> SubscriptionEventAckDTO:
        """
        Execute event handling

        Args:
            event: SubscriptionEventDTO parsed from the webhook

        Returns:
            SubscriptionEventAckDTO: always received=True
        """
        event_type = SubscriptionEventType.parse(event.event_type)
        logger.info(f"Subscription event received: {event.event_type} (event_id={event.event_id})")

        if not event.app_user_id:
            logger.error(f"No app_user_id in subscription event {event.event_id}")
            return self._ack(event, error=Error(
                code=ErrorCode.MISSING_APP_USER_ID,
                message="Missing app_user_id",
            ))

        try:
            if event_type in (SubscriptionEventType.INITIAL_PURCHASE, SubscriptionEventType.RENEWAL):
                return await self._handle_subscription_purchase(event, event_type)

            if event_type == SubscriptionEventType.EXPIRATION:
                return await self._handle_expiration(event)

            if event_type == SubscriptionEventType.NON_RENEWING_PURCHASE:
                return await self._handle_credit_purchase(event)

            if event_type == SubscriptionEventType.CANCELLATION:
                logger.info(
                    f"User {event.app_user_id} cancelled subscription (will expire at end of period)"
                )
            else:
                logger.info(f"Unhandled subscription event type: {event.event_type}")
            return self._ack(event)

        except Exception as e:
            await self.uow.rollback()
            logger.error(
                f"Failed to process {event.event_type} for user {event.app_user_id}: {e}"
            )
            await self._alert(
                AlertKind.WEBHOOK_PROCESSING_FAILED,
                f"Failed to process {event.event_type} event",
                event,
                reason=str(e),
            )
            return self._ack(event, error=Error(
                code=ErrorCode.EVENT_PROCESSING_FAILED,
                message=str(e),
            ))

    async def _handle_subscription_purchase(
        self, event: SubscriptionEventDTO, event_type: SubscriptionEventType
    ) -> SubscriptionEventAckDTO:
        user_id = event.app_user_id
        resolved = resolve_tier(
            event.entitlement_ids,
            event.product_id,
            pro_entitlement_id=self.pro_entitlement_id,
            power_entitlement_id=self.power_entitlement_id,
        )

        if resolved == SubscriptionTier.NONE:
            logger.warning(
                f"Unresolved entitlement for user {user_id}: "
                f"entitlements={event.entitlement_ids}, product={event.product_id}"
            )
            await self._alert(
                AlertKind.UNRESOLVED_ENTITLEMENT,
                "Could not determine subscription tier",
                event,
            )
            return self._ack(event, error=Error(
                code=ErrorCode.UNRESOLVED_ENTITLEMENT,
                message=f"Could not determine tier for product {event.product_id}",
            ))

        account = await self.account_repo.get_by_user_id(user_id)
        if not account:
            return self._user_not_found(event)

        credits = self.tier_credits[resolved]
        period = event.purchased_at_ms if event.purchased_at_ms is not None else event.event_id
        idempotency_key = f"subscription_grant:{user_id}:{period}" if period is not None else None
        if idempotency_key is None:
            logger.warning(
                f"{event_type.value} for user {user_id} has no period or event id; "
                f"grant is not idempotent"
            )

        try:
            result = await self.posting.grant(
                user_id=user_id,
                amount=credits,
                transaction_type=TransactionType.SUBSCRIPTION_GRANT,
                description=f"Monthly {resolved.value} subscription credits",
                metadata={
                    "tier": resolved.value,
                    "period": "monthly",
                    "product_id": event.product_id,
                    "event_id": event.event_id,
                },
                idempotency_key=idempotency_key,
            )
            if result.is_err():
                await self.uow.rollback()
                return self._ack(event, error=result.error)

            posting = result.value
            tier = next_tier(event_type, SubscriptionTier(account.subscription_tier), resolved)

            if posting.is_replay:
                logger.info(f"Subscription grant already applied for user {user_id} ({idempotency_key})")
                return self._ack(
                    event,
                    tier=SubscriptionTier(account.subscription_tier),
                    transaction_id=posting.transaction.id,
                    is_replay=True,
                )

            await self.account_repo.update_subscription_tier(user_id, tier, checked_at=datetime.utcnow())
            await self.uow.commit()

        except IntegrityError:
            await self.uow.rollback()
            logger.info(f"Concurrent delivery of {idempotency_key} already applied")
            existing = await self.transaction_repo.get_by_idempotency_key(idempotency_key)
            return self._ack(
                event,
                tier=resolved,
                transaction_id=existing.id if existing else None,
                is_replay=True,
            )

        logger.info(f"Granted {credits} {resolved.value} subscription credits to user {user_id}")
        return self._ack(
            event,
            tier=tier,
            credits_granted=credits,
            transaction_id=posting.transaction.id,
        )

    async def _handle_expiration(self, event: SubscriptionEventDTO) -> SubscriptionEventAckDTO:
        user_id = event.app_user_id
        account = await self.account_repo.get_by_user_id(user_id)
        if not account:
            return self._user_not_found(event)

        tier = next_tier(SubscriptionEventType.EXPIRATION, SubscriptionTier(account.subscription_tier))
        await self.account_repo.update_subscription_tier(user_id, tier, checked_at=datetime.utcnow())
        await self.uow.commit()

        logger.info(f"User {user_id} subscription expired, tier removed")
        return self._ack(event, tier=tier)

    async def _handle_credit_purchase(self, event: SubscriptionEventDTO) -> SubscriptionEventAckDTO:
        user_id = event.app_user_id
        credits = credits_for_product(event.product_id, self.credit_packs, self.max_credit_pack)

        if credits is None:
            logger.warning(f"Unknown product ID for credit purchase: {event.product_id}")
            await self._alert(
                AlertKind.UNRESOLVED_PRODUCT,
                "Unknown credit pack product",
                event,
            )
            return self._ack(event, error=Error(
                code=ErrorCode.UNRESOLVED_PRODUCT,
                message=f"Unknown product ID for credit purchase: {event.product_id}",
            ))

        idempotency_key = f"credit_purchase:{event.event_id}" if event.event_id else None
        if idempotency_key is None:
            logger.warning(f"Credit purchase for user {user_id} has no event id; grant is not idempotent")

        try:
            result = await self.posting.grant(
                user_id=user_id,
                amount=credits,
                transaction_type=TransactionType.CREDIT_PURCHASE,
                description=f"Purchased {credits} credits",
                metadata={
                    "product_id": event.product_id,
                    "credits": credits,
                    "event_id": event.event_id,
                },
                idempotency_key=idempotency_key,
            )
            if result.is_err():
                await self.uow.rollback()
                if result.error.code == ErrorCode.USER_NOT_FOUND:
                    return self._user_not_found(event)
                return self._ack(event, error=result.error)

            posting = result.value
            if posting.is_replay:
                return self._ack(event, transaction_id=posting.transaction.id, is_replay=True)

            await self.uow.commit()

        except IntegrityError:
            await self.uow.rollback()
            existing = await self.transaction_repo.get_by_idempotency_key(idempotency_key)
            return self._ack(event, transaction_id=existing.id if existing else None, is_replay=True)

        logger.info(f"Granted {credits} purchased credits to user {user_id}")
        return self._ack(event, credits_granted=credits, transaction_id=posting.transaction.id)

    def _user_not_found(self, event: SubscriptionEventDTO) -> SubscriptionEventAckDTO:
        logger.warning(f"Subscription event {event.event_type} for unknown user {event.app_user_id}")
        return self._ack(event, error=Error(
            code=ErrorCode.USER_NOT_FOUND,
            message=f"User account not found for user {event.app_user_id}",
        ))

    async def _alert(self, kind: AlertKind, message: str, event: SubscriptionEventDTO, **extra) -> None:
        if not self.notification_service:
            return
        context = {
            "event_type": event.event_type,
            "event_id": event.event_id,
            "product_id": event.product_id,
            "entitlement_ids": event.entitlement_ids,
            **extra,
        }
        try:
            await self.notification_service.send_ledger_alert(
                LedgerAlert(kind=kind, message=message, user_id=event.app_user_id, context=context)
            )
        except Exception as e:
            logger.error(f"Failed to send {kind.value} alert: {e}")

    @staticmethod
    def _ack(
        event: SubscriptionEventDTO,
        tier: Optional[SubscriptionTier] = None,
        credits_granted: int = 0,
        transaction_id: Optional[int] = None,
        is_replay: bool = False,
        error: Optional[Error] = None,
    ) -> SubscriptionEventAckDTO:
        return SubscriptionEventAckDTO(
            received=True,
            event_type=event.event_type,
            user_id=event.app_user_id,
            tier=tier.value if tier else None,
            credits_granted=credits_granted,
            transaction_id=transaction_id,
            is_replay=is_replay,
            error_code=error.code if error else None,
            error=error.message if error else None,
        )
