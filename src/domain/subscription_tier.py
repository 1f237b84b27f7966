"""Subscription tiers, entitlement resolution and the tier state machine

Tiers are derived from entitlement events delivered by the subscription
platform. Power implies Pro: a Power subscriber holds both entitlements.
"""

import logging
from enum import Enum
from typing import Callable, Dict, Iterable, Optional

logger = logging.getLogger(__name__)

DEFAULT_PRO_ENTITLEMENT_ID = "pantry-chef Pro"
DEFAULT_POWER_ENTITLEMENT_ID = "pantry-chef Power"


class SubscriptionTier(str, Enum):
    """Resolved subscription level"""
    NONE = "none"
    PRO = "pro"
    POWER = "power"


class SubscriptionEventType(str, Enum):
    """Lifecycle events emitted by the subscription platform"""
    INITIAL_PURCHASE = "INITIAL_PURCHASE"
    RENEWAL = "RENEWAL"
    CANCELLATION = "CANCELLATION"
    EXPIRATION = "EXPIRATION"
    NON_RENEWING_PURCHASE = "NON_RENEWING_PURCHASE"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SubscriptionEventType":
        try:
            return cls((value or "").upper())
        except ValueError:
            return cls.UNKNOWN


def tier_flags(tier: SubscriptionTier) -> tuple[bool, bool]:
    """Return (is_pro_user, is_power_user) for a tier"""
    return (
        tier in (SubscriptionTier.PRO, SubscriptionTier.POWER),
        tier == SubscriptionTier.POWER,
    )


def tier_from_product_id(product_id: Optional[str]) -> SubscriptionTier:
    """
    Infer tier from a product identifier (e.g. power_monthly, pro_annual)

    Known approximation: used only when the event carries no tier
    entitlement, because entitlement delivery can lag the purchase.
    """
    normalized = (product_id or "").lower()
    if "power" in normalized:
        return SubscriptionTier.POWER
    if "pro" in normalized:
        return SubscriptionTier.PRO
    if normalized:
        logger.warning(f"Could not determine tier from product ID: {product_id}")
    return SubscriptionTier.NONE


def resolve_tier(
    entitlement_ids: Iterable[str],
    product_id: Optional[str] = None,
    pro_entitlement_id: str = DEFAULT_PRO_ENTITLEMENT_ID,
    power_entitlement_id: str = DEFAULT_POWER_ENTITLEMENT_ID,
) -> SubscriptionTier:
    """
    Map active entitlements (and, as fallback, a product id) to a tier

    Power is checked first since Power subscribers also hold Pro.
    Entitlements match the configured identifiers or the bare aliases
    "power" / "pro", case-insensitively.
    """
    active = {entitlement.strip().lower() for entitlement in entitlement_ids or []}

    if active & {power_entitlement_id.lower(), SubscriptionTier.POWER.value}:
        return SubscriptionTier.POWER

    if active & {pro_entitlement_id.lower(), SubscriptionTier.PRO.value}:
        return SubscriptionTier.PRO

    return tier_from_product_id(product_id)


TierTransition = Callable[[SubscriptionTier, SubscriptionTier], SubscriptionTier]


def _keep(current: SubscriptionTier, resolved: SubscriptionTier) -> SubscriptionTier:
    return current


def _activate(current: SubscriptionTier, resolved: SubscriptionTier) -> SubscriptionTier:
    # An unresolvable purchase leaves the tier untouched
    return resolved if resolved != SubscriptionTier.NONE else current


def _expire(current: SubscriptionTier, resolved: SubscriptionTier) -> SubscriptionTier:
    return SubscriptionTier.NONE


TIER_TRANSITIONS: Dict[SubscriptionEventType, TierTransition] = {
    SubscriptionEventType.INITIAL_PURCHASE: _activate,
    SubscriptionEventType.RENEWAL: _activate,
    SubscriptionEventType.CANCELLATION: _keep,  # access runs to the end of the paid period
    SubscriptionEventType.EXPIRATION: _expire,
    SubscriptionEventType.NON_RENEWING_PURCHASE: _keep,
    SubscriptionEventType.UNKNOWN: _keep,
}


def next_tier(
    event_type: SubscriptionEventType,
    current: SubscriptionTier,
    resolved: SubscriptionTier = SubscriptionTier.NONE,
) -> SubscriptionTier:
    """Apply the transition for an event to the current tier"""
    return TIER_TRANSITIONS[event_type](current, resolved)


def has_tier_access(tier: SubscriptionTier, required: SubscriptionTier) -> bool:
    """Pro features are open to Pro and Power, Power features only to Power"""
    is_pro, is_power = tier_flags(tier)
    if required == SubscriptionTier.POWER:
        return is_power
    if required == SubscriptionTier.PRO:
        return is_pro
    return True
