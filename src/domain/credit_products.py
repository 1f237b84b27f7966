"""Credit amounts attached to subscription tiers and one-time products"""

import re
from typing import Dict, Mapping, Optional
from src.domain.subscription_tier import SubscriptionTier

MONTHLY_TIER_CREDITS: Dict[SubscriptionTier, int] = {
    SubscriptionTier.PRO: 40,
    SubscriptionTier.POWER: 100,
}

DEFAULT_CREDIT_PACKS: Dict[str, int] = {
    "credits_10": 10,
    "credits_30": 30,
    "credits_75": 75,
}

DEFAULT_MAX_CREDIT_PACK = 500

SIGNUP_BONUS_CREDITS = 25

_CREDIT_PACK_PATTERN = re.compile(r"^credits_(\d+)$")


def credits_for_product(
    product_id: Optional[str],
    packs: Mapping[str, int] = DEFAULT_CREDIT_PACKS,
    max_pack: int = DEFAULT_MAX_CREDIT_PACK,
) -> Optional[int]:
    """
    Credits granted by a one-time purchase, or None when unresolvable

    Known packs come from the static table; other credits_<N> ids are parsed
    and accepted up to max_pack.
    """
    if not product_id:
        return None

    if product_id in packs:
        return packs[product_id]

    match = _CREDIT_PACK_PATTERN.match(product_id)
    if match:
        credits = int(match.group(1))
        if 0 < credits <= max_pack:
            return credits

    return None
