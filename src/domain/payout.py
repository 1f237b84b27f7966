"""Creator payout aggregation

Two-pass aggregation over eligible unpaid earnings: group and sum per
creator, then keep the creators whose total reaches the threshold.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple
from uuid import uuid4

MINIMUM_PAYOUT = Decimal("10.00")


@dataclass(frozen=True)
class CreatorPayable:
    creator_id: str
    total_amount: Decimal
    earnings_count: int


def aggregate_payable_creators(
    earnings: Iterable[Tuple[str, Decimal]],
    minimum_payout: Decimal = MINIMUM_PAYOUT,
) -> List[CreatorPayable]:
    """
    Group (creator_id, amount) rows and filter by the payout threshold

    Creators below the threshold are left out; their earnings carry over
    untouched to the next run.
    """
    totals: Dict[str, Decimal] = {}
    counts: Dict[str, int] = {}
    for creator_id, amount in earnings:
        totals[creator_id] = totals.get(creator_id, Decimal("0")) + Decimal(amount)
        counts[creator_id] = counts.get(creator_id, 0) + 1

    return [
        CreatorPayable(creator_id=creator_id, total_amount=total, earnings_count=counts[creator_id])
        for creator_id, total in sorted(totals.items())
        if total >= minimum_payout
    ]


def generate_batch_id(now: datetime) -> str:
    return f"batch-{now.strftime('%Y%m%d%H%M%S')}-{uuid4().hex[:8]}"
