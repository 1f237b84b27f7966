"""Declining reward schedule for retail checkouts"""

from typing import Sequence

# Checkout #1 earns 15, #2 earns 10, every later checkout earns 5
CHECKOUT_REWARD_SCHEDULE = (15, 10, 5)


def checkout_reward(checkout_number: int, schedule: Sequence[int] = CHECKOUT_REWARD_SCHEDULE) -> int:
    """Credits granted for the given (1-based) checkout ordinal"""
    if checkout_number < 1:
        raise ValueError(f"checkout_number must be >= 1, got {checkout_number}")
    index = min(checkout_number, len(schedule)) - 1
    return schedule[index]


def is_steady_state(checkout_number: int, schedule: Sequence[int] = CHECKOUT_REWARD_SCHEDULE) -> bool:
    return checkout_number >= len(schedule)
