"""Random integers."""

from __future__ import annotations

import random


def rand(min_value: int, max_value: int) -> int:
    """Random integer drawn from ``[0, max_value)`` that is at least ``min_value``."""
    if max_value <= 0:
        raise ValueError("max_value must be positive")
    lower = max(min_value, 0)
    if lower >= max_value:
        raise ValueError("empty range")
    return random.randrange(lower, max_value)