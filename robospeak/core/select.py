"""
Random selection helpers. All draws go through an explicit random.Random so a seeded
source makes every caller deterministic.
"""
import math
import random
from typing import Sequence, TypeVar

from robospeak.core.errors import InvalidWeights

T = TypeVar("T")


def randint(lo: int, hi: int, rng: random.Random) -> int:
    """Uniform integer in [lo, hi], both ends inclusive."""
    if hi < lo:
        raise ValueError(f"empty integer range [{lo}, {hi}]")
    return lo + int(rng.random() * (hi + 1 - lo))


def choice(items: Sequence[T], rng: random.Random) -> T:
    """Uniform pick from a non-empty sequence."""
    if len(items) == 0:
        raise InvalidWeights("cannot choose from an empty sequence")
    return items[randint(0, len(items) - 1, rng)]


def weighted_choice(items: Sequence[T], weights: Sequence[float], rng: random.Random) -> T:
    """
    Pick one item with probability proportional to its weight.
    Zero-weight items are never returned. If rounding exhausts the scan the last item with
    a positive weight is returned.
    """
    if len(items) != len(weights):
        raise InvalidWeights(
            f"items and weights differ in length ({len(items)} != {len(weights)})"
        )
    if len(items) == 0:
        raise InvalidWeights("items must not be empty")

    total = 0.0
    for w in weights:
        if not math.isfinite(w) or w < 0:
            raise InvalidWeights(f"weights must be finite and non-negative, got {w!r}")
        total += w
    if total <= 0:
        raise InvalidWeights("at least one weight must be positive")

    r = rng.random() * total
    last = None
    for item, w in zip(items, weights):
        if w == 0:
            continue
        if r < w:
            return item
        r -= w
        last = item

    return last
