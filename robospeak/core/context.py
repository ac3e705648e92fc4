"""
Generation context: the random source and identity counter threaded through grammar,
registry and baker. One context per utterance (or per request); nothing is shared
process-wide.
"""
import random
from typing import Optional, Sequence, TypeVar

from robospeak.core.select import choice, randint, weighted_choice

T = TypeVar("T")


class GenerationContext:
    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None):
        self.seed = seed
        self.rng = rng if rng is not None else random.Random(seed)
        self._next_identity = 1
        self._next_instance = 1

    def next_identity(self) -> str:
        """Mint a new identity. Monotonic for the lifetime of this context."""
        ident = str(self._next_identity)
        self._next_identity += 1
        return ident

    def next_instance_id(self, prefix: str) -> str:
        ident = f"{prefix}_{self._next_instance}"
        self._next_instance += 1
        return ident

    @property
    def identities_issued(self) -> int:
        return self._next_identity - 1

    # Draw helpers

    def random(self) -> float:
        return self.rng.random()

    def uniform(self, lo: float, hi: float) -> float:
        """Uniform float in [lo, hi)."""
        return lo + self.rng.random() * (hi - lo)

    def randint(self, lo: int, hi: int) -> int:
        return randint(lo, hi, self.rng)

    def choice(self, items: Sequence[T]) -> T:
        return choice(items, self.rng)

    def weighted_choice(self, items: Sequence[T], weights: Sequence[float]) -> T:
        return weighted_choice(items, weights, self.rng)

    def __repr__(self) -> str:
        return f"GenerationContext(seed={self.seed!r}, identities_issued={self.identities_issued})"
