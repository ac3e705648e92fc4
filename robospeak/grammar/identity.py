from typing import Dict, List, Mapping, Tuple

from robospeak.core.context import GenerationContext
from robospeak.core.types import Symbol
from robospeak.params import canonical_defaults as defaults


class IdentityRegistry:
    """
    Per-symbol identity pools for one generation.
    Until a symbol's pool reaches `cap`, every request mints a new identity; after that a
    uniformly chosen pooled identity is reused. This bounds how many distinct timbres of
    one symbol appear in an utterance.
    """

    def __init__(self, ctx: GenerationContext, cap: int = defaults.IDENTITY_POOL_CAP):
        if cap < 1:
            raise ValueError(f"cap must be >= 1, got {cap}")
        self.ctx = ctx
        self.cap = cap
        self._pools: Dict[Symbol, List[str]] = {}

    def get_or_create(self, symbol: Symbol) -> str:
        pool = self._pools.setdefault(symbol, [])
        if len(pool) >= self.cap:
            return self.ctx.choice(pool)
        identity = self.ctx.next_identity()
        pool.append(identity)
        return identity

    @property
    def pools(self) -> Mapping[Symbol, Tuple[str, ...]]:
        return {symbol: tuple(pool) for symbol, pool in self._pools.items()}
