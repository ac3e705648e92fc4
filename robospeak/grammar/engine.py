"""
Subphrase grammar engine: weighted selection over the expression catalog until the
sequence reaches its target word count.
"""
import logging
from typing import List, Sequence, Tuple

from robospeak.core.context import GenerationContext
from robospeak.core.errors import GrammarError
from robospeak.core.types import Word, sequence_string
from robospeak.grammar.expressions import DEFAULT_CATALOG, Expression
from robospeak.grammar.identity import IdentityRegistry
from robospeak.grammar.state import GrammarState
from robospeak.params import canonical_defaults as defaults

logger = logging.getLogger(__name__)


class GrammarEngine:
    def __init__(
        self,
        catalog: Sequence[Expression] = DEFAULT_CATALOG,
        length_range: Tuple[int, int] = (defaults.MIN_WORDS, defaults.MAX_WORDS),
        pool_cap: int = defaults.IDENTITY_POOL_CAP,
    ):
        lo, hi = length_range
        if not 1 <= lo <= hi:
            raise ValueError(f"length_range must satisfy 1 <= lo <= hi, got {length_range}")
        if not catalog:
            raise ValueError("catalog must not be empty")
        self.catalog = tuple(catalog)
        self.length_range = (lo, hi)
        self.pool_cap = pool_cap

    def weights(self, state: GrammarState) -> List[float]:
        return [expression.weight(state) for expression in self.catalog]

    def run(self, ctx: GenerationContext) -> GrammarState:
        """Generate one sequence and return the final state (target, words, pools)."""
        target = ctx.randint(*self.length_range)
        state = GrammarState(target, IdentityRegistry(ctx, self.pool_cap), ctx)
        logger.debug("Generating sequence with target length %d", target)

        while state.position < target:
            expression = ctx.weighted_choice(self.catalog, self.weights(state))
            before = state.position
            expression.generate(state)
            if state.position <= before:
                raise GrammarError(f"expression {expression.name!r} produced no words")

        logger.debug("Generated: %s", sequence_string(state.words))
        return state

    def generate(self, ctx: GenerationContext) -> List[Word]:
        return list(self.run(ctx).words)
