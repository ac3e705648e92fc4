"""
Ramble grammar: the simple per-step generator.
Steps repeat until the target word count is reached. Each step picks a token uniformly;
pauses are heavily over-represented in the middle of the utterance and excluded at word
0, at any position from target - 1 on and right after a pause.
A sound step becomes a short run alternating two voices of the same symbol.
"""
import logging
from typing import List, Tuple

from robospeak.core.context import GenerationContext
from robospeak.core.types import SOUND_SYMBOLS, Symbol, Word, sequence_string
from robospeak.grammar.expressions import REPEAT_LIMITS
from robospeak.grammar.identity import IdentityRegistry
from robospeak.params import canonical_defaults as defaults

logger = logging.getLogger(__name__)

# Pause weight: one regular slot plus six extra.
PAUSE_SLOTS = 7


class RambleGrammar:
    def __init__(
        self,
        length_range: Tuple[int, int] = (defaults.MIN_WORDS, defaults.MAX_WORDS),
        pool_cap: int = defaults.IDENTITY_POOL_CAP,
    ):
        lo, hi = length_range
        if not 1 <= lo <= hi:
            raise ValueError(f"length_range must satisfy 1 <= lo <= hi, got {length_range}")
        self.length_range = (lo, hi)
        self.pool_cap = pool_cap

    def generate(self, ctx: GenerationContext) -> List[Word]:
        target = ctx.randint(*self.length_range)
        registry = IdentityRegistry(ctx, self.pool_cap)
        sounds = list(SOUND_SYMBOLS)
        with_pauses = sounds + [Symbol.SILENCE] * PAUSE_SLOTS
        words: List[Word] = []

        # target is a minimum word count; a sound step may overshoot it
        while len(words) < target:
            position = len(words)
            after_pause = bool(words) and words[-1].symbol.is_silence
            options = sounds if position == 0 or position >= target - 1 or after_pause else with_pauses
            symbol = ctx.choice(options)
            if symbol.is_silence:
                words.append(Word(symbol, registry.get_or_create(symbol)))
            else:
                words.extend(self._voices(symbol, ctx, registry))

        logger.debug("Rambled %d words (target %d): %s", len(words), target, sequence_string(words))
        return words

    @staticmethod
    def _voices(symbol: Symbol, ctx: GenerationContext, registry: IdentityRegistry) -> List[Word]:
        voices = (registry.get_or_create(symbol), registry.get_or_create(symbol))
        count = ctx.randint(1, ctx.choice(REPEAT_LIMITS))
        return [Word(symbol, voices[i % 2]) for i in range(count)]
