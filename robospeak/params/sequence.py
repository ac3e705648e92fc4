"""
Sequence baking: bake a Word sequence so that every occurrence of the same
(symbol, identity) pair shares one playback instance.
"""
import logging
from typing import Callable, Dict, Iterable, List, Tuple

from robospeak.core.context import GenerationContext
from robospeak.core.types import BakedWord, PlaybackInstance, Symbol, Word
from robospeak.params.bake import bake_symbol

logger = logging.getLogger(__name__)

Baker = Callable[[Symbol, GenerationContext], PlaybackInstance]


def bake_sequence(
    words: Iterable[Word],
    ctx: GenerationContext,
    baker: Baker = bake_symbol,
) -> List[BakedWord]:
    """
    Bake every word. The cache lives for this call only: a second call with the same
    words draws fresh instances. Errors from the baker propagate; no partial result.
    """
    cache: Dict[Tuple[Symbol, str], PlaybackInstance] = {}
    baked: List[BakedWord] = []

    for word in words:
        instance = cache.get(word.key)
        if instance is None:
            instance = baker(word.symbol, ctx)
            cache[word.key] = instance
        else:
            logger.debug("Reusing baked instance for %s", word)
        baked.append(BakedWord(word.symbol, word.identity, instance))

    logger.debug("Baked %d words into %d distinct instances", len(baked), len(cache))
    return baked
