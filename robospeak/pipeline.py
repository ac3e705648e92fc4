"""
Pipeline entry points: generate -> bake_sequence -> render.
Each call builds its own context unless one is passed in; nothing is cached between calls.
"""
import logging
from dataclasses import dataclass
from functools import partial
from typing import List, Optional, Sequence

from robospeak.core.config import Settings
from robospeak.core.context import GenerationContext
from robospeak.core.types import BakedWord, Word, sequence_string
from robospeak.grammar import grammar_for
from robospeak.params.bake import bake_symbol
from robospeak.params.sequence import bake_sequence as _bake_sequence
from robospeak.render.assembler import Synthesizer, WaveformAssembler
from robospeak.synth.sfxr import SfxrSynth

logger = logging.getLogger(__name__)


@dataclass
class Utterance:
    words: List[Word]
    baked: List[BakedWord]
    wav: bytes
    seed: Optional[int] = None

    @property
    def sequence(self) -> str:
        return sequence_string(self.words)


def _settings(settings: Optional[Settings]) -> Settings:
    return settings if settings is not None else Settings().validate()


def generate(ctx: Optional[GenerationContext] = None, settings: Optional[Settings] = None) -> List[Word]:
    settings = _settings(settings)
    ctx = ctx if ctx is not None else GenerationContext()
    return grammar_for(settings).generate(ctx)


def bake_sequence(
    words: Sequence[Word],
    ctx: Optional[GenerationContext] = None,
    settings: Optional[Settings] = None,
) -> List[BakedWord]:
    settings = _settings(settings)
    ctx = ctx if ctx is not None else GenerationContext()
    baker = partial(bake_symbol, wait_band=settings.wait_band)
    return _bake_sequence(words, ctx, baker=baker)


def assembler_for(settings: Settings, synth: Optional[Synthesizer] = None) -> WaveformAssembler:
    fmt = settings.audio_format
    synth = synth if synth is not None else SfxrSynth(sample_rate=fmt.sample_rate)
    return WaveformAssembler(synth, fmt=fmt, fade_ms=settings.fade_ms)


def render(
    baked: Sequence[BakedWord],
    synth: Optional[Synthesizer] = None,
    settings: Optional[Settings] = None,
) -> bytes:
    return assembler_for(_settings(settings), synth).render(baked)


def speak(
    seed: Optional[int] = None,
    settings: Optional[Settings] = None,
    synth: Optional[Synthesizer] = None,
) -> Utterance:
    """Generate, bake and render one utterance with a single context."""
    settings = _settings(settings)
    ctx = GenerationContext(seed)
    words = generate(ctx, settings)
    baked = bake_sequence(words, ctx, settings)
    wav = render(baked, synth, settings)
    logger.info("Spoke %s (%d bytes)", sequence_string(words), len(wav))
    return Utterance(words=words, baked=baked, wav=wav, seed=seed)
