"""
Waveform assembly: baked words -> one continuous PCM buffer -> WAV bytes.

1. Segment synthesis: Wait instances become neutral-level silence, Baked instances are
   handed to the synthesis capability and quantized into the format's integer domain.
2. Fades: every sound segment gets a short linear fade at its edges, except the
   buffer's very first edge and very last edge. Silence is never faded.
3. Concatenation in order; fades never change lengths.
4. Encoding at full scale through AudioIO.
"""
import logging
from typing import Dict, List, Optional, Protocol, Sequence

import torch

from robospeak.core.errors import SynthesisFailure
from robospeak.core.io import AudioIO
from robospeak.core.types import Assembly, AudioFormat, BakedInstance, BakedWord, PlaybackInstance, WaitInstance
from robospeak.dsp.envelopes import fade_gains
from robospeak.params import canonical_defaults as defaults

logger = logging.getLogger(__name__)


class Synthesizer(Protocol):
    def synthesize(self, params: Dict[str, float]) -> torch.Tensor:
        ...


class WaveformAssembler:
    def __init__(self, synth: Synthesizer, fmt: Optional[AudioFormat] = None, fade_ms: float = defaults.FADE_MS):
        if fade_ms < 0:
            raise ValueError(f"fade_ms must be >= 0, got {fade_ms}")
        self.synth = synth
        self.fmt = fmt or AudioFormat()
        self.fade_ms = fade_ms

    @property
    def fade_samples(self) -> int:
        return self.fmt.samples_for_ms(self.fade_ms)

    # ------------------------------------------------------------------
    # Segments
    # ------------------------------------------------------------------

    def quantize(self, samples: torch.Tensor) -> torch.Tensor:
        """Float [-1, 1] -> integer samples around the format's neutral level."""
        values = torch.round(samples.double() * self.fmt.scale) + self.fmt.neutral
        return torch.clamp(values, self.fmt.min_value, self.fmt.max_value).to(torch.int32)

    def silence(self, duration_ms: float) -> torch.Tensor:
        return torch.full((self.fmt.samples_for_ms(duration_ms),), self.fmt.neutral, dtype=torch.int32)

    def segment(self, instance: PlaybackInstance) -> torch.Tensor:
        if isinstance(instance, WaitInstance):
            return self.silence(instance.duration_ms)
        if isinstance(instance, BakedInstance):
            samples = self.synth.synthesize(dict(instance.params))
            if not isinstance(samples, torch.Tensor):
                samples = torch.as_tensor(samples)
            if samples.dim() != 1 or samples.numel() == 0:
                raise SynthesisFailure(
                    f"synth returned shape {tuple(samples.shape)} for {instance.id or instance.symbol.value}"
                )
            if not torch.isfinite(samples).all():
                raise SynthesisFailure(f"synth returned non-finite samples for {instance.id or instance.symbol.value}")
            return self.quantize(samples)
        raise TypeError(f"Unknown playback instance: {instance!r}")

    def is_neutral(self, segment: torch.Tensor) -> bool:
        return bool(torch.all(segment == self.fmt.neutral))

    def fade(self, segment: torch.Tensor, fade_in: bool, fade_out: bool) -> torch.Tensor:
        """Scale each sample's deviation from neutral by the fade gains."""
        gains = fade_gains(segment.shape[-1], self.fade_samples, fade_in, fade_out)
        deviation = (segment - self.fmt.neutral).double()
        return (torch.round(deviation * gains) + self.fmt.neutral).to(torch.int32)

    # ------------------------------------------------------------------
    # Assembly
    # ------------------------------------------------------------------

    def assemble(self, baked: Sequence[BakedWord]) -> Assembly:
        # Shared instances render once per call
        rendered: Dict[int, torch.Tensor] = {}
        segments: List[torch.Tensor] = []
        for word in baked:
            key = id(word.instance)
            if key not in rendered:
                rendered[key] = self.segment(word.instance)
            segments.append(rendered[key])

        last = len(segments) - 1
        faded = []
        for i, (word, seg) in enumerate(zip(baked, segments)):
            if isinstance(word.instance, WaitInstance) or seg.numel() == 0 or self.is_neutral(seg):
                faded.append(seg)
                continue
            faded.append(self.fade(seg, fade_in=i > 0, fade_out=i < last))

        lengths = [int(s.shape[-1]) for s in faded]
        samples = torch.cat(faded) if faded else torch.zeros(0, dtype=torch.int32)
        logger.info("Assembled %d segments, %d frames", len(faded), samples.shape[-1])
        return Assembly(samples=samples, segment_lengths=lengths, fmt=self.fmt)

    def encode(self, assembly: Assembly) -> bytes:
        return AudioIO.to_bytes(assembly.samples, assembly.fmt)

    def render(self, baked: Sequence[BakedWord]) -> bytes:
        return self.encode(self.assemble(baked))
