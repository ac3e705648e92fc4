import torch


# -----------------------------------------------------------------------------
# Attack / sustain(+punch) / decay envelope
# -----------------------------------------------------------------------------

class SfxrEnvelope:
    """
    Three-stage one-shot envelope.
    Stage lengths are `stage ** 2 * 100000` samples at the 44.1 kHz reference rate:
    attack rises linearly 0 -> 1, sustain starts at 1 + 2 * punch and falls back to 1,
    decay falls linearly 1 -> 0. The envelope length is the sound's length.
    """

    REFERENCE_RATE = 44100
    STAGE_SCALE = 100000.0

    def __init__(self, attack: float, sustain: float, decay: float, punch: float = 0.0, sample_rate: int = REFERENCE_RATE):
        ratio = sample_rate / self.REFERENCE_RATE
        self.sample_rate = sample_rate
        self.punch = float(punch)
        self.n_attack = int(float(attack) ** 2 * self.STAGE_SCALE * ratio)
        self.n_sustain = int(float(sustain) ** 2 * self.STAGE_SCALE * ratio)
        self.n_decay = int(float(decay) ** 2 * self.STAGE_SCALE * ratio)

    @property
    def num_samples(self) -> int:
        return max(1, self.n_attack + self.n_sustain + self.n_decay)

    def render(self) -> torch.Tensor:
        parts = []
        if self.n_attack > 0:
            parts.append(torch.arange(self.n_attack, dtype=torch.float32) / self.n_attack)
        if self.n_sustain > 0:
            t = torch.arange(self.n_sustain, dtype=torch.float32) / self.n_sustain
            parts.append(1.0 + (1.0 - t) * 2.0 * self.punch)
        if self.n_decay > 0:
            parts.append(1.0 - torch.arange(self.n_decay, dtype=torch.float32) / self.n_decay)
        if not parts:
            return torch.zeros(1)
        return torch.cat(parts)


# -----------------------------------------------------------------------------
# Linear boundary fades
# -----------------------------------------------------------------------------

def fade_gains(length: int, fade_samples: int, fade_in: bool = True, fade_out: bool = True) -> torch.Tensor:
    """
    Per-sample gain for a segment of `length` samples.
    Fade length is capped at half the segment. Fade-in gains are i / k so the first
    sample is silenced; fade-out mirrors it so the last sample is silenced. Samples
    outside the fades keep gain 1.
    """
    gains = torch.ones(length, dtype=torch.float64)
    k = min(int(fade_samples), length // 2)
    if k <= 0:
        return gains
    ramp = torch.arange(k, dtype=torch.float64) / k
    if fade_in:
        gains[:k] = ramp
    if fade_out:
        gains[-k:] = torch.flip(ramp, dims=[0])
    return gains
