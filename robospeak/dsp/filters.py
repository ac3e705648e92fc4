"""
Audio filters using torchaudio biquad implementations.
Cutoff sweeps are rendered as a linear crossfade between the start and end filter
settings so the whole path stays vectorized.
"""

import torch
import torchaudio.functional as F


class Filter:
    @staticmethod
    def lowpass(waveform: torch.Tensor, sample_rate: int, cutoff_freq: float, q: float = 0.707) -> torch.Tensor:
        """Apply a LowPass Biquad filter (minimum-phase IIR)."""
        # Ensure cutoff is within Nyquist
        cutoff_freq = min(cutoff_freq, sample_rate / 2 - 1)
        return F.lowpass_biquad(waveform, sample_rate, cutoff_freq, q)

    @staticmethod
    def highpass(waveform: torch.Tensor, sample_rate: int, cutoff_freq: float, q: float = 0.707) -> torch.Tensor:
        """Apply a HighPass Biquad filter (minimum-phase IIR)."""
        cutoff_freq = min(cutoff_freq, sample_rate / 2 - 1)
        return F.highpass_biquad(waveform, sample_rate, cutoff_freq, q)

    @staticmethod
    def swept(waveform: torch.Tensor, sample_rate: int, kind: str, start_hz: float, end_hz: float, q: float = 0.707) -> torch.Tensor:
        """
        Filter with a cutoff moving from start_hz to end_hz over the buffer.
        kind: "lowpass" or "highpass".
        """
        apply = Filter.lowpass if kind == "lowpass" else Filter.highpass
        start = apply(waveform, sample_rate, start_hz, q)
        if abs(end_hz - start_hz) < 1e-6 or waveform.shape[-1] < 2:
            return start
        end = apply(waveform, sample_rate, end_hz, q)
        t = torch.linspace(0.0, 1.0, waveform.shape[-1], dtype=waveform.dtype)
        return start * (1.0 - t) + end * t


class Effects:
    @staticmethod
    def phaser(waveform: torch.Tensor, delay_samples: torch.Tensor) -> torch.Tensor:
        """
        Mix each sample with a delayed copy of the signal (per-sample delay, in samples).
        Output is the average of dry and delayed, so a zero delay is unity gain.
        """
        n = waveform.shape[-1]
        idx = torch.arange(n) - delay_samples.long()
        delayed = torch.where(idx >= 0, waveform[idx.clamp(min=0)], torch.zeros_like(waveform))
        return 0.5 * (waveform + delayed)

    @staticmethod
    def hard_clip(waveform: torch.Tensor, threshold: float = 1.0) -> torch.Tensor:
        return torch.clamp(waveform, -threshold, threshold)
