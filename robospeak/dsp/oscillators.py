"""
Phase-driven oscillators.
Callers integrate a per-sample frequency curve into a cycle count once (`Oscillator.cycles`)
and hand it to any waveform, so frequency slides, vibrato and arpeggio steps stay
phase-continuous. Phase always starts at 0.
"""

import numpy as np
import torch


class Oscillator:
    @staticmethod
    def cycles(frequency: torch.Tensor, sample_rate: int) -> torch.Tensor:
        """
        Integrate frequency (Hz, one value per sample) into elapsed cycles.
        First sample sits at phase 0.
        """
        steps = frequency.double() / sample_rate
        return torch.cumsum(steps, dim=-1) - steps

    @staticmethod
    def square(cycles: torch.Tensor, duty) -> torch.Tensor:
        """
        Square wave at +/-0.5 (sfxr level). duty is the high fraction of each cycle,
        scalar or per-sample tensor.
        """
        frac = cycles - torch.floor(cycles)
        return torch.where(frac < duty, 0.5, -0.5).float()

    @staticmethod
    def saw(cycles: torch.Tensor) -> torch.Tensor:
        """Falling sawtooth from +1 to -1 over each cycle."""
        frac = cycles - torch.floor(cycles)
        return (1.0 - 2.0 * frac).float()

    @staticmethod
    def sine(cycles: torch.Tensor) -> torch.Tensor:
        return torch.sin(2 * np.pi * cycles).float()

    @staticmethod
    def noise(cycles: torch.Tensor, generator: torch.Generator, steps_per_cycle: int = 32) -> torch.Tensor:
        """
        Sample-and-hold noise: a fresh uniform value in [-1, 1) every 1/steps_per_cycle of a
        cycle, so pitch still colours the noise.
        """
        idx = torch.floor(cycles * steps_per_cycle).long()
        if idx.numel() == 0:
            return torch.zeros(0)
        table = torch.rand(int(idx[-1].item()) + 1, generator=generator) * 2.0 - 1.0
        return table[idx]
