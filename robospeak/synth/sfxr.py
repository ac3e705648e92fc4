"""
Default synthesis capability: an sfxr-style one-shot synthesizer.

Every control of the parameter schema is honoured, computed as whole-buffer tensors
instead of a per-sample state machine:
- period slide / acceleration, frequency-limit cut-off, vibrato, one arpeggio step and
  repeat (periodic reset of the frequency and duty state),
- square (duty + duty sweep), sawtooth, sine and sample-and-hold noise oscillators,
- attack / sustain(+punch) / decay envelope,
- phaser delay, resonant low-pass and high-pass (with cutoff sweeps),
- output gain exp(sound_vol) - 1, clamped to [-1, 1].

Time constants are defined at the 44.1 kHz reference rate; other rates are resampled.
"""
import hashlib
import json
import logging
import math
from typing import Dict

import numpy as np
import torch
import torchaudio.functional as AF

from robospeak.core.errors import SynthesisFailure
from robospeak.dsp.envelopes import SfxrEnvelope
from robospeak.dsp.filters import Effects, Filter
from robospeak.dsp.oscillators import Oscillator
from robospeak.params.schema import PARAM_SCHEMA, WaveType, with_defaults

logger = logging.getLogger(__name__)

REFERENCE_RATE = 44100
# Periods are counted in 8x supersampled steps.
SUPERSAMPLING = 8
MIN_PERIOD = 8.0


def _period_limit(speed: float) -> int:
    """Samples until an arpeggio step / repeat reset; 0 disables it."""
    return int((1.0 - speed) ** 2 * 20000 + 32)


def _noise_seed(params: Dict[str, float]) -> int:
    """Stable seed from the parameter set: the same instance always renders the same noise."""
    blob = json.dumps(sorted((k, float(v)) for k, v in params.items())).encode("utf-8")
    return int(hashlib.sha256(blob).hexdigest()[:16], 16)


class SfxrSynth:
    def __init__(self, sample_rate: int = REFERENCE_RATE):
        self.sample_rate = sample_rate

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @staticmethod
    def _validate(params: Dict[str, float]) -> Dict[str, float]:
        unknown = [k for k in params if k not in PARAM_SCHEMA]
        if unknown:
            logger.warning("Ignoring unknown synth params: %s", unknown)
        resolved = with_defaults({k: v for k, v in params.items() if k in PARAM_SCHEMA})
        for name, value in resolved.items():
            try:
                value = float(value)
            except (TypeError, ValueError) as exc:
                raise SynthesisFailure(f"{name} is not numeric: {value!r}") from exc
            if not math.isfinite(value):
                raise SynthesisFailure(f"{name} is not finite: {value!r}")
            resolved[name] = value
        wave = resolved["wave_type"]
        if wave != int(wave) or int(wave) not in WaveType._value2member_map_:
            raise SynthesisFailure(f"wave_type must be one of 0-3, got {wave!r}")
        resolved["wave_type"] = int(wave)
        return resolved

    # ------------------------------------------------------------------
    # Frequency / duty state
    # ------------------------------------------------------------------

    @staticmethod
    def _cycle_index(n: int, p: Dict[str, float]) -> torch.Tensor:
        """Samples since the last repeat reset."""
        idx = torch.arange(n)
        if p["p_repeat_speed"] != 0.0:
            idx = idx % _period_limit(p["p_repeat_speed"])
        return idx

    @staticmethod
    def _period(n: int, p: Dict[str, float], m: torch.Tensor) -> torch.Tensor:
        """Oscillator period (supersampled steps) per sample, before vibrato."""
        period0 = 100.0 / (p["p_base_freq"] ** 2 + 0.001)
        max_period = 100.0 / (p["p_freq_limit"] ** 2 + 0.001)
        slide = 1.0 - p["p_freq_ramp"] ** 3 * 0.01
        dslide = -(p["p_freq_dramp"] ** 3) * 0.000001

        # slide_k = slide + k * dslide applied at every step k = 1..m+1
        k = torch.arange(1, n + 1, dtype=torch.float64)
        slides = torch.clamp(slide + k * dslide, min=1e-6)
        log_period = math.log(period0) + torch.cumsum(torch.log(slides), dim=0)
        period = torch.exp(log_period[m])

        if p["p_arp_speed"] != 1.0 and p["p_arp_mod"] != 0.0:
            arp = p["p_arp_mod"]
            mult = 1.0 - arp ** 2 * 0.9 if arp >= 0 else 1.0 + arp ** 2 * 10.0
            period = torch.where(m >= _period_limit(p["p_arp_speed"]), period * mult, period)

        return torch.minimum(period, torch.tensor(max_period, dtype=torch.float64))

    @staticmethod
    def _cutoff_index(period: torch.Tensor, p: Dict[str, float]) -> int:
        """With a frequency limit, the sound ends when the period first exceeds it."""
        if p["p_freq_limit"] <= 0.0:
            return period.shape[-1]
        max_period = 100.0 / (p["p_freq_limit"] ** 2 + 0.001)
        hits = torch.nonzero(period >= max_period * (1.0 - 1e-9))
        return int(hits[0].item()) if hits.numel() else period.shape[-1]

    # ------------------------------------------------------------------
    # Render
    # ------------------------------------------------------------------

    def synthesize(self, params: Dict[str, float]) -> torch.Tensor:
        """Render one baked parameter set to float samples in [-1, 1]."""
        p = self._validate(params)
        sr = REFERENCE_RATE

        envelope = SfxrEnvelope(p["p_env_attack"], p["p_env_sustain"], p["p_env_decay"], p["p_env_punch"], sr)
        n = envelope.num_samples
        env = envelope.render()[:n]

        m = self._cycle_index(n, p)
        period = self._period(n, p, m)
        end = self._cutoff_index(period, p)

        # Vibrato
        vib_speed = p["p_vib_speed"] ** 2 * 0.01
        vib_amp = p["p_vib_strength"] * 0.5
        vib_phase = torch.arange(1, n + 1, dtype=torch.float64) * vib_speed
        rperiod = torch.clamp(period * (1.0 + torch.sin(vib_phase) * vib_amp), min=MIN_PERIOD)

        frequency = SUPERSAMPLING * sr / rperiod
        cycles = Oscillator.cycles(frequency, sr)

        wave = WaveType(p["wave_type"])
        if wave is WaveType.SQUARE:
            duty0 = 0.5 - p["p_duty"] * 0.5
            duty_slide = -p["p_duty_ramp"] * 0.00005
            duty = torch.clamp(duty0 + (m + 1).double() * duty_slide, 0.0, 0.5)
            signal = Oscillator.square(cycles, duty)
        elif wave is WaveType.SAWTOOTH:
            signal = Oscillator.saw(cycles)
        elif wave is WaveType.SINE:
            signal = Oscillator.sine(cycles)
        else:
            generator = torch.Generator().manual_seed(_noise_seed(p))
            signal = Oscillator.noise(cycles, generator)

        signal = self._filter(signal.double(), p, sr)
        signal = self._phase(signal, p, n)
        signal = signal.float() * env * (math.exp(p["sound_vol"]) - 1.0)
        signal = Effects.hard_clip(signal[:end])

        if self.sample_rate != sr and signal.numel() > 0:
            signal = AF.resample(signal, sr, self.sample_rate).clamp(-1.0, 1.0)

        if signal.numel() == 0 or not torch.isfinite(signal).all():
            logger.warning("Synthesis produced an invalid buffer for params %s", p)
            raise SynthesisFailure("synthesis produced an empty or non-finite buffer")
        return signal

    @staticmethod
    def _filter(signal: torch.Tensor, p: Dict[str, float], sr: int) -> torch.Tensor:
        n = signal.shape[-1]
        scale = SUPERSAMPLING * sr / (2 * np.pi)

        if p["p_lpf_freq"] < 1.0:
            w0 = p["p_lpf_freq"] ** 3 * 0.1
            w1 = min(w0 * (1.0 + p["p_lpf_ramp"] * 0.0001) ** n, 0.1)
            damping = min(5.0 / (1.0 + p["p_lpf_resonance"] ** 2 * 20.0) * (0.01 + w0), 0.8)
            q = float(np.clip(math.sqrt(w0) / damping, 0.3, 10.0)) if w0 > 0 else 0.707
            start_hz, end_hz = math.sqrt(w0) * scale, math.sqrt(w1) * scale
            if min(start_hz, end_hz) < 0.45 * sr:
                signal = Filter.swept(signal, sr, "lowpass", max(start_hz, 1.0), max(end_hz, 1.0), q)

        if p["p_hpf_freq"] > 0.0:
            h0 = p["p_hpf_freq"] ** 2 * 0.1
            h1 = min(h0 * (1.0 + p["p_hpf_ramp"] * 0.0003) ** n, 0.1)
            signal = Filter.swept(signal, sr, "highpass", max(h0 * scale, 1.0), max(h1 * scale, 1.0))

        return signal

    @staticmethod
    def _phase(signal: torch.Tensor, p: Dict[str, float], n: int) -> torch.Tensor:
        offset = p["p_pha_offset"] ** 2 * 1020.0 * (1 if p["p_pha_offset"] >= 0 else -1)
        ramp = p["p_pha_ramp"] ** 2 * (1 if p["p_pha_ramp"] >= 0 else -1)
        phase = offset + torch.arange(1, n + 1, dtype=torch.float64) * ramp
        delay = torch.clamp(torch.abs(phase), max=1023) / SUPERSAMPLING
        return Effects.phaser(signal, torch.round(delay))
