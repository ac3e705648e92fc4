"""
Per-symbol parameter ranges.
Each sound symbol declares candidate waveform classes and, per synth parameter, either a
fixed value or a ParameterRange sampled when the symbol is baked. Silence has no entry;
the baker turns it into a Wait instance.
"""
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple, Union

from robospeak.core.types import Symbol
from robospeak.params.schema import PARAM_SCHEMA, WaveType


@dataclass(frozen=True)
class ParameterRange:
    """Continuous band sampled uniformly on [min, max)."""
    min: float
    max: float

    def __post_init__(self):
        if self.max < self.min:
            raise ValueError(f"range max {self.max} < min {self.min}")

    def contains(self, value: float) -> bool:
        if self.min == self.max:
            return value == self.min
        return self.min <= value < self.max

    def to_dict(self) -> Dict[str, float]:
        return {"min": self.min, "max": self.max}


ParamValue = Union[float, ParameterRange]


@dataclass(frozen=True)
class RangeDefinition:
    symbol: Symbol
    name: str
    params: Mapping[str, ParamValue] = field(hash=False)
    wave_types: Optional[Tuple[int, ...]] = None

    def to_dict(self) -> dict:
        return {
            "symbol": self.symbol.value,
            "name": self.name,
            "wave_types": list(self.wave_types) if self.wave_types else None,
            "params": {
                k: (v.to_dict() if isinstance(v, ParameterRange) else v)
                for k, v in self.params.items()
            },
        }


R = ParameterRange

SQUARE, SAW, SINE, NOISE = WaveType.SQUARE, WaveType.SAWTOOTH, WaveType.SINE, WaveType.NOISE


def _sweep(freq_ramp: ParameterRange) -> Dict[str, ParamValue]:
    return {
        "wave_type": 0,  # replaced by the wave_types draw
        # Envelope: short to long
        "p_env_attack": R(0.05, 0.1),
        "p_env_sustain": R(0.24, 0.48),
        "p_env_decay": R(0.05, 0.1),
        "p_env_punch": 0.0,
        # Frequency: wide start band, controlled sweep (a third to a fifth)
        "p_base_freq": R(0.2, 0.9),
        "p_freq_limit": 0.0,
        "p_freq_ramp": freq_ramp,
        "p_freq_dramp": R(-0.1, 0.1),
        "p_vib_strength": R(0.0, 0.02),
        "p_vib_speed": R(0.0, 0.04),
        "p_arp_mod": 0.0,
        "p_arp_speed": 0.0,
        "p_duty": R(0.45, 0.55),
        "p_duty_ramp": R(-0.01, 0.01),
        "p_repeat_speed": 0.0,
        "p_pha_offset": R(0.0, 0.002),
        "p_pha_ramp": 0.0,
        "p_lpf_freq": R(0.95, 1.0),
        "p_lpf_ramp": 0.0,
        "p_lpf_resonance": R(0.0, 0.05),
        "p_hpf_freq": R(0.0, 0.01),
        "p_hpf_ramp": 0.0,
        "sound_vol": R(0.45, 0.55),
    }


def _arpeggio(base_freq: ParameterRange, freq_ramp: ParameterRange, arp_mod: ParameterRange) -> Dict[str, ParamValue]:
    return {
        "wave_type": 0,
        # Envelope: long enough for the step to be heard
        "p_env_attack": R(0.05, 0.1),
        "p_env_sustain": R(0.3, 0.5),
        "p_env_decay": R(0.1, 0.2),
        "p_env_punch": R(0.0, 0.1),
        "p_base_freq": base_freq,
        "p_freq_limit": 0.0,
        "p_freq_ramp": freq_ramp,  # half as drastic as a sweep
        "p_freq_dramp": R(-0.05, 0.05),
        "p_vib_strength": R(0.0, 0.02),
        "p_vib_speed": R(0.0, 0.04),
        # Two-note arpeggio
        "p_arp_mod": arp_mod,
        "p_arp_speed": R(0.3, 0.7),
        "p_duty": R(0.45, 0.55),
        "p_duty_ramp": R(-0.01, 0.01),
        "p_repeat_speed": 0.0,
        "p_pha_offset": R(0.0, 0.002),
        "p_pha_ramp": 0.0,
        "p_lpf_freq": R(0.95, 1.0),
        "p_lpf_ramp": 0.0,
        "p_lpf_resonance": R(0.0, 0.05),
        "p_hpf_freq": R(0.0, 0.01),
        "p_hpf_ramp": 0.0,
        "sound_vol": R(0.45, 0.55),
    }


def _beep(
    base_freq: ParameterRange,
    lpf_freq: ParameterRange,
    lpf_resonance: ParameterRange,
    hpf_freq: ParameterRange,
) -> Dict[str, ParamValue]:
    return {
        "wave_type": 0,
        # Envelope: quick decay, some punch
        "p_env_attack": R(0.0, 0.03),
        "p_env_sustain": R(0.15, 0.3),
        "p_env_decay": R(0.1, 0.2),
        "p_env_punch": R(0.1, 0.2),
        "p_base_freq": base_freq,
        "p_freq_limit": 0.0,
        "p_freq_ramp": R(-0.02, 0.04),
        "p_freq_dramp": R(-0.02, 0.02),
        "p_vib_strength": R(0.0, 0.03),
        "p_vib_speed": R(0.0, 0.06),
        "p_arp_mod": R(-0.1, 0.1),
        "p_arp_speed": R(0.4, 0.6),
        "p_duty": R(0.4, 0.6),
        "p_duty_ramp": R(-0.02, 0.02),
        "p_repeat_speed": 0.0,
        "p_pha_offset": R(0.0, 0.003),
        "p_pha_ramp": R(-0.001, 0.001),
        "p_lpf_freq": lpf_freq,
        "p_lpf_ramp": 0.0,
        "p_lpf_resonance": lpf_resonance,
        "p_hpf_freq": hpf_freq,
        "p_hpf_ramp": 0.0,
        "sound_vol": R(0.45, 0.55),
    }


SYMBOL_RANGES: Dict[Symbol, RangeDefinition] = {
    Symbol.UP_SWEEP: RangeDefinition(
        Symbol.UP_SWEEP, "Upward Sweep", _sweep(R(0.06, 0.2)), (SAW, SINE)
    ),
    Symbol.DOWN_SWEEP: RangeDefinition(
        Symbol.DOWN_SWEEP, "Downward Sweep", _sweep(R(-0.2, -0.06)), (SAW, SINE)
    ),
    Symbol.UP_ARPEGGIO: RangeDefinition(
        Symbol.UP_ARPEGGIO,
        "Arpeggio Up",
        _arpeggio(R(0.25, 0.6), R(0.03, 0.1), R(0.2, 0.6)),
        (SQUARE, SAW, SINE),
    ),
    Symbol.DOWN_ARPEGGIO: RangeDefinition(
        Symbol.DOWN_ARPEGGIO,
        "Arpeggio Down",
        _arpeggio(R(0.3, 0.7), R(-0.1, -0.03), R(-0.6, -0.2)),
        (SQUARE, SAW, SINE),
    ),
    Symbol.HIGH_BEEP: RangeDefinition(
        Symbol.HIGH_BEEP,
        "High Beep",
        _beep(R(0.6, 0.85), R(0.9, 1.0), R(0.0, 0.1), R(0.0, 0.02)),
        (SQUARE, SAW, SINE),
    ),
    Symbol.LOW_BEEP: RangeDefinition(
        Symbol.LOW_BEEP,
        "Low Beep",
        # Heavier low-pass and a touch more resonance for the low register
        _beep(R(0.15, 0.35), R(0.7, 0.9), R(0.0, 0.15), R(0.0, 0.01)),
        (SQUARE, SAW, SINE),
    ),
    Symbol.WARBLE: RangeDefinition(
        Symbol.WARBLE,
        "Warble",
        {
            "wave_type": 0,
            "p_env_attack": R(0.0, 0.05),
            "p_env_sustain": R(0.2, 0.4),
            "p_env_decay": R(0.1, 0.2),
            "p_env_punch": R(0.05, 0.15),
            "p_base_freq": R(0.2, 0.5),
            "p_freq_limit": 0.0,
            "p_freq_ramp": R(-0.01, 0.01),
            "p_freq_dramp": R(-0.01, 0.01),
            # Strong vibrato is the warble
            "p_vib_strength": R(0.15, 0.3),
            "p_vib_speed": R(0.15, 0.35),
            "p_arp_mod": 0.0,
            "p_arp_speed": 0.0,
            "p_duty": R(0.3, 0.5),
            "p_duty_ramp": R(-0.03, 0.03),
            "p_repeat_speed": 0.0,
            "p_pha_offset": R(0.002, 0.006),
            "p_pha_ramp": R(-0.002, 0.002),
            "p_lpf_freq": R(0.7, 0.95),
            "p_lpf_ramp": 0.0,
            "p_lpf_resonance": R(0.05, 0.15),
            "p_hpf_freq": R(0.0, 0.02),
            "p_hpf_ramp": 0.0,
            "sound_vol": R(0.45, 0.55),
        },
        (SQUARE, SAW, SINE),
    ),
    Symbol.BUZZ: RangeDefinition(
        Symbol.BUZZ,
        "Buzz",
        {
            "wave_type": 0,
            "p_env_attack": R(0.0, 0.02),
            "p_env_sustain": R(0.15, 0.35),
            "p_env_decay": R(0.05, 0.1),
            "p_env_punch": R(0.1, 0.2),
            "p_base_freq": R(0.1, 0.3),
            "p_freq_limit": 0.0,
            "p_freq_ramp": R(-0.02, 0.02),
            "p_freq_dramp": R(-0.01, 0.01),
            "p_vib_strength": R(0.0, 0.02),
            "p_vib_speed": R(0.0, 0.05),
            "p_arp_mod": 0.0,
            "p_arp_speed": 0.0,
            # Thin, moving duty for harshness
            "p_duty": R(0.15, 0.35),
            "p_duty_ramp": R(-0.1, 0.1),
            # Fast repeat gives the stutter
            "p_repeat_speed": R(0.4, 0.7),
            "p_pha_offset": R(0.0, 0.003),
            "p_pha_ramp": R(-0.001, 0.001),
            "p_lpf_freq": R(0.4, 0.7),
            "p_lpf_ramp": 0.0,
            "p_lpf_resonance": R(0.15, 0.3),
            "p_hpf_freq": R(0.02, 0.05),
            "p_hpf_ramp": 0.0,
            "sound_vol": R(0.45, 0.55),
        },
        (SQUARE, SAW, NOISE),
    ),
}


def get_symbol_range(symbol: Symbol, ranges: Mapping[Symbol, RangeDefinition] = SYMBOL_RANGES) -> Optional[RangeDefinition]:
    """Range definition for a symbol, or None for silence and unmapped symbols."""
    return ranges.get(symbol)


def validate_ranges(ranges: Mapping[Symbol, RangeDefinition]) -> None:
    """Raise ValueError if a definition names an unknown parameter or leaves the schema bounds."""
    for symbol, definition in ranges.items():
        if definition.symbol is not symbol:
            raise ValueError(f"definition for {symbol!r} is keyed as {definition.symbol!r}")
        if definition.wave_types is not None:
            for wt in definition.wave_types:
                if int(wt) not in WaveType._value2member_map_:
                    raise ValueError(f"{symbol.value}: unknown wave type {wt}")
        for name, value in definition.params.items():
            entry = PARAM_SCHEMA.get(name)
            if entry is None:
                raise ValueError(f"{symbol.value}: unknown parameter {name!r}")
            lo, hi = (value.min, value.max) if isinstance(value, ParameterRange) else (value, value)
            if lo < entry["min"] or hi > entry["max"]:
                raise ValueError(
                    f"{symbol.value}: {name} [{lo}, {hi}] outside schema bounds [{entry['min']}, {entry['max']}]"
                )


validate_ranges(SYMBOL_RANGES)
