"""
Synthesizer parameter schema.
Every baked parameter set handed to a synthesis capability uses these names. Values are
normalized sfxr-style controls; bounds are the legal range, defaults fill gaps.
"""
from enum import IntEnum
from typing import Any, Dict, Literal

ParamType = Literal["float", "int"]
ParamGroup = Literal["wave", "envelope", "frequency", "vibrato", "arpeggio", "duty", "repeat", "phaser", "filter", "output"]

ParamSchemaEntry = Dict[str, Any]


class WaveType(IntEnum):
    SQUARE = 0
    SAWTOOTH = 1
    SINE = 2
    NOISE = 3


def _make_param(
    param_type: ParamType,
    default: Any,
    min_val: float,
    max_val: float,
    group: ParamGroup,
    description: str,
) -> ParamSchemaEntry:
    """Helper to create a schema entry."""
    return {
        "type": param_type,
        "default": default,
        "min": min_val,
        "max": max_val,
        "group": group,
        "description": description,
    }


# -----------------------------------------------------------------------------
# PARAM_SCHEMA: type, default, min, max, group, description
# -----------------------------------------------------------------------------

PARAM_SCHEMA: Dict[str, ParamSchemaEntry] = {
    "wave_type": _make_param(
        "int", int(WaveType.SQUARE), 0, 3, "wave", "Waveform class (0 square, 1 saw, 2 sine, 3 noise)"
    ),
    # Envelope
    "p_env_attack": _make_param("float", 0.0, 0.0, 1.0, "envelope", "Attack length"),
    "p_env_sustain": _make_param("float", 0.3, 0.0, 1.0, "envelope", "Sustain length"),
    "p_env_punch": _make_param("float", 0.0, 0.0, 1.0, "envelope", "Sustain punch (extra level at sustain start)"),
    "p_env_decay": _make_param("float", 0.4, 0.0, 1.0, "envelope", "Decay length"),
    # Frequency
    "p_base_freq": _make_param("float", 0.3, 0.0, 1.0, "frequency", "Start frequency"),
    "p_freq_limit": _make_param("float", 0.0, 0.0, 1.0, "frequency", "Minimum frequency cut-off (sound stops below)"),
    "p_freq_ramp": _make_param("float", 0.0, -1.0, 1.0, "frequency", "Frequency slide"),
    "p_freq_dramp": _make_param("float", 0.0, -1.0, 1.0, "frequency", "Frequency slide acceleration"),
    # Vibrato
    "p_vib_strength": _make_param("float", 0.0, 0.0, 1.0, "vibrato", "Vibrato depth"),
    "p_vib_speed": _make_param("float", 0.0, 0.0, 1.0, "vibrato", "Vibrato rate"),
    # Arpeggio
    "p_arp_mod": _make_param("float", 0.0, -1.0, 1.0, "arpeggio", "Arpeggio frequency jump (negative = down)"),
    "p_arp_speed": _make_param("float", 0.0, 0.0, 1.0, "arpeggio", "Arpeggio step time"),
    # Duty
    "p_duty": _make_param("float", 0.0, 0.0, 1.0, "duty", "Square wave duty cycle"),
    "p_duty_ramp": _make_param("float", 0.0, -1.0, 1.0, "duty", "Duty cycle sweep"),
    # Repeat
    "p_repeat_speed": _make_param("float", 0.0, 0.0, 1.0, "repeat", "Frequency state reset rate"),
    # Phaser
    "p_pha_offset": _make_param("float", 0.0, -1.0, 1.0, "phaser", "Phaser delay offset"),
    "p_pha_ramp": _make_param("float", 0.0, -1.0, 1.0, "phaser", "Phaser delay sweep"),
    # Filters
    "p_lpf_freq": _make_param("float", 1.0, 0.0, 1.0, "filter", "Low-pass cutoff (1.0 = bypass)"),
    "p_lpf_ramp": _make_param("float", 0.0, -1.0, 1.0, "filter", "Low-pass cutoff sweep"),
    "p_lpf_resonance": _make_param("float", 0.0, 0.0, 1.0, "filter", "Low-pass resonance"),
    "p_hpf_freq": _make_param("float", 0.0, 0.0, 1.0, "filter", "High-pass cutoff (0.0 = bypass)"),
    "p_hpf_ramp": _make_param("float", 0.0, -1.0, 1.0, "filter", "High-pass cutoff sweep"),
    # Output
    "sound_vol": _make_param("float", 0.5, 0.0, 1.0, "output", "Output gain"),
}

PARAM_DEFAULTS: Dict[str, float] = {name: entry["default"] for name, entry in PARAM_SCHEMA.items()}


def with_defaults(params: Dict[str, float]) -> Dict[str, float]:
    """Return a full parameter set: schema defaults overridden by params. Does not mutate input."""
    merged = dict(PARAM_DEFAULTS)
    merged.update(params)
    return merged
