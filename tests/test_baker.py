"""
Parameter and sequence baking: range adherence, wave classes, wait band, identity sharing
within one call and independence across calls.
Run from project root: python -m pytest tests/test_baker.py -v
"""
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest

from robospeak.core.context import GenerationContext
from robospeak.core.errors import UnknownSymbol
from robospeak.core.types import BakedInstance, BakedWord, Symbol, WaitInstance, Word
from robospeak.params import (
    PARAM_SCHEMA,
    SYMBOL_RANGES,
    ParameterRange,
    RangeDefinition,
    get_symbol_range,
    validate_ranges,
)
from robospeak.params.bake import bake_symbol
from robospeak.params.sequence import bake_sequence
from robospeak import pipeline


def _words(text):
    """Parse "z1 z1 _2" style strings into Words."""
    return [Word(Symbol.from_code(tok[0]), tok[1:]) for tok in text.split()]


# -----------------------------------------------------------------------------
# Range table
# -----------------------------------------------------------------------------

def test_every_sound_symbol_has_ranges():
    for symbol in Symbol:
        if symbol.is_silence:
            assert symbol not in SYMBOL_RANGES
        else:
            assert symbol in SYMBOL_RANGES, f"{symbol!r} missing"


def test_ranges_within_schema_bounds():
    validate_ranges(SYMBOL_RANGES)
    for definition in SYMBOL_RANGES.values():
        for name, value in definition.params.items():
            entry = PARAM_SCHEMA[name]
            lo, hi = (value.min, value.max) if isinstance(value, ParameterRange) else (value, value)
            assert entry["min"] <= lo <= hi <= entry["max"], f"{definition.name}.{name}"


def test_get_symbol_range():
    assert get_symbol_range(Symbol.BUZZ) is SYMBOL_RANGES[Symbol.BUZZ]
    assert get_symbol_range(Symbol.SILENCE) is None
    assert get_symbol_range(Symbol.BUZZ, ranges={}) is None


def test_parameter_range_rejects_inverted():
    with pytest.raises(ValueError):
        ParameterRange(1.0, 0.0)


# -----------------------------------------------------------------------------
# bake_symbol
# -----------------------------------------------------------------------------

@pytest.mark.parametrize("symbol", [s for s in Symbol if not s.is_silence])
def test_baked_values_inside_ranges(symbol):
    definition = SYMBOL_RANGES[symbol]
    ctx = GenerationContext(seed=17)
    for _ in range(50):
        instance = bake_symbol(symbol, ctx)
        assert isinstance(instance, BakedInstance)
        assert instance.symbol is symbol
        assert instance.params["wave_type"] in definition.wave_types
        for name, value in definition.params.items():
            if name == "wave_type":
                continue
            got = instance.params[name]
            if isinstance(value, ParameterRange):
                assert value.contains(got), f"{symbol.value}.{name}={got} outside {value}"
            else:
                assert got == value


def test_bake_silence_inside_wait_band():
    ctx = GenerationContext(seed=4)
    for _ in range(200):
        instance = bake_symbol(Symbol.SILENCE, ctx)
        assert isinstance(instance, WaitInstance)
        assert 50.0 <= instance.duration_ms < 300.0


def test_bake_silence_custom_band():
    instance = bake_symbol(Symbol.SILENCE, GenerationContext(seed=4), wait_band=(10.0, 10.0))
    assert instance.duration_ms == 10.0


def test_bake_unknown_symbol():
    ranges = {Symbol.BUZZ: SYMBOL_RANGES[Symbol.BUZZ]}
    with pytest.raises(UnknownSymbol) as info:
        bake_symbol(Symbol.LOW_BEEP, GenerationContext(), ranges=ranges)
    assert info.value.symbol is Symbol.LOW_BEEP
    # silence is never unknown
    assert isinstance(bake_symbol(Symbol.SILENCE, GenerationContext(), ranges=ranges), WaitInstance)


def test_bake_without_wave_candidates_keeps_fixed_wave():
    definition = RangeDefinition(Symbol.BUZZ, "Fixed", {"wave_type": 3, "sound_vol": ParameterRange(0.2, 0.3)})
    instance = bake_symbol(Symbol.BUZZ, GenerationContext(1), ranges={Symbol.BUZZ: definition})
    assert instance.params["wave_type"] == 3
    assert 0.2 <= instance.params["sound_vol"] < 0.3


def test_bake_deterministic_for_seed():
    a = bake_symbol(Symbol.HIGH_BEEP, GenerationContext(5))
    b = bake_symbol(Symbol.HIGH_BEEP, GenerationContext(5))
    assert a.params == b.params


# -----------------------------------------------------------------------------
# bake_sequence
# -----------------------------------------------------------------------------

def test_same_identity_shares_instance():
    baked = bake_sequence(_words("z1 z1 _2 z1"), GenerationContext(0))
    assert [str(w) for w in baked] == ["z1", "z1", "_2", "z1"]
    assert baked[0].instance is baked[1].instance
    assert baked[0].instance is baked[3].instance
    assert isinstance(baked[2].instance, WaitInstance)


def test_distinct_identities_draw_independently():
    baked = bake_sequence(_words("z1 z2 z3"), GenerationContext(0))
    instances = [w.instance for w in baked]
    assert len({id(i) for i in instances}) == 3
    assert instances[0].params != instances[1].params
    assert instances[1].params != instances[2].params


def test_same_identity_different_symbols_not_shared():
    baked = bake_sequence(_words("z1 b1"), GenerationContext(0))
    assert baked[0].instance is not baked[1].instance
    assert baked[1].instance.symbol is Symbol.LOW_BEEP


def test_repeated_silence_identity_shares_wait():
    baked = bake_sequence(_words("b1 _1 b1 _1 b1"), GenerationContext(0))
    assert baked[1].instance is baked[3].instance


def test_no_cross_call_caching():
    words = _words("z1 z1 B2")
    ctx = GenerationContext(0)
    first = bake_sequence(words, ctx)
    second = bake_sequence(words, ctx)
    assert first[0].instance is not second[0].instance
    assert first[0].instance.params != second[0].instance.params
    assert second[0].instance is second[1].instance


def test_empty_sequence():
    assert bake_sequence([], GenerationContext(0)) == []


def test_unknown_symbol_propagates_without_partial_result():
    calls = []

    def baker(symbol, ctx):
        calls.append(symbol)
        if symbol is Symbol.WARBLE:
            raise UnknownSymbol(symbol)
        return bake_symbol(symbol, ctx)

    with pytest.raises(UnknownSymbol):
        bake_sequence(_words("z1 w2 z1"), GenerationContext(0), baker=baker)
    assert calls == [Symbol.BUZZ, Symbol.WARBLE]


def test_pipeline_bake_uses_settings_wait_band():
    from robospeak.core.config import Settings

    settings = Settings(wait_min_ms=20.0, wait_max_ms=20.0)
    baked = pipeline.bake_sequence(_words("b1 _2 b1"), GenerationContext(3), settings)
    assert baked[1].instance.duration_ms == 20.0


def test_baked_word_dict_round_trip():
    baked = bake_sequence(_words("A1 _2"), GenerationContext(9))
    for word in baked:
        restored = BakedWord.from_dict(word.to_dict())
        assert restored.key == word.key
        assert restored.instance.to_dict() == word.instance.to_dict()
