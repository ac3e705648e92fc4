"""
Grammar invariants across many seeds: silence placement, target length, identity pools,
run consistency, context-dependent weights and determinism. Covers both grammars.
Run from project root: python -m pytest tests/test_grammar.py -v
"""
import sys
import os
from collections import defaultdict

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest

from robospeak.core.context import GenerationContext
from robospeak.core.errors import GrammarError
from robospeak.core.types import Symbol, Word
from robospeak.grammar import GrammarEngine, RambleGrammar, grammar_for
from robospeak.grammar.expressions import (
    DEFAULT_CATALOG,
    PITCH_LADDER,
    Expression,
    LadderRun,
    Motif,
    Pyramid,
    Repeat,
    Wait,
)
from robospeak.grammar.identity import IdentityRegistry
from robospeak.grammar.state import GrammarState
from robospeak.core.config import Settings

SEEDS = range(300)


def _state(target=8, words=(), cap=3, seed=0):
    ctx = GenerationContext(seed)
    state = GrammarState(target, IdentityRegistry(ctx, cap), ctx)
    for symbol in words:
        state.emit(symbol, "1")
    return state


def _assert_silence_rules(words, target, name):
    for i, word in enumerate(words):
        if not word.symbol.is_silence:
            continue
        assert i != 0, f"{name}: silence at position 0"
        assert not words[i - 1].symbol.is_silence, f"{name}: consecutive silences at {i}"
        assert i < target - 1, f"{name}: silence at {i} with target {target}"
    assert words and not words[-1].symbol.is_silence, f"{name}: sequence ends in silence"


def _assert_pool_cap(words, cap, name):
    distinct = defaultdict(set)
    for word in words:
        distinct[word.symbol].add(word.identity)
    for symbol, identities in distinct.items():
        assert len(identities) <= cap, f"{name}: {symbol} has {len(identities)} identities"


# -----------------------------------------------------------------------------
# Subphrase engine invariants
# -----------------------------------------------------------------------------

def test_engine_invariants_across_seeds():
    engine = GrammarEngine()
    for seed in SEEDS:
        state = engine.run(GenerationContext(seed))
        words = state.words
        name = f"seed {seed}"
        assert 5 <= state.target <= 11
        assert len(words) >= state.target, f"{name}: {len(words)} < target {state.target}"
        assert all(isinstance(w, Word) for w in words)
        _assert_silence_rules(words, state.target, name)
        _assert_pool_cap(words, 3, name)


def test_engine_pool_cap_with_long_sequences():
    engine = GrammarEngine(length_range=(60, 80), pool_cap=3)
    for seed in range(30):
        words = engine.generate(GenerationContext(seed))
        _assert_pool_cap(words, 3, f"seed {seed}")


def test_engine_identities_come_from_context_counter():
    ctx = GenerationContext(11)
    words = GrammarEngine().generate(ctx)
    issued = {str(i) for i in range(1, ctx.identities_issued + 1)}
    assert {w.identity for w in words} <= issued


def test_engine_deterministic_for_seed():
    engine = GrammarEngine()
    for seed in (0, 1, 12345):
        a = engine.generate(GenerationContext(seed))
        b = engine.generate(GenerationContext(seed))
        assert a == b


def test_engine_length_range_validation():
    with pytest.raises(ValueError):
        GrammarEngine(length_range=(0, 3))
    with pytest.raises(ValueError):
        GrammarEngine(length_range=(6, 5))
    with pytest.raises(ValueError):
        GrammarEngine(catalog=())


def test_engine_raises_when_expression_emits_nothing():
    class Mute(Expression):
        name = "mute"

        def weight(self, state):
            return 1.0

        def generate(self, state):
            pass

    with pytest.raises(GrammarError):
        GrammarEngine(catalog=(Mute(),)).generate(GenerationContext(0))


def test_engine_single_repeat_catalog_terminates():
    engine = GrammarEngine(catalog=(Repeat(),), length_range=(5, 5))
    words = engine.generate(GenerationContext(3))
    assert len(words) >= 5
    assert not any(w.symbol.is_silence for w in words)


# -----------------------------------------------------------------------------
# Expressions
# -----------------------------------------------------------------------------

def test_catalog_always_has_positive_weight():
    engine = GrammarEngine()
    for words in ((), (Symbol.BUZZ,), (Symbol.BUZZ, Symbol.SILENCE)):
        state = _state(target=len(words) + 1, words=words)
        assert sum(engine.weights(state)) > 0


def test_wait_weight_rules():
    wait = Wait()
    assert wait.weight(_state(target=8)) == 0.0, "no silence at position 0"
    assert wait.weight(_state(target=8, words=[Symbol.BUZZ])) > 0
    assert wait.weight(_state(target=8, words=[Symbol.BUZZ, Symbol.SILENCE])) == 0.0
    # position 6 of target 8 is target - 2: still allowed; position 7 is not
    assert wait.weight(_state(target=8, words=[Symbol.BUZZ] * 6)) > 0
    assert wait.weight(_state(target=8, words=[Symbol.BUZZ] * 7)) == 0.0


def test_pyramid_needs_room():
    pyramid = Pyramid()
    assert pyramid.weight(_state(target=8, words=[Symbol.BUZZ] * 5)) > 0
    assert pyramid.weight(_state(target=8, words=[Symbol.BUZZ] * 6)) == 0.0


def test_pyramid_descent_reuses_identities():
    for seed in range(20):
        state = _state(target=12, seed=seed)
        Pyramid().generate(state)
        by_symbol = defaultdict(set)
        for word in state.words:
            by_symbol[word.symbol].add(word.identity)
        assert all(len(ids) == 1 for ids in by_symbol.values())
        symbols = [w.symbol for w in state.words]
        assert symbols == symbols[::-1], "pyramid is a palindrome"
        assert symbols[0] is PITCH_LADDER[0]


def test_ladder_runs_are_monotonic():
    for seed in range(30):
        for ascending in (True, False):
            state = _state(target=12, seed=seed)
            LadderRun("run", ascending=ascending).generate(state)
            steps = [PITCH_LADDER.index(w.symbol) for w in state.words if w.symbol in PITCH_LADDER]
            assert len(steps) >= 2
            diffs = [b - a for a, b in zip(steps, steps[1:])]
            assert all(d == (1 if ascending else -1) for d in diffs)


def test_motif_validation():
    with pytest.raises(ValueError):
        Motif("bad", "")
    with pytest.raises(ValueError):
        Motif("bad", "bb_")
    with pytest.raises(ValueError):
        Motif("bad", "b__b")
    with pytest.raises(KeyError):
        Motif("bad", "bx")


def test_motif_weight_respects_silence_rules():
    knock = Motif("knock", "bb_B")
    # silence would land at position 2 of target 3 -> not allowed
    assert knock.weight(_state(target=3)) == 0.0
    assert knock.weight(_state(target=8)) > 0
    lead_in = Motif("lead_in", "_zz_w", weight=1.0, min_position=2)
    assert lead_in.weight(_state(target=10)) == 0.0
    assert lead_in.weight(_state(target=10, words=[Symbol.BUZZ, Symbol.BUZZ])) > 0
    assert lead_in.weight(_state(target=10, words=[Symbol.BUZZ, Symbol.SILENCE])) == 0.0


def test_motif_run_shares_identity_per_symbol():
    state = _state(target=10, words=[Symbol.BUZZ, Symbol.BUZZ])
    Motif("lead_in", "_zz_w").generate(state)
    emitted = state.words[2:]
    assert [w.symbol.value for w in emitted] == list("_zz_w")
    assert emitted[1].identity == emitted[2].identity


def test_repeat_shares_identity():
    for seed in range(30):
        state = _state(target=10, seed=seed)
        Repeat().generate(state)
        assert len({w.symbol for w in state.words}) == 1
        assert len({w.identity for w in state.words}) == 1
        assert 1 <= len(state.words) <= 3


def test_default_catalog_names():
    names = {e.name for e in DEFAULT_CATALOG}
    assert {"repeat", "contrast", "ascending", "descending", "pyramid", "silence"} <= names


# -----------------------------------------------------------------------------
# Ramble grammar
# -----------------------------------------------------------------------------

def test_ramble_invariants_across_seeds():
    grammar = RambleGrammar()
    for seed in SEEDS:
        words = grammar.generate(GenerationContext(seed))
        # the target is the first draw from the seeded context
        target = GenerationContext(seed).randint(*grammar.length_range)
        name = f"ramble seed {seed}"
        assert len(words) >= target, f"{name}: {len(words)} < target {target}"
        _assert_silence_rules(words, target, name)
        _assert_pool_cap(words, 3, name)


def test_ramble_no_pause_near_target_end():
    # target 2: position 0 and position target - 1 both exclude pauses
    grammar = RambleGrammar(length_range=(2, 2))
    for seed in SEEDS:
        words = grammar.generate(GenerationContext(seed))
        assert not any(w.symbol.is_silence for w in words), f"ramble seed {seed}"


def test_ramble_deterministic_for_seed():
    grammar = RambleGrammar()
    assert grammar.generate(GenerationContext(8)) == grammar.generate(GenerationContext(8))


def test_grammar_for_settings():
    assert isinstance(grammar_for(Settings()), GrammarEngine)
    assert isinstance(grammar_for(Settings(grammar="ramble")), RambleGrammar)
    with pytest.raises(ValueError):
        grammar_for(Settings(grammar="poetry"))
