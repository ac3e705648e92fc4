"""
Weighted selector and generation context: validation, zero weights, determinism.
Run from project root: python -m pytest tests/test_select.py -v
"""
import sys
import os
import random

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest

from robospeak.core.context import GenerationContext
from robospeak.core.errors import InvalidWeights
from robospeak.core.select import choice, randint, weighted_choice


class _FixedRandom(random.Random):
    """Random source whose random() always returns the same value."""

    def __init__(self, value):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


# -----------------------------------------------------------------------------
# weighted_choice
# -----------------------------------------------------------------------------

@pytest.mark.parametrize(
    "items, weights",
    [
        ([], []),
        (["a", "b"], [1.0]),
        (["a"], [-1.0]),
        (["a", "b"], [0.0, 0.0]),
        (["a"], [float("nan")]),
        (["a"], [float("inf")]),
    ],
)
def test_weighted_choice_rejects_degenerate_weights(items, weights):
    with pytest.raises(InvalidWeights):
        weighted_choice(items, weights, random.Random(0))


def test_invalid_weights_is_value_error():
    with pytest.raises(ValueError):
        weighted_choice(["a"], [0.0], random.Random(0))


def test_zero_weight_never_selected():
    rng = random.Random(7)
    for _ in range(2000):
        assert weighted_choice(["never", "a", "b"], [0.0, 1.0, 3.0], rng) != "never"


def test_scan_order():
    # total 4: r in [0, 1) -> a, [1, 4) -> b
    assert weighted_choice(["a", "b"], [1.0, 3.0], _FixedRandom(0.0)) == "a"
    assert weighted_choice(["a", "b"], [1.0, 3.0], _FixedRandom(0.24)) == "a"
    assert weighted_choice(["a", "b"], [1.0, 3.0], _FixedRandom(0.26)) == "b"


def test_rounding_falls_back_to_last_item():
    assert weighted_choice(["a", "b"], [1.0, 1.0], _FixedRandom(1.0)) == "b"


def test_rounding_fallback_skips_zero_weight_tail():
    assert weighted_choice(["a", "b", "c"], [1.0, 2.0, 0.0], _FixedRandom(1.0)) == "b"
    assert weighted_choice(["a", "b", "c"], [1.0, 0.0, 0.0], _FixedRandom(1.0)) == "a"


def test_weighted_choice_distribution():
    rng = random.Random(42)
    counts = {"a": 0, "b": 0}
    for _ in range(10000):
        counts[weighted_choice(["a", "b"], [1.0, 3.0], rng)] += 1
    ratio = counts["b"] / counts["a"]
    assert 2.5 < ratio < 3.5, f"expected ~3:1, got {counts}"


# -----------------------------------------------------------------------------
# choice / randint
# -----------------------------------------------------------------------------

def test_choice_empty_raises():
    with pytest.raises(InvalidWeights):
        choice([], random.Random(0))


def test_randint_inclusive_bounds():
    rng = random.Random(3)
    seen = {randint(5, 11, rng) for _ in range(2000)}
    assert seen == set(range(5, 12))


def test_randint_empty_range():
    with pytest.raises(ValueError):
        randint(3, 2, random.Random(0))


# -----------------------------------------------------------------------------
# GenerationContext
# -----------------------------------------------------------------------------

def test_context_identities_monotonic():
    ctx = GenerationContext(seed=1)
    assert [ctx.next_identity() for _ in range(4)] == ["1", "2", "3", "4"]
    assert ctx.identities_issued == 4


def test_context_instance_ids_unique():
    ctx = GenerationContext(seed=1)
    ids = {ctx.next_instance_id("z") for _ in range(10)}
    assert len(ids) == 10


def test_context_seed_determinism():
    a = GenerationContext(seed=99)
    b = GenerationContext(seed=99)
    assert [a.uniform(0, 1) for _ in range(5)] == [b.uniform(0, 1) for _ in range(5)]
    assert [a.randint(1, 6) for _ in range(5)] == [b.randint(1, 6) for _ in range(5)]


def test_context_uniform_half_open():
    ctx = GenerationContext(rng=_FixedRandom(0.0))
    assert ctx.uniform(50.0, 300.0) == 50.0
    ctx = GenerationContext(seed=5)
    for _ in range(500):
        v = ctx.uniform(50.0, 300.0)
        assert 50.0 <= v < 300.0
