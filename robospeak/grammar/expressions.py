"""
Expression catalog for the subphrase grammar.

An expression is a named pattern rule with a context-sensitive weight and a generate
action that appends one or more words to the state. Weights are pure functions of the
state; generate is the only place words are emitted.

Silence placement rules (shared by `Wait` and silence-bearing motifs): a silence never
lands at position 0, never at or past target - 1, and never directly after another
silence.
"""
from typing import Sequence, Tuple

from robospeak.core.types import SOUND_SYMBOLS, Symbol
from robospeak.grammar.state import GrammarState

# Ordered low to high by base frequency band.
PITCH_LADDER: Tuple[Symbol, ...] = (
    Symbol.LOW_BEEP,
    Symbol.WARBLE,
    Symbol.UP_ARPEGGIO,
    Symbol.HIGH_BEEP,
)

# Upper bound for a repeat run is drawn from this table; mostly single hits.
REPEAT_LIMITS: Tuple[int, ...] = (1, 1, 1, 1, 1, 1, 1, 1, 2, 2, 3, 3)


def silence_allowed_at(state: GrammarState, position: int) -> bool:
    if position == 0 or position >= state.target - 1:
        return False
    if position == state.position and state.last is not None and state.last.symbol.is_silence:
        return False
    return True


class Expression:
    name = "expression"

    def weight(self, state: GrammarState) -> float:
        raise NotImplementedError

    def generate(self, state: GrammarState) -> None:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class Repeat(Expression):
    """One sound symbol, 1..k times. Constant positive weight: the catalog's liveness base."""

    name = "repeat"

    def __init__(self, weight: float = 10.0, symbols: Sequence[Symbol] = SOUND_SYMBOLS):
        if weight < 1:
            raise ValueError("repeat weight must be >= 1")
        self._weight = weight
        self.symbols = tuple(symbols)

    def weight(self, state: GrammarState) -> float:
        return self._weight

    def generate(self, state: GrammarState) -> None:
        ctx = state.ctx
        symbol = ctx.choice(self.symbols)
        count = ctx.randint(1, ctx.choice(REPEAT_LIMITS))
        run = state.run()
        for _ in range(count):
            run.emit(symbol)


class Contrast(Expression):
    """Two different sound symbols back to back, sometimes echoing the first (X Y X)."""

    name = "contrast"

    def __init__(self, weight: float = 6.0, echo_chance: float = 0.3, symbols: Sequence[Symbol] = SOUND_SYMBOLS):
        self._weight = weight
        self.echo_chance = echo_chance
        self.symbols = tuple(symbols)

    def weight(self, state: GrammarState) -> float:
        return self._weight

    def generate(self, state: GrammarState) -> None:
        ctx = state.ctx
        first = ctx.choice(self.symbols)
        second = ctx.choice([s for s in self.symbols if s is not first])
        run = state.run()
        run.emit(first)
        run.emit(second)
        if ctx.random() < self.echo_chance:
            run.emit(first)


class LadderRun(Expression):
    """2..len(ladder) contiguous ladder steps, upward or downward, optionally closed by a sweep."""

    def __init__(
        self,
        name: str,
        ascending: bool,
        weight: float = 3.0,
        ladder: Sequence[Symbol] = PITCH_LADDER,
        sweep_chance: float = 0.5,
    ):
        if len(ladder) < 2:
            raise ValueError("ladder needs at least two steps")
        self.name = name
        self.ascending = ascending
        self._weight = weight
        self.ladder = tuple(ladder)
        self.sweep_chance = sweep_chance

    def weight(self, state: GrammarState) -> float:
        return self._weight

    def generate(self, state: GrammarState) -> None:
        ctx = state.ctx
        steps = ctx.randint(2, len(self.ladder))
        start = ctx.randint(0, len(self.ladder) - steps)
        window = self.ladder[start:start + steps]
        if not self.ascending:
            window = tuple(reversed(window))

        run = state.run()
        for symbol in window:
            run.emit(symbol)
        if ctx.random() < self.sweep_chance:
            run.emit(Symbol.UP_SWEEP if self.ascending else Symbol.DOWN_SWEEP)


class Pyramid(Expression):
    """Up the ladder to a peak and back down; the descent reuses the ascent's identities."""

    name = "pyramid"

    def __init__(self, weight: float = 2.0, ladder: Sequence[Symbol] = PITCH_LADDER, min_room: int = 3):
        self._weight = weight
        self.ladder = tuple(ladder)
        self.min_room = min_room

    def weight(self, state: GrammarState) -> float:
        if state.remaining < self.min_room:
            return 0.0
        return self._weight

    def generate(self, state: GrammarState) -> None:
        peak = state.ctx.randint(2, len(self.ladder))
        ascent = self.ladder[:peak]
        run = state.run()
        for symbol in ascent + tuple(reversed(ascent[:-1])):
            run.emit(symbol)


class Motif(Expression):
    """
    Fixed rhythmic pattern written as symbol codes, e.g. "bb_B".
    Weighted 0 while any silence in it would break the placement rules, or while fewer
    than `min_position` words have been built.
    """

    def __init__(self, name: str, pattern: str, weight: float = 2.0, min_position: int = 0):
        symbols = tuple(Symbol.from_code(c) for c in pattern)
        if not symbols:
            raise ValueError(f"motif {name!r} is empty")
        if symbols[-1].is_silence:
            raise ValueError(f"motif {name!r} must not end in silence")
        for a, b in zip(symbols, symbols[1:]):
            if a.is_silence and b.is_silence:
                raise ValueError(f"motif {name!r} contains consecutive silences")
        self.name = name
        self.pattern = pattern
        self.symbols = symbols
        self._weight = weight
        self.min_position = min_position

    def weight(self, state: GrammarState) -> float:
        if state.position < self.min_position:
            return 0.0
        for offset, symbol in enumerate(self.symbols):
            if symbol.is_silence and not silence_allowed_at(state, state.position + offset):
                return 0.0
        return self._weight

    def generate(self, state: GrammarState) -> None:
        run = state.run()
        for symbol in self.symbols:
            run.emit(symbol)


class Wait(Expression):
    """Single silence. Common, but never first, never doubled, never at the target's end."""

    name = "silence"

    def __init__(self, weight: float = 25.0):
        self._weight = weight

    def weight(self, state: GrammarState) -> float:
        if not silence_allowed_at(state, state.position):
            return 0.0
        return self._weight

    def generate(self, state: GrammarState) -> None:
        state.run().emit(Symbol.SILENCE)


DEFAULT_CATALOG: Tuple[Expression, ...] = (
    Repeat(),
    Contrast(),
    LadderRun("ascending", ascending=True),
    LadderRun("descending", ascending=False),
    Pyramid(),
    Motif("knock", "bb_B"),
    Motif("question", "B_BS"),
    Motif("lead_in", "_zz_w", weight=1.0, min_position=2),
    Wait(),
)
