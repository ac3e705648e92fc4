from typing import Dict, List, Optional

from robospeak.core.context import GenerationContext
from robospeak.core.types import Symbol, Word
from robospeak.grammar.identity import IdentityRegistry


class GrammarState:
    """Everything an expression may look at or extend during one generation."""

    def __init__(self, target: int, registry: IdentityRegistry, ctx: GenerationContext):
        self.target = target
        self.registry = registry
        self.ctx = ctx
        self.words: List[Word] = []

    @property
    def position(self) -> int:
        return len(self.words)

    @property
    def remaining(self) -> int:
        return self.target - len(self.words)

    @property
    def last(self) -> Optional[Word]:
        return self.words[-1] if self.words else None

    def emit(self, symbol: Symbol, identity: str) -> Word:
        word = Word(symbol, identity)
        self.words.append(word)
        return word

    def run(self) -> "Run":
        return Run(self)


class Run:
    """
    Identity scope of one expression invocation: each distinct sound symbol gets one
    identity for the whole run, every silence asks the registry on its own.
    """

    def __init__(self, state: GrammarState):
        self.state = state
        self._identities: Dict[Symbol, str] = {}

    def identity_for(self, symbol: Symbol) -> str:
        if symbol.is_silence:
            return self.state.registry.get_or_create(symbol)
        identity = self._identities.get(symbol)
        if identity is None:
            identity = self.state.registry.get_or_create(symbol)
            self._identities[symbol] = identity
        return identity

    def emit(self, symbol: Symbol) -> Word:
        return self.state.emit(symbol, self.identity_for(symbol))
